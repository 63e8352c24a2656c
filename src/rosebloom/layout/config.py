"""
Configuration for bouquet layout generation.
"""

from dataclasses import dataclass
from typing import Tuple

from rosebloom.layout.stems import DEFAULT_BULGE, DEFAULT_LIFT_RANGE, DEFAULT_ORIGIN, Vec3


@dataclass
class BouquetConfig:
    """Tunables for stem paths and ornament attributes."""
    # Stem paths
    origin: Vec3 = DEFAULT_ORIGIN
    lift_range: Tuple[float, float] = DEFAULT_LIFT_RANGE
    bulge: float = DEFAULT_BULGE

    # Growth timing (ms)
    max_delay_ms: float = 3000.0
    growth_window_ms: float = 2000.0  # time for a stem to grow base to head
    bloom_offset_ms: float = 1200.0  # head opens this long after its stem starts

    # Flower head scale
    base_scale_range: Tuple[float, float] = (0.025, 0.05)
    height_bias: float = 0.2
    quality_multiplier: float = 1.5

    # Probability of the accent color; the primary color takes the rest
    accent_probability: float = 0.4

    # Leaves
    leaf_param_range: Tuple[float, float] = (0.3, 0.7)
    leaf_pair_probability: float = 0.5
    leaf_scale_range: Tuple[float, float] = (0.6, 1.0)  # relative to head scale
