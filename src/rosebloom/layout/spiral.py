"""
Golden-angle spiral sampling of the bouquet dome.

Points are laid out on the upper part of a unit sphere so that successive
stems land roughly 137.5 degrees apart, which avoids visible banding for any
stem count. Density is biased toward the crown of the dome; the bottom 5% of
the height is left for base fill.
"""

import logging
import math
from dataclasses import dataclass
from typing import List

import numpy as np

logger = logging.getLogger(__name__)

GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))

# y runs from 1.0 at the crown down to 1.0 - HEIGHT_SPAN at the base
HEIGHT_SPAN = 0.95


@dataclass(frozen=True)
class DomeSample:
    """A single point on the unit dome, used as a stem's target direction."""
    index: int
    x: float
    y: float
    z: float


def dome_points(count: int) -> np.ndarray:
    """
    Vectorized dome sampling.

    Args:
        count: Number of points.

    Returns:
        (count, 3) float64 array of (x, y, z). Empty (0, 3) when count < 1.
    """
    if count < 1:
        logger.debug("dome_points called with count=%s, returning no points", count)
        return np.zeros((0, 3), dtype=np.float64)

    i = np.arange(count, dtype=np.float64)
    t = i / (count - 1) if count > 1 else np.zeros_like(i)

    y = 1.0 - t * HEIGHT_SPAN
    radius = np.sqrt(np.clip(1.0 - y * y, 0.0, None))
    theta = GOLDEN_ANGLE * i

    return np.stack([np.cos(theta) * radius, y, np.sin(theta) * radius], axis=-1)


def sample_dome(count: int) -> List[DomeSample]:
    """Returns `count` DomeSamples in spiral order (crown first)."""
    points = dome_points(count)
    return [
        DomeSample(index=i, x=float(x), y=float(y), z=float(z))
        for i, (x, y, z) in enumerate(points)
    ]
