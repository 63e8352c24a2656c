"""
Viewport-dependent bouquet density.

Narrow viewports get an order of magnitude fewer stems, a tighter dome and
larger flower heads, so the bouquet still reads as full at a fraction of the
cost. The policy is a pure threshold on the width handed in by the host; it
keeps no record of earlier classifications.
"""

import logging
import math
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DensityProfile:
    """Stem count, dome spread and head-scale compensation for one device class."""
    total_count: int
    spread: float
    scale_multiplier: float


LOW_DENSITY = DensityProfile(total_count=80, spread=4.0, scale_multiplier=2.5)
HIGH_DENSITY = DensityProfile(total_count=800, spread=5.0, scale_multiplier=1.0)


@dataclass(frozen=True)
class DensityPolicy:
    """Width threshold policy. Widths strictly below `breakpoint` are low density."""
    breakpoint: int = 768
    low: DensityProfile = field(default=LOW_DENSITY)
    high: DensityProfile = field(default=HIGH_DENSITY)

    def classify(self, viewport_width: float) -> DensityProfile:
        try:
            width = float(viewport_width)
        except (TypeError, ValueError):
            logger.debug("Unreadable viewport width %r, using low density", viewport_width)
            return self.low

        if not math.isfinite(width) or width < self.breakpoint:
            return self.low
        return self.high


DEFAULT_POLICY = DensityPolicy()


def classify(viewport_width: float) -> DensityProfile:
    """Classify with the default 768-unit breakpoint."""
    return DEFAULT_POLICY.classify(viewport_width)
