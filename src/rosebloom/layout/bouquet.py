"""
Bouquet layout generation.

Chains the stages: density profile -> dome samples -> stem curves -> stem
records. Generation has no side effects beyond its return value, so a host
can discard a half-built bouquet by dropping the reference.
"""

import logging
from typing import List, Optional

import numpy as np

from rosebloom.layout.config import BouquetConfig
from rosebloom.layout.density import DensityProfile
from rosebloom.layout.ornaments import StemRecord, derive_ornaments
from rosebloom.layout.spiral import sample_dome
from rosebloom.layout.stems import build_stem_curve

logger = logging.getLogger(__name__)


def generate_bouquet(
    profile: DensityProfile,
    rng: Optional[np.random.Generator] = None,
    config: Optional[BouquetConfig] = None,
) -> List[StemRecord]:
    """
    Generate every stem of a bouquet.

    Args:
        profile: Stem count, spread and scale compensation.
        rng: Random source for lift, delays, scales, colors and leaves.
            Pass a seeded Generator for repeatable layouts.
        config: Layout tunables.

    Returns:
        One StemRecord per stem, ordered by spiral index (crown first).
    """
    cfg = config or BouquetConfig()
    rng = rng if rng is not None else np.random.default_rng()

    if profile.total_count < 1:
        logger.debug("Empty bouquet requested (total_count=%s)", profile.total_count)
        return []

    records = []
    for sample in sample_dome(profile.total_count):
        curve = build_stem_curve(
            sample,
            origin=cfg.origin,
            spread=profile.spread,
            lift_range=cfg.lift_range,
            bulge=cfg.bulge,
            rng=rng,
        )
        records.append(derive_ornaments(sample, curve, profile, rng=rng, config=cfg))

    logger.debug("Generated bouquet with %d stems", len(records))
    return records
