"""
Spiral bouquet layout: dome sampling, stem paths and ornament attributes.
"""

from rosebloom.layout.bouquet import generate_bouquet
from rosebloom.layout.config import BouquetConfig
from rosebloom.layout.density import DensityPolicy, DensityProfile, classify
from rosebloom.layout.ornaments import (
    FlowerHead,
    LeafAttachment,
    Orientation,
    StemColor,
    StemRecord,
    derive_ornaments,
    leaf_pose,
    orient,
)
from rosebloom.layout.spiral import DomeSample, dome_points, sample_dome
from rosebloom.layout.stems import StemCurve, build_stem_curve
