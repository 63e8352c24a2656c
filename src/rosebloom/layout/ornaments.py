"""
Ornament attributes for a stem: growth delay, head scale, color, leaves and
the orientation of the flower head.

All randomness is drawn from bounded uniform ranges, so every attribute stays
inside a documented interval regardless of the random source:

- delay_ms in [0, max_delay_ms)
- scale in scale_bounds(profile, config)
- leaf position_param in leaf_param_range, leaf delay >= stem delay
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np
from scipy.spatial.transform import Rotation

from rosebloom.layout.config import BouquetConfig
from rosebloom.layout.density import DensityProfile
from rosebloom.layout.spiral import DomeSample
from rosebloom.layout.stems import StemCurve, Vec3

WORLD_UP: Vec3 = (0.0, 1.0, 0.0)

# Below this, from/to vectors are treated as opposite
_ANTIPARALLEL_EPSILON = 1e-8


class StemColor(str, Enum):
    PRIMARY_RED = "#d00000"
    ACCENT_PINK = "#ff4d6d"


@dataclass(frozen=True)
class Orientation:
    """Rotation as a unit quaternion (x, y, z, w) plus intrinsic XYZ Euler angles."""
    quaternion: Tuple[float, float, float, float]
    euler: Tuple[float, float, float]

    @classmethod
    def from_rotation(cls, rotation: Rotation) -> "Orientation":
        q = rotation.as_quat()
        e = rotation.as_euler("XYZ")
        return cls(
            quaternion=(float(q[0]), float(q[1]), float(q[2]), float(q[3])),
            euler=(float(e[0]), float(e[1]), float(e[2])),
        )

    def as_rotation(self) -> Rotation:
        return Rotation.from_quat(self.quaternion)


IDENTITY = Orientation(quaternion=(0.0, 0.0, 0.0, 1.0), euler=(0.0, 0.0, 0.0))


@dataclass(frozen=True)
class LeafAttachment:
    position_param: float  # curve fraction where the leaf sits
    angle: float  # spin about the stem tangent, radians
    scale: float
    delay_ms: float


@dataclass(frozen=True)
class FlowerHead:
    position: Vec3
    orientation: Orientation
    bloom_delay_ms: float


@dataclass(frozen=True)
class StemRecord:
    id: int
    curve: StemCurve
    delay_ms: float
    scale: float
    color: StemColor
    leaves: Tuple[LeafAttachment, ...]
    head: FlowerHead


def _unit(v) -> Optional[np.ndarray]:
    v = np.asarray(v, dtype=np.float64)
    n = float(np.linalg.norm(v))
    if n == 0.0 or not math.isfinite(n):
        return None
    return v / n


def orient(reference_up: Vec3, tangent: Vec3) -> Orientation:
    """
    Shortest-arc rotation taking `reference_up` onto `tangent`.

    Opposite vectors get a half turn about an axis perpendicular to
    `reference_up`. A zero-length input yields the identity.
    """
    a = _unit(reference_up)
    b = _unit(tangent)
    if a is None or b is None:
        return IDENTITY

    r = float(np.dot(a, b)) + 1.0
    if r < _ANTIPARALLEL_EPSILON:
        r = 0.0
        if abs(a[0]) > abs(a[2]):
            q = np.array([-a[1], a[0], 0.0, r])
        else:
            q = np.array([0.0, -a[2], a[1], r])
    else:
        c = np.cross(a, b)
        q = np.array([c[0], c[1], c[2], r])

    return Orientation.from_rotation(Rotation.from_quat(q / np.linalg.norm(q)))


def leaf_pose(curve: StemCurve, leaf: LeafAttachment) -> Tuple[Vec3, Orientation]:
    """Position of a leaf on its stem and its orientation (tangent-aligned, spun by angle)."""
    position = curve.point_at(leaf.position_param)
    tangent = curve.tangent_at(leaf.position_param)
    base = orient(WORLD_UP, tangent).as_rotation()
    spin = Rotation.from_rotvec(np.asarray(tangent) * leaf.angle)
    return position, Orientation.from_rotation(spin * base)


def scale_bounds(profile: DensityProfile, config: Optional[BouquetConfig] = None) -> Tuple[float, float]:
    """Closed interval every head scale falls in for the given profile."""
    cfg = config or BouquetConfig()
    lo, hi = cfg.base_scale_range
    k = profile.scale_multiplier * cfg.quality_multiplier
    return lo * k, hi * (1.0 + cfg.height_bias) * k


def derive_ornaments(
    sample: DomeSample,
    curve: StemCurve,
    profile: DensityProfile,
    rng: Optional[np.random.Generator] = None,
    config: Optional[BouquetConfig] = None,
) -> StemRecord:
    """
    Derive the StemRecord for one stem.

    Head scale grows slightly with dome height: taller stems render a little
    larger, never smaller than the base range floor. Leaves sit on the middle
    of the stem and their delays trail the growth wavefront.
    """
    rng = rng if rng is not None else np.random.default_rng()
    cfg = config or BouquetConfig()

    delay_ms = float(rng.uniform(0.0, cfg.max_delay_ms))

    lo, hi = cfg.base_scale_range
    base = float(rng.uniform(lo, hi))
    height = min(max(sample.y, 0.0), 1.0)
    scale = base * (1.0 + height * cfg.height_bias) * profile.scale_multiplier * cfg.quality_multiplier

    color = StemColor.ACCENT_PINK if rng.random() < cfg.accent_probability else StemColor.PRIMARY_RED

    n_leaves = 2 if rng.random() < cfg.leaf_pair_probability else 1
    p_lo, p_hi = cfg.leaf_param_range
    s_lo, s_hi = cfg.leaf_scale_range
    params = sorted(float(rng.uniform(p_lo, p_hi)) for _ in range(n_leaves))
    leaves = tuple(
        LeafAttachment(
            position_param=param,
            angle=float(rng.uniform(0.0, 2.0 * math.pi)) % (2.0 * math.pi),
            scale=scale * float(rng.uniform(s_lo, s_hi)),
            delay_ms=delay_ms + param * cfg.growth_window_ms,
        )
        for param in params
    )

    head = FlowerHead(
        position=curve.end,
        orientation=orient(WORLD_UP, curve.tangent_at(1.0)),
        bloom_delay_ms=delay_ms + cfg.bloom_offset_ms,
    )

    return StemRecord(
        id=sample.index,
        curve=curve,
        delay_ms=delay_ms,
        scale=scale,
        color=color,
        leaves=leaves,
        head=head,
    )
