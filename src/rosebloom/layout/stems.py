"""
Stem path construction.

Each stem is a smooth three-point curve from the shared cluster origin,
through a midpoint pushed outward on the horizontal plane, to a fanned-out
end point on the scaled dome. Curves are evaluated as centripetal
Catmull-Rom splines so the arc passes through all three control points.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from rosebloom.layout.spiral import DomeSample

Vec3 = Tuple[float, float, float]

DEFAULT_ORIGIN: Vec3 = (0.0, -4.0, 0.0)
DEFAULT_LIFT_RANGE: Tuple[float, float] = (1.0, 3.0)
DEFAULT_BULGE = 1.6

# Finite-difference step used for tangents
_TANGENT_DELTA = 1e-4
# Knot spacings below this collapse onto the middle span
_KNOT_EPSILON = 1e-4


def _hermite(x0: np.ndarray, x1: np.ndarray, x2: np.ndarray, x3: np.ndarray,
             dt0: float, dt1: float, dt2: float, w: float) -> np.ndarray:
    """Non-uniform Catmull-Rom segment between x1 and x2, evaluated at w."""
    t1 = ((x1 - x0) / dt0 - (x2 - x0) / (dt0 + dt1) + (x2 - x1) / dt1) * dt1
    t2 = ((x2 - x1) / dt1 - (x3 - x1) / (dt1 + dt2) + (x3 - x2) / dt2) * dt1

    c0 = x1
    c1 = t1
    c2 = -3 * x1 + 3 * x2 - 2 * t1 - t2
    c3 = 2 * x1 - 2 * x2 + t1 + t2
    return c0 + c1 * w + c2 * w * w + c3 * w * w * w


@dataclass(frozen=True)
class StemCurve:
    """Three control points of a stem: shared start, bulged control, end."""
    start: Vec3
    control: Vec3
    end: Vec3

    def control_points(self) -> np.ndarray:
        return np.array([self.start, self.control, self.end], dtype=np.float64)

    def point_at(self, u: float) -> Vec3:
        """
        Point on the curve at parameter u in [0, 1].

        u = 0 returns `start` exactly, u = 1 returns `end` (within float error).
        """
        pts = self.control_points()
        n = len(pts)
        u = min(max(float(u), 0.0), 1.0)

        p = (n - 1) * u
        seg = int(math.floor(p))
        w = p - seg
        if seg >= n - 1:
            seg = n - 2
            w = 1.0

        x1 = pts[seg]
        x2 = pts[seg + 1]
        x0 = pts[seg - 1] if seg > 0 else 2 * pts[0] - pts[1]
        x3 = pts[seg + 2] if seg + 2 < n else 2 * pts[n - 1] - pts[n - 2]

        # Centripetal parametrization: knot spacing is sqrt(distance)
        dt0 = float(np.sum((x0 - x1) ** 2)) ** 0.25
        dt1 = float(np.sum((x1 - x2) ** 2)) ** 0.25
        dt2 = float(np.sum((x2 - x3) ** 2)) ** 0.25
        if dt1 < _KNOT_EPSILON:
            dt1 = 1.0
        if dt0 < _KNOT_EPSILON:
            dt0 = dt1
        if dt2 < _KNOT_EPSILON:
            dt2 = dt1

        out = _hermite(x0, x1, x2, x3, dt0, dt1, dt2, w)
        return (float(out[0]), float(out[1]), float(out[2]))

    def tangent_at(self, u: float) -> Vec3:
        """Unit tangent at u. Degenerate curves return (0, 1, 0)."""
        u1 = max(u - _TANGENT_DELTA, 0.0)
        u2 = min(u + _TANGENT_DELTA, 1.0)
        d = np.subtract(self.point_at(u2), self.point_at(u1))
        norm = float(np.linalg.norm(d))
        if norm == 0.0 or not math.isfinite(norm):
            return (0.0, 1.0, 0.0)
        d = d / norm
        return (float(d[0]), float(d[1]), float(d[2]))

    def sample(self, n: int = 12) -> np.ndarray:
        """Returns an (n + 1, 3) polyline from start to end."""
        n = max(int(n), 1)
        return np.array([self.point_at(i / n) for i in range(n + 1)], dtype=np.float64)


def build_stem_curve(
    sample: DomeSample,
    origin: Vec3 = DEFAULT_ORIGIN,
    spread: float = 5.0,
    lift_range: Tuple[float, float] = DEFAULT_LIFT_RANGE,
    bulge: float = DEFAULT_BULGE,
    rng: Optional[np.random.Generator] = None,
) -> StemCurve:
    """
    Build the path for one stem.

    Args:
        sample: Target direction on the unit dome.
        origin: Shared start point of every stem.
        spread: Dome radius in scene units.
        lift_range: (low, high) for the uniform extra height of the end point.
        bulge: Horizontal scale applied to the midpoint; 1.0 gives a straight stem.
        rng: Random source for the lift.

    Returns:
        StemCurve whose `start` is `origin` unchanged.
    """
    rng = rng if rng is not None else np.random.default_rng()
    lo, hi = lift_range
    lift = float(rng.uniform(lo, hi)) if hi > lo else float(lo)

    start = (float(origin[0]), float(origin[1]), float(origin[2]))
    end = (sample.x * spread, sample.y * spread + lift, sample.z * spread)

    mid_x = (start[0] + end[0]) * 0.5
    mid_y = (start[1] + end[1]) * 0.5
    mid_z = (start[2] + end[2]) * 0.5
    control = (mid_x * bulge, mid_y, mid_z * bulge)

    return StemCurve(start=start, control=control, end=end)
