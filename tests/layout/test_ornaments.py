"""Tests for ornament attribute derivation and orientation."""

import math
from collections import Counter

import numpy as np
import pytest
from scipy.spatial.transform import Rotation

from rosebloom.layout.config import BouquetConfig
from rosebloom.layout.density import DensityProfile
from rosebloom.layout.ornaments import (
    IDENTITY,
    StemColor,
    derive_ornaments,
    leaf_pose,
    orient,
    scale_bounds,
)
from rosebloom.layout.spiral import DomeSample, sample_dome
from rosebloom.layout.stems import build_stem_curve


def _records(profile, rng, count=300):
    out = []
    for s in sample_dome(count):
        curve = build_stem_curve(s, spread=profile.spread, rng=rng)
        out.append((s, derive_ornaments(s, curve, profile, rng=rng)))
    return out


class TestDeriveOrnaments:
    def test_delay_bounded(self, unit_profile, rng):
        for _, rec in _records(unit_profile, rng):
            assert 0.0 <= rec.delay_ms < 3000.0

    @pytest.mark.parametrize("multiplier", [1.0, 2.5])
    def test_scale_bounded_and_positive(self, rng, multiplier):
        profile = DensityProfile(total_count=300, spread=5.0, scale_multiplier=multiplier)
        lo, hi = scale_bounds(profile)
        assert lo == pytest.approx(0.025 * 1.5 * multiplier)
        assert hi == pytest.approx(0.05 * 1.2 * 1.5 * multiplier)
        for _, rec in _records(profile, rng):
            assert rec.scale > 0
            assert lo <= rec.scale <= hi

    def test_scale_non_decreasing_with_height(self, unit_profile, midpoint_rng):
        # Same base draw for every stem: only dome height differs
        samples = sample_dome(50)
        scales = []
        for s in samples:
            curve = build_stem_curve(s, rng=midpoint_rng)
            scales.append(derive_ornaments(s, curve, unit_profile, rng=midpoint_rng).scale)
        heights = [s.y for s in samples]
        order = np.argsort(heights)
        assert all(np.diff(np.array(scales)[order]) >= 0)

    def test_scale_multiplier_applies(self, midpoint_rng):
        s = DomeSample(index=0, x=0.0, y=1.0, z=0.0)
        curve = build_stem_curve(s, rng=midpoint_rng)
        low = DensityProfile(total_count=1, spread=4.0, scale_multiplier=2.5)
        high = DensityProfile(total_count=1, spread=4.0, scale_multiplier=1.0)
        a = derive_ornaments(s, curve, low, rng=midpoint_rng).scale
        b = derive_ornaments(s, curve, high, rng=midpoint_rng).scale
        assert a == pytest.approx(2.5 * b)

    def test_color_is_biased(self, rng):
        profile = DensityProfile(total_count=2000, spread=5.0, scale_multiplier=1.0)
        counts = Counter(rec.color for _, rec in _records(profile, rng, count=2000))
        share_red = counts[StemColor.PRIMARY_RED] / 2000
        assert set(counts) <= {StemColor.PRIMARY_RED, StemColor.ACCENT_PINK}
        assert 0.55 < share_red < 0.65

    def test_leaves_bounded(self, unit_profile, rng):
        seen = Counter()
        for _, rec in _records(unit_profile, rng):
            assert 1 <= len(rec.leaves) <= 2
            seen[len(rec.leaves)] += 1
            for leaf in rec.leaves:
                assert 0.3 <= leaf.position_param <= 0.7
                assert 0.0 <= leaf.angle < 2 * math.pi
                assert leaf.scale > 0
                assert leaf.delay_ms >= rec.delay_ms
        assert seen[1] > 0 and seen[2] > 0

    def test_leaf_delay_trails_growth(self, unit_profile, rng):
        cfg = BouquetConfig()
        for _, rec in _records(unit_profile, rng, count=50):
            for leaf in rec.leaves:
                expected = rec.delay_ms + leaf.position_param * cfg.growth_window_ms
                assert leaf.delay_ms == pytest.approx(expected)
            params = [leaf.position_param for leaf in rec.leaves]
            assert params == sorted(params)

    def test_head_at_curve_end(self, unit_profile, rng):
        for _, rec in _records(unit_profile, rng, count=20):
            assert rec.head.position == rec.curve.end
            assert rec.head.bloom_delay_ms == pytest.approx(rec.delay_ms + 1200.0)

    def test_head_aligned_with_end_tangent(self, unit_profile, rng):
        for _, rec in _records(unit_profile, rng, count=20):
            up = rec.head.orientation.as_rotation().apply([0.0, 1.0, 0.0])
            assert up == pytest.approx(np.array(rec.curve.tangent_at(1.0)), abs=1e-9)

    def test_id_matches_sample_index(self, unit_profile, rng):
        for s, rec in _records(unit_profile, rng, count=10):
            assert rec.id == s.index

    def test_custom_config(self, unit_profile, rng):
        cfg = BouquetConfig(max_delay_ms=100.0, accent_probability=1.0, leaf_pair_probability=0.0)
        s = sample_dome(5)[2]
        curve = build_stem_curve(s, rng=rng)
        rec = derive_ornaments(s, curve, unit_profile, rng=rng, config=cfg)
        assert rec.delay_ms < 100.0
        assert rec.color is StemColor.ACCENT_PINK
        assert len(rec.leaves) == 1


class TestOrient:
    @pytest.mark.parametrize("tangent", [
        (1.0, 0.0, 0.0),
        (0.0, 0.0, -1.0),
        (0.3, 0.9, -0.2),
        (0.0, 1.0, 0.0),
        (0.0, -1.0, 0.0),
    ])
    def test_maps_up_onto_tangent(self, tangent):
        o = orient((0.0, 1.0, 0.0), tangent)
        target = np.array(tangent) / np.linalg.norm(tangent)
        assert o.as_rotation().apply([0.0, 1.0, 0.0]) == pytest.approx(target, abs=1e-9)

    def test_quaternion_is_unit(self):
        o = orient((0.0, 1.0, 0.0), (1.0, 2.0, 3.0))
        assert np.linalg.norm(o.quaternion) == pytest.approx(1.0)

    def test_euler_matches_quaternion(self):
        o = orient((0.0, 1.0, 0.0), (0.5, 0.5, 0.2))
        from_euler = Rotation.from_euler("XYZ", o.euler)
        assert from_euler.apply([0.0, 1.0, 0.0]) == pytest.approx(o.as_rotation().apply([0.0, 1.0, 0.0]))

    def test_zero_tangent_is_identity(self):
        assert orient((0.0, 1.0, 0.0), (0.0, 0.0, 0.0)) == IDENTITY


def test_leaf_pose(unit_profile, rng):
    s = sample_dome(10)[4]
    curve = build_stem_curve(s, rng=rng)
    rec = derive_ornaments(s, curve, unit_profile, rng=rng)
    for leaf in rec.leaves:
        position, orientation = leaf_pose(curve, leaf)
        assert position == pytest.approx(curve.point_at(leaf.position_param))
        up = orientation.as_rotation().apply([0.0, 1.0, 0.0])
        assert up == pytest.approx(np.array(curve.tangent_at(leaf.position_param)), abs=1e-9)
