"""End-to-end tests for bouquet generation."""

import numpy as np
import pytest

from rosebloom.layout.bouquet import generate_bouquet
from rosebloom.layout.config import BouquetConfig
from rosebloom.layout.density import DensityProfile, classify
from rosebloom.layout.ornaments import scale_bounds


def test_full_bouquet(unit_profile, rng):
    records = generate_bouquet(unit_profile, rng=rng)

    assert len(records) == 800
    starts = {r.curve.start for r in records}
    assert starts == {(0.0, -4.0, 0.0)}
    assert [r.id for r in records] == list(range(800))

    # End height minus lift recovers y = 1 - 0.95 * i / 799
    for i, r in enumerate(records):
        y = 1.0 - 0.95 * i / 799
        lift = r.curve.end[1] - y * unit_profile.spread
        assert 1.0 - 1e-9 <= lift <= 3.0 + 1e-9

    lo, hi = scale_bounds(unit_profile)
    assert all(lo <= r.scale <= hi for r in records)


def test_seeded_generation_repeats():
    profile = DensityProfile(total_count=40, spread=5.0, scale_multiplier=1.0)
    a = generate_bouquet(profile, rng=np.random.default_rng(7))
    b = generate_bouquet(profile, rng=np.random.default_rng(7))
    assert a == b


def test_unseeded_generation_varies():
    profile = DensityProfile(total_count=40, spread=5.0, scale_multiplier=1.0)
    a = generate_bouquet(profile)
    b = generate_bouquet(profile)
    assert [r.delay_ms for r in a] != [r.delay_ms for r in b]
    # Structure is shared even when attributes differ
    assert [r.curve.start for r in a] == [r.curve.start for r in b]


def test_narrow_viewport_bouquet(rng):
    profile = classify(320)
    records = generate_bouquet(profile, rng=rng)
    assert len(records) == 80
    for r in records:
        horizontal = np.hypot(r.curve.end[0], r.curve.end[2])
        assert horizontal <= profile.spread + 1e-9


def test_custom_origin(small_profile, rng):
    cfg = BouquetConfig(origin=(1.0, 2.0, 3.0))
    records = generate_bouquet(small_profile, rng=rng, config=cfg)
    assert all(r.curve.start == (1.0, 2.0, 3.0) for r in records)


@pytest.mark.parametrize("count", [0, -5])
def test_empty_profile(count, rng):
    profile = DensityProfile(total_count=count, spread=5.0, scale_multiplier=1.0)
    assert generate_bouquet(profile, rng=rng) == []


def test_single_stem(rng):
    profile = DensityProfile(total_count=1, spread=5.0, scale_multiplier=1.0)
    (record,) = generate_bouquet(profile, rng=rng)
    assert record.curve.end[0] == pytest.approx(0.0)
    assert record.curve.end[2] == pytest.approx(0.0)
