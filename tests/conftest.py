"""Pytest configuration and shared fixtures."""

import random

import numpy as np
import pytest

from rosebloom.layout.density import DensityProfile
from rosebloom.particles.simulator import Bounds

TEST_SEED = 42


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded layout random source."""
    return np.random.default_rng(TEST_SEED)


@pytest.fixture
def py_rng() -> random.Random:
    """Seeded particle random source."""
    return random.Random(TEST_SEED)


@pytest.fixture
def bounds() -> Bounds:
    """An 800x600 drawing surface."""
    return Bounds(800, 600)


@pytest.fixture
def unit_profile() -> DensityProfile:
    """800 stems with no scale compensation."""
    return DensityProfile(total_count=800, spread=5.0, scale_multiplier=1.0)


@pytest.fixture
def small_profile() -> DensityProfile:
    """A cheap profile for tests that do not need the full bouquet."""
    return DensityProfile(total_count=25, spread=4.0, scale_multiplier=2.5)


class MidpointRng:
    """
    Stand-in for numpy's Generator that always returns the middle of the range.

    Lets a test pin every random draw without changing the algorithm.
    """

    def uniform(self, low=0.0, high=1.0):
        return (low + high) / 2.0

    def random(self):
        return 0.5


@pytest.fixture
def midpoint_rng() -> MidpointRng:
    return MidpointRng()
