"""
Tests for Noise Field
=====================

Run: pytest tests/test_noise_field.py -v
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from levelforge.generation.noise_field import NoiseField, build_permutation_table
from levelforge.generation.seeded_random import SeededRandomSource


class TestPermutationTable:
    """Seeded permutation table."""

    def test_is_doubled_permutation(self):
        """First half is a permutation of 0..255, second half repeats it."""
        perm = build_permutation_table(SeededRandomSource("abc"))
        assert len(perm) == 512
        assert sorted(perm[:256].tolist()) == list(range(256))
        assert np.array_equal(perm[:256], perm[256:])

    def test_consumes_255_draws(self):
        """Building the table advances the stream by 255 draws."""
        rng = SeededRandomSource("abc")
        build_permutation_table(rng)
        assert rng.draws == 255


class TestNoiseField:
    """Simplex noise sampling."""

    def test_deterministic(self):
        """Same seed gives the same field."""
        a = NoiseField(SeededRandomSource("abc"))
        b = NoiseField(SeededRandomSource("abc"))
        xs = np.linspace(0, 5, 23)
        assert np.array_equal(a.sample_grid(xs, xs), b.sample_grid(xs, xs))

    def test_seed_changes_field(self):
        """Different seeds give different fields."""
        a = NoiseField(SeededRandomSource("abc"))
        b = NoiseField(SeededRandomSource("xyz"))
        xs = np.linspace(0.05, 5, 30)
        assert not np.allclose(a.sample_grid(xs, xs), b.sample_grid(xs, xs))

    def test_range(self):
        """Values stay within [-1, 1]."""
        field = NoiseField(SeededRandomSource("range"))
        xs = np.linspace(-20, 20, 121)
        values = field.sample_grid(xs, xs)
        assert values.min() >= -1.0
        assert values.max() <= 1.0
        assert values.std() > 0.05

    def test_grid_matches_points(self):
        """Vectorised sampling agrees with point sampling."""
        field = NoiseField(SeededRandomSource("points"))
        xs = np.array([0.1, 1.7, 3.3])
        ys = np.array([0.4, 2.9])
        grid = field.sample_grid(xs, ys)
        assert grid.shape == (2, 3)
        for row, y in enumerate(ys):
            for col, x in enumerate(xs):
                assert grid[row, col] == pytest.approx(field.sample(x, y))

    def test_zero_at_origin(self):
        """Simplex noise vanishes on lattice vertices."""
        field = NoiseField(SeededRandomSource("origin"))
        assert field.sample(0.0, 0.0) == pytest.approx(0.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
