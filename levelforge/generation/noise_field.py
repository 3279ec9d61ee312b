"""
Noise Field
===========

Seeded 2D simplex noise used for organic room carving.

The 256-entry permutation table is shuffled with draws from a
SeededRandomSource, so a field is fully determined by its seed. Values lie
roughly in [-1, 1].

Two entry points:
- sample(x, y): one point
- sample_grid(xs, ys): whole lattice at once (numpy vectorised)
"""

import logging
from typing import Union

import numpy as np

from levelforge.generation.seeded_random import SeededRandomSource

logger = logging.getLogger(__name__)

F2 = 0.5 * (np.sqrt(3.0) - 1.0)
G2 = (3.0 - np.sqrt(3.0)) / 6.0
NOISE_SCALE = 70.0

# 12 gradient directions (x, y)
GRAD2 = np.array([
    [1, 1], [-1, 1], [1, -1], [-1, -1],
    [1, 0], [-1, 0], [1, 0], [-1, 0],
    [0, 1], [0, -1], [0, 1], [0, -1],
], dtype=np.float64)


def build_permutation_table(rng: SeededRandomSource) -> np.ndarray:
    """
    Build a doubled 512-entry permutation table from 255 random draws.

    Args:
        rng: Random source (advanced by exactly 255 draws)

    Returns:
        int array of length 512 where perm[i] == perm[i + 256]
    """
    table = list(range(256))
    for i in range(255):
        r = i + int(rng.next() * (256 - i))
        table[i], table[r] = table[r], table[i]
    return np.array(table + table, dtype=np.int64)


class NoiseField:
    """
    Deterministic 2D simplex noise keyed by a random source.

    Example:
        >>> field = NoiseField(SeededRandomSource("abc"))
        >>> v = field.sample(1.5, 2.25)
        >>> -1.0 <= v <= 1.0
        True
    """

    def __init__(self, rng: SeededRandomSource):
        self.perm = build_permutation_table(rng)
        grad_index = self.perm % 12
        self._grad_x = GRAD2[grad_index, 0]
        self._grad_y = GRAD2[grad_index, 1]

    def sample(self, x: float, y: float) -> float:
        """Noise value at a single point."""
        return float(self._noise(np.asarray(x, dtype=np.float64),
                                 np.asarray(y, dtype=np.float64)))

    def sample_grid(self, xs: Union[np.ndarray, list],
                    ys: Union[np.ndarray, list]) -> np.ndarray:
        """
        Evaluate noise on the lattice xs × ys.

        Args:
            xs: Sample x coordinates (columns)
            ys: Sample y coordinates (rows)

        Returns:
            Array of shape (len(ys), len(xs))
        """
        gx, gy = np.meshgrid(np.asarray(xs, dtype=np.float64),
                             np.asarray(ys, dtype=np.float64))
        return self._noise(gx, gy)

    def _corner(self, t: np.ndarray, gi: np.ndarray,
                dx: np.ndarray, dy: np.ndarray) -> np.ndarray:
        t = np.maximum(t, 0.0)
        t2 = t * t
        return t2 * t2 * (self._grad_x[gi] * dx + self._grad_y[gi] * dy)

    def _noise(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        s = (x + y) * F2
        i = np.floor(x + s).astype(np.int64)
        j = np.floor(y + s).astype(np.int64)
        t = (i + j) * G2
        x0 = x - (i - t)
        y0 = y - (j - t)

        # Which simplex triangle the point falls in
        i1 = (x0 > y0).astype(np.int64)
        j1 = 1 - i1

        x1 = x0 - i1 + G2
        y1 = y0 - j1 + G2
        x2 = x0 - 1.0 + 2.0 * G2
        y2 = y0 - 1.0 + 2.0 * G2

        ii = i & 255
        jj = j & 255
        perm = self.perm

        gi0 = ii + perm[jj]
        gi1 = ii + i1 + perm[jj + j1]
        gi2 = ii + 1 + perm[jj + 1]

        n0 = self._corner(0.5 - x0 * x0 - y0 * y0, gi0, x0, y0)
        n1 = self._corner(0.5 - x1 * x1 - y1 * y1, gi1, x1, y1)
        n2 = self._corner(0.5 - x2 * x2 - y2 * y2, gi2, x2, y2)
        return NOISE_SCALE * (n0 + n1 + n2)
