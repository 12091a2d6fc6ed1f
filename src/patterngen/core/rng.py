"""
Seeded random stream shared by every pattern component.

A single stream feeds coefficient generation and palette selection, so one
integer seed reproduces one pattern.
"""

import math
from typing import Optional

import numpy as np

# numpy seeds must be non-negative; any integer is folded into 64 bits
SEED_MODULUS = 2 ** 64


def _seed_value(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    return int(value) % SEED_MODULUS


class PatternRandom:
    """Deterministic uniform draws over ``numpy.random.Generator``."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = np.random.default_rng(_seed_value(seed))

    def seed(self, value: int) -> None:
        """Restart the stream from ``value``. Negative seeds are accepted."""
        self._rng = np.random.default_rng(_seed_value(value))

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        """Float in [low, high)."""
        return low + (high - low) * float(self._rng.random())

    def uniform_int(self, low: int, high: int) -> int:
        """Integer in [low, high), floor of a uniform draw."""
        return int(math.floor(self.uniform(low, high)))

    def chance(self) -> bool:
        return self.uniform() > 0.5

    def signed(self, low: float, high: float) -> float:
        """Uniform magnitude in [low, high) with a coin-flipped sign."""
        value = self.uniform(low, high)
        return -value if self.chance() else value
