"""
Equation coefficients for the three attractor families.

Each family draws a fixed number of amplitudes and frequencies from the
pattern's random stream. Draws are interleaved (amplitude, then frequency, per
index) so the same seed always lands on the same pattern.
"""

import enum
from dataclasses import dataclass
from typing import Tuple

from patterngen.core.rng import PatternRandom


class Family(enum.Enum):
    """Attractor equation family."""

    CLIFFORD = "clifford"
    DEJONG = "dejong"
    FUJII = "fujii"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Family.CLIFFORD: "Clifford",
    Family.DEJONG: "DeJong",
    Family.FUJII: "Fujii",
}

# (amplitudes, frequencies, scalars) per family
ARITY = {
    Family.CLIFFORD: (2, 2, 0),
    Family.DEJONG: (0, 4, 0),
    Family.FUJII: (6, 6, 3),
}

# Magnitude ranges for the sign-flipped draws
_CLIFFORD_RANGE = (1.0, 3.0)
_DEJONG_RANGE = (1.0, 3.0)
_FUJII_RANGE = (0.7, 1.2)
_FUJII_VELOCITY = (0.001, 0.5)
_FUJII_EXPONENT = (1, 5)


@dataclass(frozen=True)
class CoefficientSet:
    """Immutable coefficients for one pattern."""

    family: Family
    a: Tuple[float, ...] = ()
    f: Tuple[float, ...] = ()
    velocity: float = 0.0
    p: int = 0
    q: int = 0

    def __len__(self) -> int:
        scalars = 3 if self.family is Family.FUJII else 0
        return len(self.a) + len(self.f) + scalars

    def as_tuple(self) -> Tuple[float, ...]:
        """Flat view, amplitudes then frequencies then Fujii scalars."""
        values = self.a + self.f
        if self.family is Family.FUJII:
            values += (self.velocity, float(self.p), float(self.q))
        return values


def _clifford(rng: PatternRandom) -> CoefficientSet:
    a, f = [], []
    for _ in range(2):
        a.append(rng.signed(*_CLIFFORD_RANGE))
        f.append(rng.signed(*_CLIFFORD_RANGE))
    return CoefficientSet(Family.CLIFFORD, a=tuple(a), f=tuple(f))


def _dejong(rng: PatternRandom) -> CoefficientSet:
    f = tuple(rng.signed(*_DEJONG_RANGE) for _ in range(4))
    return CoefficientSet(Family.DEJONG, f=f)


def _fujii(rng: PatternRandom) -> CoefficientSet:
    a, f = [], []
    for _ in range(6):
        a.append(rng.signed(*_FUJII_RANGE))
        f.append(rng.signed(*_FUJII_RANGE))
    velocity = rng.uniform(*_FUJII_VELOCITY)
    p = rng.uniform_int(*_FUJII_EXPONENT)
    q = rng.uniform_int(*_FUJII_EXPONENT)
    return CoefficientSet(
        Family.FUJII, a=tuple(a), f=tuple(f), velocity=velocity, p=p, q=q
    )


_GENERATORS = {
    Family.CLIFFORD: _clifford,
    Family.DEJONG: _dejong,
    Family.FUJII: _fujii,
}


def generate_coefficients(family: Family, rng: PatternRandom) -> CoefficientSet:
    """Draw a fresh coefficient set for ``family`` from ``rng``."""
    assert family in _GENERATORS, f"unknown attractor family: {family!r}"
    return _GENERATORS[family](rng)
