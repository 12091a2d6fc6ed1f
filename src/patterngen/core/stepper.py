"""
Attractor iteration.

One stepping function per family maps the previous point to the next one.
Steppers read ``prev_x``/``prev_y`` from the simulation state but never write
them; the session owns that update. Fujii is the only family with a side
effect: it advances the phase accumulator ``t`` after computing the point.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from patterngen.core.coefficients import CoefficientSet, Family


@dataclass
class SimulationState:
    """Mutable orbit state for the running pattern."""

    prev_x: float = 0.0
    prev_y: float = 0.0
    t: float = 0.0
    iterations_done: int = 0

    def reset(self) -> None:
        self.prev_x = 0.0
        self.prev_y = 0.0
        self.t = 0.0
        self.iterations_done = 0


Stepper = Callable[[CoefficientSet, SimulationState], Tuple[float, float]]


def ssin(value: float, k: int) -> float:
    """``sin(value) ** k``, or the sawtooth ``asin(sin(value))`` for k == 0."""
    if k == 0:
        return math.asin(math.sin(value))
    return math.sin(value) ** k


def ccos(value: float, k: int) -> float:
    """``cos(value) ** k``, or the triangle wave ``acos(cos(value))`` for k == 0."""
    if k == 0:
        return math.acos(math.cos(value))
    return math.cos(value) ** k


def step_clifford(c: CoefficientSet, state: SimulationState) -> Tuple[float, float]:
    a, f = c.a, c.f
    xp, yp = state.prev_x, state.prev_y
    x = math.sin(f[0] * yp) + a[0] * math.cos(f[0] * xp)
    y = math.sin(f[1] * xp) + a[1] * math.cos(f[1] * yp)
    return x, y


def step_dejong(c: CoefficientSet, state: SimulationState) -> Tuple[float, float]:
    f = c.f
    xp, yp = state.prev_x, state.prev_y
    x = math.sin(f[0] * yp) - math.cos(f[1] * xp)
    y = math.sin(f[2] * xp) - math.cos(f[3] * yp)
    return x, y


def step_fujii(c: CoefficientSet, state: SimulationState) -> Tuple[float, float]:
    a, f, p, q = c.a, c.f, c.p, c.q
    xp, yp, t = state.prev_x, state.prev_y, state.t
    x = a[0] * ssin(f[0] * xp, p) + a[1] * ccos(f[1] * yp, q) + a[2] * ssin(f[2] * t, p)
    y = a[3] * ccos(f[3] * xp, q) + a[4] * ssin(f[4] * yp, p) + a[5] * ssin(f[5] * t, q)
    state.t = t + c.velocity
    return x, y


STEPPERS: Dict[Family, Stepper] = {
    Family.CLIFFORD: step_clifford,
    Family.DEJONG: step_dejong,
    Family.FUJII: step_fujii,
}


def get_stepper(family: Family) -> Stepper:
    """Resolve the stepping function for ``family`` once per pattern."""
    assert family in STEPPERS, f"unknown attractor family: {family!r}"
    return STEPPERS[family]


def step(
    family: Family, coeffs: CoefficientSet, state: SimulationState
) -> Tuple[float, float]:
    """Next point of the orbit. Advances ``state.t`` for Fujii only."""
    return get_stepper(family)(coeffs, state)
