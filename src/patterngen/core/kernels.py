"""
Compiled orbit kernels.

The orbit is sequential (each point feeds the next), so a frame's worth of
steps runs inside one numba-compiled loop instead of one Python call per step.
The scalar steppers in ``stepper.py`` compute the same maps one point at a
time and are what these kernels are checked against.

All three kernels share one signature so an ``Orbit`` can hold whichever one
its family needs:

    kernel(a, f, velocity, p, q, x, y, t, xs, ys) -> t

``xs``/``ys`` are filled in order and the phase after the last step is
returned (unchanged for Clifford and DeJong).
"""

import math
from typing import Tuple

import numba
import numpy as np

from patterngen.core.coefficients import CoefficientSet, Family
from patterngen.core.stepper import SimulationState


@numba.njit(cache=True)
def _ssin(value, k):
    if k == 0:
        return math.asin(math.sin(value))
    return math.sin(value) ** float(k)


@numba.njit(cache=True)
def _ccos(value, k):
    if k == 0:
        return math.acos(math.cos(value))
    return math.cos(value) ** float(k)


@numba.njit(cache=True)
def _clifford_kernel(a, f, velocity, p, q, x, y, t, xs, ys):
    for i in range(xs.shape[0]):
        nx = math.sin(f[0] * y) + a[0] * math.cos(f[0] * x)
        ny = math.sin(f[1] * x) + a[1] * math.cos(f[1] * y)
        x = nx
        y = ny
        xs[i] = x
        ys[i] = y
    return t


@numba.njit(cache=True)
def _dejong_kernel(a, f, velocity, p, q, x, y, t, xs, ys):
    for i in range(xs.shape[0]):
        nx = math.sin(f[0] * y) - math.cos(f[1] * x)
        ny = math.sin(f[2] * x) - math.cos(f[3] * y)
        x = nx
        y = ny
        xs[i] = x
        ys[i] = y
    return t


@numba.njit(cache=True)
def _fujii_kernel(a, f, velocity, p, q, x, y, t, xs, ys):
    for i in range(xs.shape[0]):
        nx = (
            a[0] * _ssin(f[0] * x, p)
            + a[1] * _ccos(f[1] * y, q)
            + a[2] * _ssin(f[2] * t, p)
        )
        ny = (
            a[3] * _ccos(f[3] * x, q)
            + a[4] * _ssin(f[4] * y, p)
            + a[5] * _ssin(f[5] * t, q)
        )
        t = t + velocity
        x = nx
        y = ny
        xs[i] = x
        ys[i] = y
    return t


_KERNELS = {
    Family.CLIFFORD: _clifford_kernel,
    Family.DEJONG: _dejong_kernel,
    Family.FUJII: _fujii_kernel,
}


class Orbit:
    """A family's kernel bound to one coefficient set."""

    def __init__(self, coeffs: CoefficientSet):
        assert coeffs.family in _KERNELS, f"unknown attractor family: {coeffs.family!r}"
        self.family = coeffs.family
        self._kernel = _KERNELS[coeffs.family]
        self._a = np.asarray(coeffs.a, dtype=np.float64)
        self._f = np.asarray(coeffs.f, dtype=np.float64)
        self._velocity = float(coeffs.velocity)
        self._p = int(coeffs.p)
        self._q = int(coeffs.q)

    def run(self, state: SimulationState, n: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        The next ``n`` points after ``(state.prev_x, state.prev_y)``.

        Advances ``state.t`` like the scalar steppers do. ``prev_x``/``prev_y``
        are left for the caller.
        """
        xs = np.empty(n, dtype=np.float64)
        ys = np.empty(n, dtype=np.float64)
        if n == 0:
            return xs, ys
        state.t = self._kernel(
            self._a, self._f, self._velocity, self._p, self._q,
            float(state.prev_x), float(state.prev_y), float(state.t),
            xs, ys,
        )
        return xs, ys
