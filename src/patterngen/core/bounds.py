"""
Running extrema of the orbit and the raw-to-pixel projection.

Every point is projected against the bounds observed *so far*, not against the
final extent of the orbit. Early points therefore land on a narrow range and
the picture settles as the bounds widen.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

# Canvas margins (px)
MARGIN_X = 50
MARGIN_TOP = 50
MARGIN_BOTTOM = 80

# Smallest canvas the margins leave room for
MIN_CANVAS_SIZE = 130

# Inverted start interval so the first sample always widens it
_INITIAL_MIN = 10.0
_INITIAL_MAX = -10.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _map_axis(value: float, lo: float, hi: float, out_lo: float, out_hi: float) -> float:
    span = hi - lo
    if not span > 0.0:
        return (out_lo + out_hi) / 2.0
    return out_lo + (value - lo) / span * (out_hi - out_lo)


def _map_axis_array(
    values: np.ndarray, lo: np.ndarray, hi: np.ndarray, out_lo: float, out_hi: float
) -> np.ndarray:
    span = hi - lo
    ok = span > 0.0
    safe = np.where(ok, span, 1.0)
    mapped = out_lo + (values - lo) / safe * (out_hi - out_lo)
    return np.where(ok, mapped, (out_lo + out_hi) / 2.0)


def target_ranges(width: int, height: int) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """Pixel ranges ``((x_lo, x_hi), (y_lo, y_hi))`` points are mapped onto."""
    return (MARGIN_X, width - MARGIN_X), (MARGIN_TOP, height - MARGIN_BOTTOM)


@dataclass
class BoundsTracker:
    """Monotonically widening bounding box of the observed orbit."""

    min_x: float = _INITIAL_MIN
    min_y: float = _INITIAL_MIN
    max_x: float = _INITIAL_MAX
    max_y: float = _INITIAL_MAX

    def reset(self) -> None:
        self.min_x = self.min_y = _INITIAL_MIN
        self.max_x = self.max_y = _INITIAL_MAX

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def observe(self, x: float, y: float) -> None:
        self.min_x = min(self.min_x, x)
        self.min_y = min(self.min_y, y)
        self.max_x = max(self.max_x, x)
        self.max_y = max(self.max_y, y)

    def project(self, x: float, y: float, width: int, height: int) -> Tuple[int, int]:
        """Map ``(x, y)`` into the canvas margins using the current bounds."""
        (x_lo, x_hi), (y_lo, y_hi) = target_ranges(width, height)
        px = _map_axis(x, self.min_x, self.max_x, x_lo, x_hi)
        py = _map_axis(y, self.min_y, self.max_y, y_lo, y_hi)
        return round_half_up(px), round_half_up(py)

    def observe_many(
        self, xs: np.ndarray, ys: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """
        Observe a batch of points in order.

        Returns the running ``(min_x, min_y, max_x, max_y)`` arrays, where
        entry ``i`` is the bounds right after observing point ``i``. The
        tracker ends up in the same state as after ``observe`` on each point.
        """
        run_min_x = np.minimum.accumulate(np.concatenate(([self.min_x], xs)))[1:]
        run_min_y = np.minimum.accumulate(np.concatenate(([self.min_y], ys)))[1:]
        run_max_x = np.maximum.accumulate(np.concatenate(([self.max_x], xs)))[1:]
        run_max_y = np.maximum.accumulate(np.concatenate(([self.max_y], ys)))[1:]

        if len(xs):
            self.min_x = float(run_min_x[-1])
            self.min_y = float(run_min_y[-1])
            self.max_x = float(run_max_x[-1])
            self.max_y = float(run_max_y[-1])

        return run_min_x, run_min_y, run_max_x, run_max_y

    @staticmethod
    def project_many(
        xs: np.ndarray,
        ys: np.ndarray,
        running: Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray],
        width: int,
        height: int,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorized ``project`` of each point against its own running bounds."""
        min_x, min_y, max_x, max_y = running
        (x_lo, x_hi), (y_lo, y_hi) = target_ranges(width, height)
        px = _map_axis_array(xs, min_x, max_x, x_lo, x_hi)
        py = _map_axis_array(ys, min_y, max_y, y_lo, y_hi)
        return (
            np.floor(px + 0.5).astype(np.int64),
            np.floor(py + 0.5).astype(np.int64),
        )
