"""
Two-colour palettes and additive colour accumulation.

Each pattern gets two hues at least 100 degrees apart. Every attractor step
blends between them according to how far the orbit jumped, and deposits a
low-opacity contribution into the pixel buffer. Channels are never clamped
here; the surface clamps when it presents.
"""

import math
from typing import Tuple

import numpy as np

from patterngen.core.rng import PatternRandom

RGB = Tuple[float, float, float]

# Opacity of a single deposit
PIXEL_ALPHA = 10 / 255

# |step|^2 that maps to the second colour
STEP_RANGE = 2.0 * math.pi * math.pi
STEP_SCALE = 10.0
COLOR_RANGE = 1.0

# Second hue offset from the first, degrees
HUE_OFFSET = (100, 260)


def hsv_to_rgb(hue: float, saturation: float, value: float) -> Tuple[int, int, int]:
    """
    HSV to 8-bit RGB.

    Args:
        hue: Degrees; 360 and above wraps to 0.
        saturation: 0-1.
        value: 0-1.

    Returns:
        ``(r, g, b)`` ints in 0-255, rounded half up.
    """
    if hue >= 360.0:
        hue = 0.0
    sector = math.floor(hue / 60.0)
    frac = hue / 60.0 - sector

    v = value
    p = v * (1.0 - saturation)
    q = v * (1.0 - frac * saturation)
    t = v * (1.0 - (1.0 - frac) * saturation)

    r, g, b = (
        (v, t, p),
        (q, v, p),
        (p, v, t),
        (p, q, v),
        (t, p, v),
        (v, p, q),
    )[sector % 6]

    return (
        int(math.floor(r * 255 + 0.5)),
        int(math.floor(g * 255 + 0.5)),
        int(math.floor(b * 255 + 0.5)),
    )


def pick_palette(
    rng: PatternRandom, saturation: float, brightness: float
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Pick two colours from hues offset by 100-260 degrees."""
    hue1 = rng.uniform_int(0, 360)
    hue2 = (hue1 + rng.uniform_int(*HUE_OFFSET)) % 360
    return (
        hsv_to_rgb(hue1, saturation, brightness),
        hsv_to_rgb(hue2, saturation, brightness),
    )


def blend_factor(dx: float, dy: float) -> float:
    """Interpolation weight for a raw step ``(dx, dy)``."""
    sx, sy = dx * STEP_SCALE, dy * STEP_SCALE
    t = (sx * sx + sy * sy) / STEP_RANGE
    return min(max(t, -COLOR_RANGE), COLOR_RANGE)


def blend(color1: RGB, color2: RGB, step: Tuple[float, float]) -> RGB:
    """Colour for one step, where ``step`` is ``current - previous``."""
    t = blend_factor(step[0], step[1])
    return (
        color1[0] + t * (color2[0] - color1[0]),
        color1[1] + t * (color2[1] - color1[1]),
        color1[2] + t * (color2[2] - color1[2]),
    )


def blend_many(color1: RGB, color2: RGB, dx: np.ndarray, dy: np.ndarray) -> np.ndarray:
    """Vectorized ``blend``. Returns (N, 3) float64 colours."""
    sx = dx * STEP_SCALE
    sy = dy * STEP_SCALE
    t = np.clip((sx * sx + sy * sy) / STEP_RANGE, -COLOR_RANGE, COLOR_RANGE)
    c1 = np.asarray(color1, dtype=np.float64)
    c2 = np.asarray(color2, dtype=np.float64)
    return c1[np.newaxis, :] + t[:, np.newaxis] * (c2 - c1)[np.newaxis, :]


def accumulate(
    buffer: np.ndarray,
    width: int,
    px: int,
    py: int,
    color: RGB,
    alpha: float = PIXEL_ALPHA,
) -> None:
    """Add ``color * alpha`` into the RGB slots of pixel ``(px, py)``."""
    index = (px + py * width) * 4
    buffer[index] += color[0] * alpha
    buffer[index + 1] += color[1] * alpha
    buffer[index + 2] += color[2] * alpha


def accumulate_many(
    buffer: np.ndarray,
    width: int,
    px: np.ndarray,
    py: np.ndarray,
    colors: np.ndarray,
    alpha: float = PIXEL_ALPHA,
) -> None:
    """Scatter-add a batch of deposits; repeated pixels sum."""
    index = (px + py * width) * 4
    for channel in range(3):
        np.add.at(buffer, index + channel, colors[:, channel] * alpha)
