"""
Pixel surface the pattern session draws into.

The buffer is a flat float64 RGBA array addressed row-major at
``(x + y * width) * 4``. Channels may grow past 255 while a pattern
accumulates; ``present`` clamps to 8-bit for display.
"""

from typing import Tuple

import numpy as np

from patterngen.core.bounds import MIN_CANVAS_SIZE

BACKGROUND = (15, 15, 15, 255)


class PixelSurface:
    """Accumulation buffer with clear/present hooks for the host."""

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros(self.width * self.height * 4, dtype=np.float64)
        self.deposits = 0

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.height, self.width)

    @property
    def too_small(self) -> bool:
        return self.width < MIN_CANVAS_SIZE or self.height < MIN_CANVAS_SIZE

    def index(self, x: int, y: int) -> int:
        return (x + y * self.width) * 4

    def view(self) -> np.ndarray:
        """(H, W, 4) view over the flat buffer."""
        return self.pixels.reshape(self.height, self.width, 4)

    def clear(self, color: Tuple[int, int, int, int] = BACKGROUND) -> None:
        self.view()[:] = np.asarray(color, dtype=np.float64)
        self.deposits = 0

    def present(self) -> np.ndarray:
        """Clamped (H, W, 3) uint8 RGB frame."""
        rgb = self.view()[:, :, :3]
        return np.clip(rgb, 0, 255).astype(np.uint8)
