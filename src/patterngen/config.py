"""
Pattern and viewer configuration.

``PatternConfig`` is created by the host at pattern-start time and stays fixed
for the lifetime of that pattern. Values coming from user input (family name,
seed text, percent sliders) are parsed here so bad input fails before any
session state is touched.
"""

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from patterngen.core.bounds import round_half_up
from patterngen.core.coefficients import Family

# Steps per rendered frame
BATCH_SIZE = 20000

# Frames per default pattern, per pixel of canvas width
FRAMES_PER_WIDTH = 0.035

# Default canvas: 70% of the display height, widescreen aspect
HEIGHT_FRACTION = 0.7
ASPECT = 1.77

SEED_LIMIT = 10 ** 12

DEFAULT_FAMILY = Family.FUJII
DEFAULT_SATURATION = 0.5
DEFAULT_BRIGHTNESS = 0.8


class ConfigurationError(ValueError):
    """Invalid pattern configuration; the pattern is not (re)started."""


def parse_family(value: Union[str, Family]) -> Family:
    """Resolve a family name (case-insensitive) or pass a ``Family`` through."""
    if isinstance(value, Family):
        return value
    try:
        return Family(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(f.value for f in Family)
        raise ConfigurationError(
            f"Unknown attractor family {value!r} (expected one of: {choices})"
        ) from None


def parse_seed(value: Union[str, int, None]) -> Optional[int]:
    """Integer seed from user input; blank input means "pick one"."""
    if value is None:
        return None
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        return int(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        raise ConfigurationError(f"Seed must be an integer, got {value!r}") from None


def random_seed() -> int:
    """Fresh seed from OS entropy."""
    return int(np.random.default_rng().integers(0, SEED_LIMIT))


def default_iteration_budget(width: int, batch_size: int = BATCH_SIZE) -> int:
    """Step budget for a default pattern: a width-dependent number of frames."""
    frames = max(1, round_half_up(width * FRAMES_PER_WIDTH))
    return frames * batch_size


def canvas_size_for_display(display_height: int) -> tuple[int, int]:
    """(width, height) of the canvas for a display of ``display_height`` px."""
    height = round_half_up(display_height * HEIGHT_FRACTION)
    return round_half_up(ASPECT * height), height


@dataclass(frozen=True)
class PatternConfig:
    """Settings for one pattern."""

    family: Family = DEFAULT_FAMILY
    seed: int = 0
    iteration_budget: int = BATCH_SIZE
    saturation: float = DEFAULT_SATURATION
    brightness: float = DEFAULT_BRIGHTNESS

    # Custom patterns stay on screen; default ones count down and restart
    custom: bool = False

    def validate(self) -> "PatternConfig":
        if not isinstance(self.family, Family):
            raise ConfigurationError(f"Unknown attractor family {self.family!r}")
        if isinstance(self.seed, bool) or not isinstance(self.seed, (int, np.integer)):
            raise ConfigurationError(f"Seed must be an integer, got {self.seed!r}")
        budget = self.iteration_budget
        if isinstance(budget, bool) or not isinstance(budget, (int, np.integer)):
            raise ConfigurationError(f"Iteration budget must be an integer, got {budget!r}")
        if budget < 1:
            raise ConfigurationError(
                f"Iteration budget must be positive, got {self.iteration_budget}"
            )
        for name in ("saturation", "brightness"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1], got {value}")
        return self

    @classmethod
    def from_inputs(
        cls,
        family: Union[str, Family],
        seed: Union[str, int, None],
        iteration_budget: int,
        saturation_pct: float,
        brightness_pct: float,
        custom: bool = True,
    ) -> "PatternConfig":
        """Build a config from settings-panel style inputs (percent sliders)."""
        parsed = parse_seed(seed)
        return cls(
            family=parse_family(family),
            seed=random_seed() if parsed is None else parsed,
            iteration_budget=iteration_budget,
            saturation=saturation_pct / 100.0,
            brightness=brightness_pct / 100.0,
            custom=custom,
        ).validate()


def default_config(width: int, batch_size: int = BATCH_SIZE) -> PatternConfig:
    """Settings for an automatically cycling pattern."""
    return PatternConfig(
        family=DEFAULT_FAMILY,
        seed=random_seed(),
        iteration_budget=default_iteration_budget(width, batch_size),
        saturation=DEFAULT_SATURATION,
        brightness=DEFAULT_BRIGHTNESS,
        custom=False,
    )


DEFAULT_DISPLAY_HEIGHT = 1000
DEFAULT_CANVAS = canvas_size_for_display(DEFAULT_DISPLAY_HEIGHT)


@dataclass
class ViewerConfig:
    """Host window settings."""

    width: int = DEFAULT_CANVAS[0]
    height: int = DEFAULT_CANVAS[1]
    fps: int = 60
    batch_size: int = BATCH_SIZE
    show_hud: bool = True
    font: str = "menlo"
    font_size: int = 14
