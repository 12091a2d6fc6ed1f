"""
Pattern lifecycle.

A ``PatternSession`` owns everything one pattern needs: the random stream,
coefficients, palette, orbit state and running bounds. The host calls
``run_batch`` once per frame and ``tick`` once per second:

    GENERATING --budget reached--> IDLE_PAUSED      (custom settings)
                                   IDLE_COUNTDOWN   (default settings)
    IDLE_COUNTDOWN --countdown hits 0--> GENERATING (fresh default pattern)

``pause``/``resume`` suspend whichever state the session is in without
touching any of its data.
"""

import enum
from typing import Callable, Optional, Tuple

import numpy as np

from patterngen import status
from patterngen.config import ConfigurationError, PatternConfig, default_config
from patterngen.core.bounds import MIN_CANVAS_SIZE, BoundsTracker
from patterngen.core.coefficients import CoefficientSet, generate_coefficients
from patterngen.core.palette import accumulate_many, blend_many, pick_palette
from patterngen.core.kernels import Orbit
from patterngen.core.rng import PatternRandom
from patterngen.core.stepper import SimulationState
from patterngen.surface import BACKGROUND, PixelSurface


class SessionState(enum.Enum):
    GENERATING = "generating"
    IDLE_PAUSED = "idle_paused"
    IDLE_COUNTDOWN = "idle_countdown"


class PatternSession:
    """Drives one pattern at a time into a ``PixelSurface``."""

    COUNTDOWN_SECONDS = 15

    def __init__(
        self,
        surface: PixelSurface,
        config_factory: Optional[Callable[[], PatternConfig]] = None,
    ):
        self.surface = surface
        self._config_factory = config_factory or (lambda: default_config(surface.width))

        self.rng = PatternRandom()
        self.simulation = SimulationState()
        self.bounds = BoundsTracker()

        self._config: Optional[PatternConfig] = None
        self._coefficients: Optional[CoefficientSet] = None
        self._orbit: Optional[Orbit] = None
        self._palette: Optional[Tuple[Tuple[int, int, int], Tuple[int, int, int]]] = None

        # Nothing to draw until the first reset
        self._state = SessionState.IDLE_PAUSED
        self._paused = False
        self.countdown = 0

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def config(self) -> Optional[PatternConfig]:
        return self._config

    @property
    def coefficients(self) -> Optional[CoefficientSet]:
        return self._coefficients

    @property
    def palette(self):
        return self._palette

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def generating(self) -> bool:
        return self._state is SessionState.GENERATING

    @property
    def finished(self) -> bool:
        return self._config is not None and not self.generating

    @property
    def progress(self) -> Optional[int]:
        """Percent complete, or ``None`` once the budget is spent."""
        if self._config is None:
            return None
        done = self.simulation.iterations_done
        budget = self._config.iteration_budget
        if done >= budget:
            return None
        return done * 100 // budget

    @property
    def status_text(self) -> str:
        if self._paused:
            return status.PAUSED_LABEL
        if self._state is SessionState.IDLE_COUNTDOWN:
            return status.countdown_label(self.countdown)
        return status.progress_label(self.progress)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset_pattern(self, config: Optional[PatternConfig] = None) -> PatternConfig:
        """
        Start a new pattern.

        Raises:
            ConfigurationError: The config or canvas is unusable. The current
                pattern is left as it was.
        """
        if config is None:
            config = self._config_factory()
        config.validate()
        if self.surface.too_small:
            raise ConfigurationError(
                f"Canvas {self.surface.width}x{self.surface.height} is smaller than "
                f"{MIN_CANVAS_SIZE}x{MIN_CANVAS_SIZE}"
            )

        # Everything the seed decides is drawn before any live state changes
        rng = PatternRandom(int(config.seed))
        coefficients = generate_coefficients(config.family, rng)
        orbit = Orbit(coefficients)
        palette = pick_palette(rng, config.saturation, config.brightness)

        self.surface.clear(BACKGROUND)
        self.simulation.reset()
        self.bounds.reset()

        self.rng = rng
        self._coefficients = coefficients
        self._orbit = orbit
        self._palette = palette
        self._config = config
        self._state = SessionState.GENERATING
        self._paused = False
        self.countdown = self.COUNTDOWN_SECONDS
        return config

    def run_batch(self, batch_size: int) -> Optional[int]:
        """
        Advance the pattern by up to ``batch_size`` steps.

        Returns:
            Percent complete, or ``None`` when the pattern is done.
        """
        if batch_size < 0:
            raise ValueError(f"batch_size must be non-negative, got {batch_size}")
        if self._paused or not self.generating:
            return self.progress

        sim = self.simulation
        n = min(batch_size, self._config.iteration_budget - sim.iterations_done)
        if n > 0:
            self._draw(n)
            sim.iterations_done += n

        if sim.iterations_done >= self._config.iteration_budget:
            self._state = (
                SessionState.IDLE_PAUSED if self._config.custom
                else SessionState.IDLE_COUNTDOWN
            )
        return self.progress

    def tick(self) -> bool:
        """
        One second of countdown. Returns True when a new pattern was started.
        """
        if self._paused or self._state is not SessionState.IDLE_COUNTDOWN:
            return False
        if self.countdown > 0:
            self.countdown -= 1
        if self.countdown == 0:
            self.reset_pattern(self._config_factory())
            return True
        return False

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def toggle_pause(self) -> bool:
        self._paused = not self._paused
        return self._paused

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def _iterate(self, n: int) -> Tuple[np.ndarray, np.ndarray]:
        """Run the orbit ``n`` steps, returning the new points in order."""
        sim = self.simulation
        xs, ys = self._orbit.run(sim, n)
        if n > 0:
            sim.prev_x = float(xs[-1])
            sim.prev_y = float(ys[-1])
        return xs, ys

    def _draw(self, n: int) -> None:
        sim = self.simulation
        start_x, start_y = sim.prev_x, sim.prev_y

        xs, ys = self._iterate(n)
        prev_xs = np.concatenate(([start_x], xs[:-1]))
        prev_ys = np.concatenate(([start_y], ys[:-1]))

        # Each point is placed against the bounds seen up to and including it
        running = self.bounds.observe_many(xs, ys)
        width, height = self.surface.width, self.surface.height
        px, py = BoundsTracker.project_many(xs, ys, running, width, height)

        color1, color2 = self._palette
        colors = blend_many(color1, color2, xs - prev_xs, ys - prev_ys)
        accumulate_many(self.surface.pixels, width, px, py, colors)
        self.surface.deposits += n
