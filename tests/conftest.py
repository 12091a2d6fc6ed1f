"""Pytest configuration and shared fixtures."""

import os

# Headless pygame for viewer tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pytest

from patterngen.config import PatternConfig
from patterngen.core.coefficients import Family
from patterngen.core.rng import PatternRandom
from patterngen.session import PatternSession
from patterngen.surface import PixelSurface


@pytest.fixture
def rng() -> PatternRandom:
    """Random stream seeded with a fixed value."""
    return PatternRandom(1234)


@pytest.fixture
def surface() -> PixelSurface:
    """Small canvas, still large enough for the drawing margins."""
    return PixelSurface(240, 180)


@pytest.fixture
def dejong_config() -> PatternConfig:
    return PatternConfig(
        family=Family.DEJONG,
        seed=42,
        iteration_budget=100,
        saturation=0.5,
        brightness=0.8,
    )


@pytest.fixture
def session(surface) -> PatternSession:
    """Session whose automatic restarts reuse a fixed Clifford config."""
    return PatternSession(
        surface,
        config_factory=lambda: PatternConfig(
            family=Family.CLIFFORD, seed=7, iteration_budget=50
        ),
    )
