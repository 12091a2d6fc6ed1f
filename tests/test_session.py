"""Tests for the pattern session lifecycle."""

import dataclasses

import numpy as np
import pytest

from patterngen.config import ConfigurationError, PatternConfig
from patterngen.core.bounds import BoundsTracker
from patterngen.core.coefficients import Family, generate_coefficients
from patterngen.core.palette import accumulate, blend, pick_palette
from patterngen.core.rng import PatternRandom
from patterngen.core.stepper import SimulationState, step
from patterngen.session import PatternSession, SessionState
from patterngen.surface import BACKGROUND, PixelSurface


def _first_points(session, n):
    """Run ``n`` steps one at a time and record the orbit."""
    points = []
    for _ in range(n):
        session.run_batch(1)
        points.append((session.simulation.prev_x, session.simulation.prev_y))
    return points


class TestReset:
    def test_initial_state(self, session):
        assert session.config is None
        assert session.progress is None
        assert not session.finished
        assert session.run_batch(100) is None

    def test_enters_generating(self, session, dejong_config):
        session.reset_pattern(dejong_config)
        assert session.state is SessionState.GENERATING
        assert session.simulation == SimulationState()
        assert session.bounds == BoundsTracker()
        assert session.countdown == 15
        assert session.progress == 0
        np.testing.assert_array_equal(session.surface.view()[5, 5], BACKGROUND)

    def test_clears_previous_pattern(self, session, dejong_config):
        session.reset_pattern(dejong_config)
        session.run_batch(100)
        session.reset_pattern(dejong_config)
        assert session.surface.deposits == 0
        assert np.all(session.surface.view() == np.asarray(BACKGROUND, dtype=float))

    def test_uses_factory_without_config(self, session):
        cfg = session.reset_pattern()
        assert cfg.family is Family.CLIFFORD
        assert session.config.seed == 7


class TestDeterminism:
    @pytest.mark.parametrize("family", list(Family))
    def test_same_seed_same_pattern(self, surface, family):
        cfg = PatternConfig(family=family, seed=31337, iteration_budget=500)
        a = PatternSession(surface)
        a.reset_pattern(cfg)
        coeffs_a, palette_a = a.coefficients, a.palette
        points_a = _first_points(a, 200)

        b = PatternSession(PixelSurface(surface.width, surface.height))
        b.reset_pattern(cfg)
        assert b.coefficients == coeffs_a
        assert b.palette == palette_a
        assert _first_points(b, 200) == points_a

    def test_negative_seed(self, session, dejong_config):
        session.reset_pattern(dejong_config)
        session.run_batch(50)

        cfg = dataclasses.replace(dejong_config, seed=-5)
        session.reset_pattern(cfg)
        assert session.config.seed == -5
        assert session.simulation.iterations_done == 0
        session.run_batch(100)
        first = session.surface.pixels.copy()

        other = PatternSession(PixelSurface(session.surface.width, session.surface.height))
        other.reset_pattern(cfg)
        other.run_batch(100)
        assert other.coefficients == session.coefficients
        np.testing.assert_array_equal(other.surface.pixels, first)

    def test_reset_twice_same_pattern(self, session, dejong_config):
        session.reset_pattern(dejong_config)
        session.run_batch(100)
        first = session.surface.pixels.copy()
        session.reset_pattern(dejong_config)
        session.run_batch(100)
        np.testing.assert_array_equal(session.surface.pixels, first)

    def test_batching_does_not_change_result(self, surface):
        cfg = PatternConfig(family=Family.FUJII, seed=5, iteration_budget=900)
        a = PatternSession(surface)
        a.reset_pattern(cfg)
        a.run_batch(900)

        b = PatternSession(PixelSurface(surface.width, surface.height))
        b.reset_pattern(cfg)
        while b.generating:
            b.run_batch(37)

        np.testing.assert_allclose(a.surface.pixels, b.surface.pixels)
        assert a.bounds == b.bounds


class TestBatch:
    def test_dejong_scenario(self, session, dejong_config):
        session.reset_pattern(dejong_config)
        result = session.run_batch(100)
        assert result is None
        assert session.simulation.iterations_done == 100
        assert session.finished
        assert session.state is SessionState.IDLE_COUNTDOWN
        assert session.surface.deposits == 100
        background = np.asarray(BACKGROUND[:3], dtype=float)
        added = session.surface.view()[:, :, :3] - background
        assert added.min() >= 0.0
        assert added.sum() > 0.0

    def test_budget_never_exceeded(self, session):
        session.reset_pattern(PatternConfig(family=Family.FUJII, seed=1, iteration_budget=250))
        assert session.run_batch(100) == 40
        assert session.run_batch(100) == 80
        assert session.run_batch(100) is None
        assert session.simulation.iterations_done == 250
        assert session.run_batch(100) is None
        assert session.simulation.iterations_done == 250
        assert session.surface.deposits == 250

    def test_progress_is_floored(self, session):
        session.reset_pattern(PatternConfig(seed=1, iteration_budget=3))
        assert session.run_batch(1) == 33
        assert session.run_batch(1) == 66

    def test_zero_batch(self, session, dejong_config):
        session.reset_pattern(dejong_config)
        assert session.run_batch(0) == 0
        assert session.state is SessionState.GENERATING

    def test_negative_batch(self, session, dejong_config):
        session.reset_pattern(dejong_config)
        with pytest.raises(ValueError):
            session.run_batch(-1)

    def test_bounds_contain_every_point(self, session):
        session.reset_pattern(PatternConfig(family=Family.CLIFFORD, seed=9, iteration_budget=300))
        for _ in range(300):
            session.run_batch(1)
            sim = session.simulation
            assert session.bounds.contains(sim.prev_x, sim.prev_y)

    @pytest.mark.parametrize("family", list(Family))
    def test_matches_scalar_pipeline(self, family):
        # Short run: the compiled and scalar orbits may differ in the last
        # bit, and the maps are chaotic
        width, height = 300, 200
        cfg = PatternConfig(family=family, seed=3, iteration_budget=40)
        session = PatternSession(PixelSurface(width, height))
        session.reset_pattern(cfg)
        session.run_batch(40)

        rng = PatternRandom()
        rng.seed(cfg.seed)
        coeffs = generate_coefficients(cfg.family, rng)
        color1, color2 = pick_palette(rng, cfg.saturation, cfg.brightness)
        state = SimulationState()
        bounds = BoundsTracker()
        expected = PixelSurface(width, height)
        expected.clear()
        for _ in range(40):
            x, y = step(cfg.family, coeffs, state)
            bounds.observe(x, y)
            px, py = bounds.project(x, y, width, height)
            color = blend(color1, color2, (x - state.prev_x, y - state.prev_y))
            accumulate(expected.pixels, width, px, py, color)
            state.prev_x, state.prev_y = x, y

        np.testing.assert_allclose(session.surface.pixels, expected.pixels)
        np.testing.assert_allclose(
            session.bounds.as_tuple(), bounds.as_tuple(), rtol=1e-9, atol=1e-12
        )
        assert session.simulation.t == pytest.approx(state.t)


class TestLifecycle:
    def test_custom_pattern_pauses(self, session, dejong_config):
        session.reset_pattern(dataclasses.replace(dejong_config, custom=True))
        session.run_batch(100)
        assert session.state is SessionState.IDLE_PAUSED
        for _ in range(30):
            assert session.tick() is False
        assert session.state is SessionState.IDLE_PAUSED

    def test_countdown_restarts(self, session, dejong_config):
        session.reset_pattern(dejong_config)
        session.run_batch(100)
        for expected in range(14, 0, -1):
            assert session.tick() is False
            assert session.countdown == expected
            assert session.status_text == f"New pattern in {expected} s"
        assert session.tick() is True
        assert session.state is SessionState.GENERATING
        assert session.config.family is Family.CLIFFORD
        assert session.simulation.iterations_done == 0
        assert session.surface.deposits == 0

    def test_tick_ignored_while_generating(self, session, dejong_config):
        session.reset_pattern(dejong_config)
        session.run_batch(10)
        assert session.tick() is False
        assert session.countdown == 15

    def test_status_text(self, session, dejong_config):
        session.reset_pattern(dejong_config)
        session.run_batch(42)
        assert session.status_text == "Generating pattern... 42%"
        session.pause()
        assert session.status_text == "Generation paused"


class TestPause:
    def test_pause_freezes_everything(self, session):
        session.reset_pattern(PatternConfig(family=Family.FUJII, seed=77, iteration_budget=1000))
        session.run_batch(400)
        session.pause()

        done = session.simulation.iterations_done
        sim = dataclasses.replace(session.simulation)
        bounds = session.bounds.as_tuple()
        palette = session.palette
        pixels = session.surface.pixels.copy()

        for _ in range(20):
            session.tick()
        assert session.run_batch(400) == 40

        session.resume()
        assert session.simulation.iterations_done == done
        assert session.simulation == sim
        assert session.bounds.as_tuple() == bounds
        assert session.palette == palette
        np.testing.assert_array_equal(session.surface.pixels, pixels)

    def test_failure_while_seeding_keeps_previous_pattern(
        self, session, dejong_config, monkeypatch
    ):
        session.reset_pattern(dejong_config)
        session.run_batch(50)
        pixels = session.surface.pixels.copy()
        coeffs = session.coefficients

        def broken_palette(*args, **kwargs):
            raise RuntimeError("palette unavailable")

        monkeypatch.setattr("patterngen.session.pick_palette", broken_palette)
        with pytest.raises(RuntimeError):
            session.reset_pattern(dataclasses.replace(dejong_config, seed=43))

        assert session.config == dejong_config
        assert session.coefficients == coeffs
        assert session.state is SessionState.GENERATING
        assert session.simulation.iterations_done == 50
        np.testing.assert_array_equal(session.surface.pixels, pixels)

        assert session.run_batch(600) is None
        assert session.simulation.iterations_done == 1000

    def test_pause_freezes_countdown(self, session, dejong_config):
        session.reset_pattern(dejong_config)
        session.run_batch(100)
        session.tick()
        session.pause()
        for _ in range(30):
            assert session.tick() is False
        assert session.countdown == 14
        session.resume()
        session.tick()
        assert session.countdown == 13

    def test_toggle(self, session):
        assert session.toggle_pause() is True
        assert session.paused
        assert session.toggle_pause() is False

    def test_resumed_run_matches_uninterrupted(self, surface):
        cfg = PatternConfig(family=Family.DEJONG, seed=12, iteration_budget=600)
        a = PatternSession(surface)
        a.reset_pattern(cfg)
        a.run_batch(600)

        b = PatternSession(PixelSurface(surface.width, surface.height))
        b.reset_pattern(cfg)
        b.run_batch(300)
        b.pause()
        b.run_batch(300)
        b.resume()
        b.run_batch(300)
        np.testing.assert_allclose(a.surface.pixels, b.surface.pixels)


class TestConfigurationErrors:
    def test_small_canvas(self, dejong_config):
        session = PatternSession(PixelSurface(120, 300))
        with pytest.raises(ConfigurationError):
            session.reset_pattern(dejong_config)
        assert session.config is None

    def test_bad_config_keeps_previous_pattern(self, session, dejong_config):
        session.reset_pattern(dejong_config)
        session.run_batch(50)
        pixels = session.surface.pixels.copy()
        coeffs = session.coefficients

        with pytest.raises(ConfigurationError):
            session.reset_pattern(dataclasses.replace(dejong_config, saturation=1.5))

        assert session.config == dejong_config
        assert session.coefficients == coeffs
        assert session.simulation.iterations_done == 50
        np.testing.assert_array_equal(session.surface.pixels, pixels)

    @pytest.mark.parametrize(
        "changes",
        [
            {"iteration_budget": 0},
            {"iteration_budget": 2.5},
            {"iteration_budget": "abc"},
            {"iteration_budget": True},
            {"brightness": -0.1},
            {"seed": "42"},
            {"family": "dejong"},
        ],
    )
    def test_rejected(self, session, dejong_config, changes):
        with pytest.raises(ConfigurationError):
            session.reset_pattern(dataclasses.replace(dejong_config, **changes))
