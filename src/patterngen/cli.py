"""
CLI entry point for the pattern generator.

Usage:
    patterngen [options]
    python -m patterngen [options]

With no pattern options a default Fujii pattern is drawn and a new one starts
15 seconds after each completes. Passing any pattern option (family, seed,
iterations, saturation, brightness) draws that one pattern and keeps it on
screen.
"""

import argparse
import sys
import time

from patterngen import status
from patterngen.config import (
    BATCH_SIZE,
    DEFAULT_BRIGHTNESS,
    DEFAULT_SATURATION,
    ConfigurationError,
    PatternConfig,
    ViewerConfig,
    default_config,
    default_iteration_budget,
)
from patterngen.core.coefficients import Family
from patterngen.session import PatternSession
from patterngen.surface import PixelSurface


REPORT_EVERY = 10


def _report_progress(percent, last_reported: int) -> int:
    """
    Echo the session status line when another ``REPORT_EVERY`` percent is done.

    Returns the percentage last echoed, 100 once the pattern is complete.
    """
    if percent is None:
        print("Pattern complete", flush=True)
        return 100
    if percent - last_reported < REPORT_EVERY:
        return last_reported
    print(status.progress_label(percent), flush=True)
    return percent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patterngen",
        description="Random abstract patterns from Clifford, DeJong and Fujii attractors",
    )

    # Pattern
    parser.add_argument(
        "--family", type=str, default=None,
        choices=[f.value for f in Family],
        help="Attractor family (default: fujii)",
    )
    parser.add_argument("--seed", type=str, default=None, help="Integer seed (default: random)")
    parser.add_argument(
        "-i", "--iterations", type=int, default=None,
        help="Attractor steps per pattern (default: derived from canvas width)",
    )
    parser.add_argument(
        "--saturation", type=float, default=None,
        help=f"Colour saturation in percent (default: {DEFAULT_SATURATION * 100:.0f})",
    )
    parser.add_argument(
        "--brightness", type=float, default=None,
        help=f"Colour brightness in percent (default: {DEFAULT_BRIGHTNESS * 100:.0f})",
    )
    parser.add_argument(
        "--custom", action="store_true",
        help="Pause after the pattern completes instead of cycling",
    )

    # Canvas & pacing
    parser.add_argument("--width", type=int, default=None, help="Canvas width (default: 1239)")
    parser.add_argument("--height", type=int, default=None, help="Canvas height (default: 700)")
    parser.add_argument("-f", "--fps", type=int, default=60, help="Frames per second (default: 60)")
    parser.add_argument(
        "-b", "--batch-size", type=int, default=BATCH_SIZE,
        help=f"Attractor steps per frame (default: {BATCH_SIZE})",
    )

    parser.add_argument(
        "--headless", action="store_true",
        help="Run one pattern to completion without a window and print a summary",
    )
    return parser


def pattern_from_args(args: argparse.Namespace, width: int) -> PatternConfig:
    """Custom config when any pattern option was given, else a default one."""
    explicit = (args.family, args.seed, args.iterations, args.saturation, args.brightness)
    if not args.custom and all(v is None for v in explicit):
        return default_config(width, args.batch_size)

    return PatternConfig.from_inputs(
        family=args.family or Family.FUJII,
        seed=args.seed,
        iteration_budget=(
            args.iterations if args.iterations is not None
            else default_iteration_budget(width, args.batch_size)
        ),
        saturation_pct=args.saturation if args.saturation is not None else DEFAULT_SATURATION * 100,
        brightness_pct=args.brightness if args.brightness is not None else DEFAULT_BRIGHTNESS * 100,
        custom=True,
    )


def run_headless(viewer_cfg: ViewerConfig, pattern: PatternConfig) -> PatternSession:
    surface = PixelSurface(viewer_cfg.width, viewer_cfg.height)
    session = PatternSession(surface)
    session.reset_pattern(pattern)

    print(f"Pattern:    {pattern.family.label}, seed {pattern.seed}")
    print(f"Canvas:     {surface.width}x{surface.height}")
    print(f"Steps:      {pattern.iteration_budget} ({viewer_cfg.batch_size} per frame)")
    print()

    t_start = time.time()
    total = pattern.iteration_budget
    reported = -REPORT_EVERY
    while session.generating:
        percent = session.run_batch(viewer_cfg.batch_size)
        reported = _report_progress(percent, reported)
    elapsed = time.time() - t_start

    frame = surface.present()
    lit = int((frame > 15).any(axis=2).sum())
    b = session.bounds
    print()
    print(f"Done in {elapsed:.1f}s ({total / max(elapsed, 1e-6):.0f} steps/s)")
    print(f"Bounds:     x [{b.min_x:.3f}, {b.max_x:.3f}]  y [{b.min_y:.3f}, {b.max_y:.3f}]")
    print(f"Coverage:   {lit / frame.shape[0] / frame.shape[1] * 100:.1f}% of pixels lit")
    return session


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.batch_size < 1:
        parser.error("--batch-size must be at least 1")
    if args.fps < 1:
        parser.error("--fps must be at least 1")

    defaults = ViewerConfig()
    viewer_cfg = ViewerConfig(
        width=args.width or defaults.width,
        height=args.height or defaults.height,
        fps=args.fps,
        batch_size=args.batch_size,
    )

    try:
        pattern = pattern_from_args(args, viewer_cfg.width)
        if args.headless:
            run_headless(viewer_cfg, pattern)
            return

        from patterngen.viewer import Viewer

        viewer = Viewer(viewer_cfg, pattern)
        viewer.run()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
