"""Human-readable status strings shown next to the canvas."""

from typing import Optional

PAUSED_LABEL = "Generation paused"


def progress_label(percent: Optional[int]) -> str:
    """``"Generating pattern... N%"``, blank once the pattern is complete."""
    if percent is None or percent >= 100:
        return ""
    return f"Generating pattern... {percent}%"


def seed_label(seed: int) -> str:
    return f"Seed: {seed}"


def pause_label(paused: bool) -> str:
    return "Resume generation" if paused else "Pause generation"


def countdown_label(seconds: int) -> str:
    return f"New pattern in {seconds} s"
