"""Render frames without a window, for terminals and captures."""

from typing import Iterator, Optional, TextIO
import logging
import sys

from asciitorus.animation.engine import AnimationDriver

logger = logging.getLogger(__name__)


def run_frames(
    driver: AnimationDriver,
    frames: int,
    frame_ms: float = 16.0,
    activate_at: Optional[int] = None,
    start_ms: float = 0.0,
) -> Iterator[str]:
    """Yield the text of ``frames`` consecutive frames on a fixed clock.

    ``activate_at`` is the frame index at which the explosion is triggered.
    """
    for index in range(frames):
        now = start_ms + index * frame_ms
        if activate_at is not None and index == activate_at:
            driver.activate(now)
        yield driver.frame(now)


def print_frames(
    driver: AnimationDriver,
    frames: int,
    frame_ms: float = 16.0,
    activate_at: Optional[int] = None,
    out: Optional[TextIO] = None,
    clear: bool = True,
) -> None:
    """Write frames to ``out``, redrawing in place when ``clear`` is set."""
    if out is None:
        out = sys.stdout
    logger.info(f"Headless run: {frames} frames at {frame_ms}ms")
    for text in run_frames(driver, frames, frame_ms, activate_at):
        if clear:
            out.write("\x1b[H\x1b[2J")
        out.write(text)
        out.write("\n")
        out.flush()
