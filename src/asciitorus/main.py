"""
Main entry point for the ASCII torus.

Opens the pygame window by default; --headless prints frames to the
terminal instead.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from asciitorus.settings import Settings, get_settings


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="asciitorus", description=__doc__.strip().splitlines()[0])
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    parser.add_argument("--headless", action="store_true", help="print frames instead of opening a window")
    parser.add_argument("--frames", type=int, default=240, help="frames to print in headless mode")
    parser.add_argument("--cols", type=int, default=80, help="grid columns in headless mode")
    parser.add_argument("--rows", type=int, default=30, help="grid rows in headless mode")
    parser.add_argument("--explode-at", type=int, default=None, help="frame index to trigger the explosion")
    return parser.parse_args(argv)


def run_headless(args: argparse.Namespace, settings: Settings) -> None:
    """Print frames to stdout on a fixed 16ms clock."""
    from asciitorus.animation.engine import AnimationDriver
    from asciitorus.simulator.headless import print_frames

    driver = AnimationDriver.from_settings(settings, args.cols, args.rows)
    print_frames(driver, args.frames, activate_at=args.explode_at)


async def run_window(settings: Settings) -> None:
    """Run the pygame window."""
    from asciitorus.simulator.window import TorusWindow

    window = TorusWindow(settings)
    await window.run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.debug)
    logger = logging.getLogger(__name__)

    try:
        settings = get_settings()
        if settings.debug:
            logging.getLogger().setLevel(logging.DEBUG)

        if args.headless:
            run_headless(args, settings)
        else:
            asyncio.run(run_window(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
