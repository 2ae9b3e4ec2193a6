"""
cframe Player - Play .cframe / frame_*.txt animations in the terminal.

Usage:
    cframeview [directory] [--fps N] [--once]

Examples:
    cframeview                       # Play frames in the current directory
    cframeview frames/ --fps 12      # Slower playback
    cframeview frames/ --once        # Stop on the last frame
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from .components.ascii import TerminalPlayer, TerminalPlayerConfig
from .config import Settings
from .controller import AnimationController, LoopMode
from .exceptions import CFrameError
from .loader import load_frames

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None, settings: Settings | None = None):
    settings = settings or Settings()
    parser = argparse.ArgumentParser(
        prog="cframeview",
        description="Minimal terminal player for cascii .cframe/.txt frames",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Controls:
  space       Play / pause
  left/right  Step one frame
  home/end    Jump to first / last frame
  + / -       Change fps
  l           Toggle loop / once
  h / ?       Help
  q / esc     Quit
        """,
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=settings.DIRECTORY,
        help="Directory containing frame files (frame_*.cframe or frame_*.txt)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=settings.FPS,
        help=f"Starting playback FPS (default: {settings.FPS})",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        default=settings.ONCE,
        help="Play once instead of looping",
    )
    parser.add_argument(
        "--log-file",
        default=settings.LOG_FILE,
        help="Write log output to this file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging (only useful with --log-file)",
    )
    return parser.parse_args(argv)


def setup_logging(log_file, verbose: bool, level: str = "INFO") -> None:
    """Log to a file when given; otherwise keep the terminal clean during playback."""
    if log_file:
        logging.basicConfig(
            filename=str(log_file),
            level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO),
            format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    else:
        logging.basicConfig(
            level=logging.WARNING,
            format="%(levelname)s: %(message)s",
        )


def main(argv: list[str] | None = None) -> int:
    try:
        settings = Settings()
    except ValidationError as e:
        print(f"Error: invalid CFRAMEVIEW_* settings: {e}", file=sys.stderr)
        return 1
    args = parse_args(argv, settings)
    setup_logging(args.log_file, args.verbose, settings.LOG_LEVEL)

    try:
        frames = load_frames(args.directory)
    except CFrameError as e:
        logger.debug("Failed to load frames", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    controller = AnimationController(args.fps)
    controller.set_frame_count(len(frames))
    if args.once:
        controller.set_loop_mode(LoopMode.ONCE)
    controller.play()

    config = TerminalPlayerConfig(idle_poll_interval=settings.IDLE_POLL_INTERVAL)
    TerminalPlayer(frames, controller, config=config).play()
    return 0


if __name__ == "__main__":
    exit(main())
