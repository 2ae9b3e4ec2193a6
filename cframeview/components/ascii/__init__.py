"""ASCII rendering and playback components.

This module provides terminal-based playback of decoded frames:
- FrameRenderer: Convert frames to ANSI truecolor output
- TerminalPlayer: Interactive terminal player with keyboard controls
"""

from .renderer import FrameRenderer, StatusLine, iter_color_runs, iter_text_runs
from .terminal_player import (
    HelpOverlay,
    KeyboardHandler,
    TerminalPlayer,
    TerminalPlayerConfig,
)

__all__ = [
    # Renderer
    "FrameRenderer",
    "StatusLine",
    "iter_color_runs",
    "iter_text_runs",
    # Player
    "TerminalPlayer",
    "TerminalPlayerConfig",
    # Internals (for advanced use)
    "HelpOverlay",
    "KeyboardHandler",
]
