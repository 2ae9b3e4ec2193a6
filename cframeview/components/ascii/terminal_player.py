"""
Terminal Frame Player - Interactive terminal player for .cframe animations.

Plays an ordered list of frames in the terminal with keyboard controls for
play/pause, stepping, fps and loop mode.

Example:
    from cframeview import AnimationController, load_frames
    from cframeview.components.ascii import TerminalPlayer

    frames = load_frames("frames/")
    player = TerminalPlayer(frames, AnimationController(fps=24))
    player.play()

Controls:
    Space       - Play/Pause toggle
    Q / Escape  - Exit
    Left/Right  - Step one frame back/forward
    Home/End    - Jump to first/last frame
    +/-         - Increase/decrease fps by one
    L           - Toggle loop/once
    H / ?       - Show help
"""

from __future__ import annotations

import logging
import signal
import sys
import time
from dataclasses import dataclass
from typing import Callable, Sequence

from blessed import Terminal

from ...controller import AnimationController
from ...frame import Frame
from .renderer import ESC, RESET, WHITE, FrameRenderer, StatusLine

logger = logging.getLogger(__name__)

DEFAULT_IDLE_POLL_INTERVAL = 0.25


@dataclass
class TerminalPlayerConfig:
    """Configuration for TerminalPlayer UI and controls."""

    # UI elements visibility
    show_status_line: bool = True
    show_help_hint: bool = True

    # Color used for frames without color data
    text_color: tuple[int, int, int] = WHITE

    # Seconds to wait for input when not playing
    idle_poll_interval: float = DEFAULT_IDLE_POLL_INTERVAL

    # Control enablement
    enable_fps_control: bool = True
    enable_loop_toggle: bool = True


class KeyboardHandler:
    """Handle keyboard input using blessed library."""

    def __init__(self, terminal: Terminal):
        self.terminal = terminal
        self._bindings: dict[str, Callable[[], None]] = {}
        self._char_bindings: dict[str, Callable[[], None]] = {}

    def bind(self, key: str, handler: Callable[[], None]) -> None:
        """Bind a handler to a key.

        Key can be a key name (e.g., 'KEY_LEFT', 'KEY_ESCAPE') or a character.
        """
        if key.startswith("KEY_"):
            self._bindings[key] = handler
        else:
            self._char_bindings[key] = handler

    def dispatch(self, key) -> bool:
        """Run the handler bound to a keystroke. Returns True if one ran."""
        if key.name and key.name in self._bindings:
            self._bindings[key.name]()
            return True
        char = str(key)
        if char in self._char_bindings:
            self._char_bindings[char]()
            return True
        return False

    def process(self, timeout: float | None = 0.001):
        """Wait up to ``timeout`` seconds for a key and dispatch it.

        Returns the keystroke (empty when the timeout expired).
        """
        key = self.terminal.inkey(timeout=timeout)
        if key:
            self.dispatch(key)
        return key


class HelpOverlay:
    """Render a help overlay showing keyboard controls."""

    HELP_TEXT = """
╔══════════════════════════════════════════╗
║          cframe Player - Help            ║
╠══════════════════════════════════════════╣
║                                          ║
║  PLAYBACK                                ║
║  ────────                                ║
║  Space        Play / Pause               ║
║  Q / Escape   Exit                       ║
║                                          ║
║  NAVIGATION                              ║
║  ──────────                              ║
║  ← / →        Step one frame             ║
║  Home         Jump to first frame        ║
║  End          Jump to last frame         ║
║                                          ║
║  SPEED                                   ║
║  ─────                                   ║
║  + / =        One fps faster             ║
║  - / _        One fps slower             ║
║  L            Toggle loop / once         ║
║                                          ║
║       Press any key to close help        ║
╚══════════════════════════════════════════╝
"""

    @classmethod
    def render(cls, term_w: int, term_h: int) -> str:
        """Render the help overlay centered on screen."""
        lines = cls.HELP_TEXT.strip().split("\n")
        box_height = len(lines)
        box_width = max(len(line) for line in lines)

        start_y = max(1, (term_h - box_height) // 2)
        start_x = max(1, (term_w - box_width) // 2)

        output = [f"{ESC}[48;2;20;20;40m"]
        for i, line in enumerate(lines):
            padded = line.ljust(box_width)
            output.append(f"{ESC}[{start_y + i};{start_x}H{ESC}[38;2;200;200;255m{padded}")
        output.append(RESET)
        return "".join(output)


class TerminalPlayer:
    """
    Terminal player for an ordered list of frames.

    One cooperative loop owns the frames and the controller. It suspends only
    inside ``Terminal.inkey`` and wakes up on input or when the next frame is
    due, whichever comes first. At most one frame is advanced per wake-up and
    the tick clock restarts after every tick.
    """

    def __init__(
        self,
        frames: Sequence[Frame],
        controller: AnimationController,
        *,
        config: TerminalPlayerConfig | None = None,
        terminal: Terminal | None = None,
    ):
        """
        Initialize the player.

        :param frames: Frames in playback order
        :param controller: Playback controller; its frame count is set here
        :param config: Player configuration (uses defaults if None)
        :param terminal: blessed Terminal (created if None)
        """
        self.frames = list(frames)
        self.controller = controller
        self.controller.set_frame_count(len(self.frames))
        self.config = config or TerminalPlayerConfig()
        self.has_any_color = any(frame.has_color for frame in self.frames)

        self._terminal = terminal
        self._keyboard: KeyboardHandler | None = None
        self._renderer = FrameRenderer(
            text_color=self.config.text_color,
            show_status_line=self.config.show_status_line,
            show_help_hint=self.config.show_help_hint,
        )

        # State
        self._running = False
        self._needs_redraw = True
        self._show_help = False
        self._last_tick = time.monotonic()
        self._last_term_size = (0, 0)

    @property
    def terminal(self) -> Terminal:
        if self._terminal is None:
            self._terminal = Terminal()
        return self._terminal

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def needs_redraw(self) -> bool:
        return self._needs_redraw

    def _setup_keyboard_bindings(self) -> None:
        """Set up keyboard bindings."""
        kb = self._keyboard
        if not kb:
            return

        kb.bind(" ", self._on_toggle)

        kb.bind("q", self._on_quit)
        kb.bind("Q", self._on_quit)
        kb.bind("KEY_ESCAPE", self._on_quit)

        kb.bind("KEY_RIGHT", self._on_step_forward)
        kb.bind("KEY_LEFT", self._on_step_backward)
        kb.bind("KEY_HOME", self._on_home)
        kb.bind("KEY_END", self._on_end)

        if self.config.enable_fps_control:
            kb.bind("+", self._on_fps_up)
            kb.bind("=", self._on_fps_up)  # Same key without shift
            kb.bind("-", self._on_fps_down)
            kb.bind("_", self._on_fps_down)

        if self.config.enable_loop_toggle:
            kb.bind("l", self._on_loop_toggle)
            kb.bind("L", self._on_loop_toggle)

        kb.bind("h", self._on_help_toggle)
        kb.bind("H", self._on_help_toggle)
        kb.bind("?", self._on_help_toggle)

    def _reset_tick_clock(self) -> None:
        self._last_tick = time.monotonic()

    def _on_toggle(self) -> None:
        self.controller.toggle()
        self._reset_tick_clock()
        self._needs_redraw = True

    def _on_quit(self) -> None:
        self._running = False

    def _on_step_forward(self) -> None:
        self.controller.step_forward()
        self._needs_redraw = True

    def _on_step_backward(self) -> None:
        self.controller.step_backward()
        self._needs_redraw = True

    def _on_home(self) -> None:
        self.controller.set_current_frame(0)
        self._needs_redraw = True

    def _on_end(self) -> None:
        self.controller.set_current_frame(self.controller.frame_count - 1)
        self._needs_redraw = True

    def _on_fps_up(self) -> None:
        self.controller.set_fps(self.controller.fps + 1)
        self._reset_tick_clock()
        self._needs_redraw = True

    def _on_fps_down(self) -> None:
        self.controller.set_fps(self.controller.fps - 1)
        self._reset_tick_clock()
        self._needs_redraw = True

    def _on_loop_toggle(self) -> None:
        self.controller.toggle_loop_mode()
        self._needs_redraw = True

    def _on_help_toggle(self) -> None:
        self._show_help = not self._show_help
        self._needs_redraw = True

    def _handle_resize(self, _signum, _frame) -> None:
        """Handle terminal resize signal."""
        self._needs_redraw = True

    def _wait_timeout(self, now: float) -> float:
        """Seconds to block for input before the next frame is due."""
        if not self.controller.is_playing:
            return self.config.idle_poll_interval
        return max(0.0, self.controller.interval - (now - self._last_tick))

    def _process_input(self, timeout: float) -> None:
        """Block for one key (or until timeout) and apply it."""
        if self._keyboard is None:
            return
        if self._show_help:
            # Any key dismisses help
            key = self.terminal.inkey(timeout=timeout)
            if key:
                self._show_help = False
                self._needs_redraw = True
            return
        self._keyboard.process(timeout=timeout)

    def _advance(self, now: float) -> None:
        """Run at most one tick if the current frame interval has elapsed."""
        if not self.controller.is_playing:
            return
        if now - self._last_tick >= self.controller.interval:
            self.controller.tick()
            # Redraw even without a frame change so the status shows "finished"
            self._needs_redraw = True
            self._last_tick = now

    def _check_terminal_size(self) -> tuple[int, int]:
        size = (self.terminal.width, self.terminal.height)
        if size != self._last_term_size:
            self._last_term_size = size
            self._needs_redraw = True
        return size

    def render(self) -> str:
        """Build the screen contents for the current frame."""
        term_w, term_h = self._last_term_size
        frame = self.frames[self.controller.current_frame]
        status = StatusLine.from_controller(self.controller, self.has_any_color)
        output = self._renderer.render(frame, status, term_w, term_h)
        if self._show_help:
            output += HelpOverlay.render(term_w, term_h)
        return output

    def play(self) -> None:
        """Run the interactive playback loop until the user quits."""
        if not self.frames:
            logger.error("No frames to display")
            return

        self._keyboard = KeyboardHandler(self.terminal)
        self._setup_keyboard_bindings()

        # Setup terminal resize handler (Unix only)
        if hasattr(signal, "SIGWINCH"):
            signal.signal(signal.SIGWINCH, self._handle_resize)

        self._running = True
        self._needs_redraw = True
        self._reset_tick_clock()
        logger.info(
            f"Playing {len(self.frames)} frames at {self.controller.fps} fps "
            f"({self.controller.loop_mode.value})"
        )

        term = self.terminal
        with term.fullscreen(), term.cbreak(), term.hidden_cursor():
            try:
                while self._running:
                    self._check_terminal_size()
                    if self._needs_redraw:
                        sys.stdout.write(self.render())
                        sys.stdout.flush()
                        self._needs_redraw = False

                    self._process_input(self._wait_timeout(time.monotonic()))
                    if not self._running:
                        break

                    self._advance(time.monotonic())
            except KeyboardInterrupt:
                pass
            finally:
                sys.stdout.write(RESET)
                sys.stdout.flush()
                self._running = False

        logger.info(f"Playback stopped at frame {self.controller.current_frame + 1}")
