"""
Frame Renderer - Turn frames into ANSI escape sequences for the terminal.

Colored frames are drawn run by run: horizontally adjacent cells with the
same RGB value are merged into one truecolor escape plus text, and skip cells
are not drawn at all so the background shows through. Text-only frames are
drawn as runs of non-space characters in a single color.

Example:
    from cframeview.components.ascii import FrameRenderer, StatusLine

    renderer = FrameRenderer()
    status = StatusLine.from_controller(controller, has_color=True)
    sys.stdout.write(renderer.render(frame, status, 120, 40))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from ...cframe import CFrame
from ...controller import AnimationController, LoopMode, PlaybackState
from ...frame import Frame

# ANSI escape codes
ESC = "\033"
CLEAR_SCREEN = f"{ESC}[2J"
CURSOR_HOME = f"{ESC}[H"
RESET = f"{ESC}[0m"
DARK_GREY = f"{ESC}[90m"

WHITE = (255, 255, 255)

HELP_HINT = "[space] play/pause [←/→] step [+/-] fps [l] loop [q] quit"


def move_to(x: int, y: int) -> str:
    """Cursor position escape for 0-based column x and row y."""
    return f"{ESC}[{y + 1};{x + 1}H"


def fg_color(rgb: tuple[int, int, int]) -> str:
    r, g, b = rgb
    return f"{ESC}[38;2;{r};{g};{b}m"


@dataclass
class StatusLine:
    """Everything shown in the status line below the frame."""

    current_frame: int = 0
    total_frames: int = 0
    state: PlaybackState = PlaybackState.PAUSED
    fps: int = 24
    loop_mode: LoopMode = LoopMode.LOOP
    has_color: bool = False

    @classmethod
    def from_controller(
        cls, controller: AnimationController, has_color: bool
    ) -> StatusLine:
        return cls(
            current_frame=controller.current_frame,
            total_frames=controller.frame_count,
            state=controller.state,
            fps=controller.fps,
            loop_mode=controller.loop_mode,
            has_color=has_color,
        )

    def text(self, show_help_hint: bool = True) -> str:
        parts = [
            f"frame {self.current_frame + 1}/{self.total_frames}",
            self.state.value,
            f"{self.fps} fps",
            self.loop_mode.value,
            f"color:{'on' if self.has_color else 'off'}",
        ]
        if show_help_hint:
            parts.append(HELP_HINT)
        return " | ".join(parts)


def iter_color_runs(
    cframe: CFrame, row: int, max_cols: int
) -> Iterator[tuple[int, tuple[int, int, int], str]]:
    """
    Yield (start_col, rgb, text) for the drawable runs of one grid row.

    Only the first ``max_cols`` cells are considered. Skip cells end a run
    and are never part of one.
    """
    width = min(cframe.width, max_cols)
    if width <= 0 or not 0 <= row < cframe.height:
        return

    skip = cframe.skip_mask[row, :width]
    colors = cframe.colors[row, :width]
    chars = cframe.chars[row, :width]

    # A new run starts wherever color or skip state differs from the left neighbour
    changed = np.any(colors[1:] != colors[:-1], axis=1) | (skip[1:] != skip[:-1])
    starts = np.concatenate(([0], np.flatnonzero(changed) + 1))
    ends = np.append(starts[1:], width)

    for start, end in zip(starts.tolist(), ends.tolist()):
        if skip[start]:
            continue
        r, g, b = colors[start].tolist()
        yield start, (r, g, b), chars[start:end].tobytes().decode("latin-1")


def iter_text_runs(line: str, max_cols: int) -> Iterator[tuple[int, str]]:
    """Yield (start_col, text) for the runs of non-space characters in a line."""
    line = line[:max_cols]
    col = 0
    while col < len(line):
        if line[col] == " ":
            col += 1
            continue
        start = col
        while col < len(line) and line[col] != " ":
            col += 1
        yield start, line[start:col]


def split_lines(content: str) -> list[str]:
    """Split frame text into lines, dropping the final terminator and any CR."""
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.rstrip("\r") for line in lines]


class FrameRenderer:
    """Render frames centered in the terminal with a status line on the last row."""

    def __init__(
        self,
        text_color: tuple[int, int, int] = WHITE,
        show_status_line: bool = True,
        show_help_hint: bool = True,
    ):
        """
        Initialize the frame renderer.

        :param text_color: Color for text-only frames
        :param show_status_line: Reserve the last row for the status line
        :param show_help_hint: Append the key help to the status line
        """
        self.text_color = text_color
        self.show_status_line = show_status_line
        self.show_help_hint = show_help_hint

    def drawable_height(self, term_height: int) -> int:
        if self.show_status_line:
            return max(0, term_height - 1)
        return max(0, term_height)

    @staticmethod
    def layout(
        frame_w: int, frame_h: int, term_w: int, term_h: int
    ) -> tuple[int, int, int, int]:
        """
        Clip a frame to the available area and center it.

        :return: (draw_w, draw_h, x_offset, y_offset)
        """
        draw_w = max(0, min(frame_w, term_w))
        draw_h = max(0, min(frame_h, term_h))
        x_offset = max(0, term_w - draw_w) // 2
        y_offset = max(0, term_h - draw_h) // 2
        return draw_w, draw_h, x_offset, y_offset

    def render(
        self,
        frame: Frame,
        status: StatusLine | None,
        term_width: int,
        term_height: int,
    ) -> str:
        """
        Render a full screen update.

        :param frame: Frame to draw
        :param status: Status line contents (None draws no status line)
        :param term_width: Terminal width in columns
        :param term_height: Terminal height in rows
        :return: String with ANSI escape codes
        """
        output = [CURSOR_HOME, CLEAR_SCREEN]
        height = self.drawable_height(term_height)

        if frame.cframe is not None:
            output.append(self.render_cframe(frame.cframe, term_width, height))
        else:
            output.append(self.render_text(frame.content, term_width, height))

        if self.show_status_line and status is not None:
            output.append(self.render_status(status, term_width, term_height))

        output.append(RESET)
        return "".join(output)

    def render_cframe(self, cframe: CFrame, term_width: int, height: int) -> str:
        draw_w, draw_h, x_offset, y_offset = self.layout(
            cframe.width, cframe.height, term_width, height
        )
        output = []
        for row in range(draw_h):
            for start, rgb, text in iter_color_runs(cframe, row, draw_w):
                output.append(
                    f"{move_to(x_offset + start, y_offset + row)}{fg_color(rgb)}{text}"
                )
        return "".join(output)

    def render_text(self, content: str, term_width: int, height: int) -> str:
        lines = split_lines(content)
        frame_w = max((len(line) for line in lines), default=0)
        draw_w, draw_h, x_offset, y_offset = self.layout(
            frame_w, len(lines), term_width, height
        )
        color = fg_color(self.text_color)
        output = []
        for row, line in enumerate(lines[:draw_h]):
            for start, text in iter_text_runs(line, draw_w):
                output.append(f"{move_to(x_offset + start, y_offset + row)}{color}{text}")
        return "".join(output)

    def render_status(self, status: StatusLine, term_width: int, term_height: int) -> str:
        """Draw the status line on the last terminal row, truncated to the width."""
        if term_width <= 0 or term_height <= 0:
            return ""
        y = term_height - 1
        text = status.text(self.show_help_hint)[:term_width]
        return (
            f"{move_to(0, y)}{DARK_GREY}{' ' * term_width}"
            f"{move_to(0, y)}{text}{RESET}"
        )
