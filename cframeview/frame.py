"""Frame value type and filename based frame ordering."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from .cframe import CFrame

_TRAILING_DIGITS = re.compile(r"([0-9]+)$")


@dataclass(frozen=True)
class Frame:
    """
    One unit of playback.

    ``content`` is always present. ``cframe`` holds the color grid when a
    .cframe file backs this frame.
    """

    content: str
    cframe: CFrame | None = None

    @classmethod
    def text_only(cls, content: str) -> Frame:
        return cls(content=content)

    @classmethod
    def with_color(cls, content: str, cframe: CFrame) -> Frame:
        return cls(content=content, cframe=cframe)

    @property
    def has_color(self) -> bool:
        return self.cframe is not None


@dataclass(frozen=True)
class FrameFile:
    """A frame file on disk together with its ordering index."""

    index: int
    name: str
    path: Path

    @staticmethod
    def extract_index(stem: str, fallback: int) -> int:
        """
        Derive the ordering index from a filename stem.

        :param stem: Filename without extension, e.g. ``frame_007``
        :param fallback: Index used when the stem has no numeric suffix
        :return: The trailing number of the stem, or ``fallback``
        """
        match = _TRAILING_DIGITS.search(stem)
        if match is None:
            return fallback
        return int(match.group(1))

    @classmethod
    def from_path(cls, path: Path, fallback: int) -> FrameFile:
        return cls(cls.extract_index(path.stem, fallback), path.name, path)

    def sort_key(self) -> tuple[int, str]:
        return self.index, self.name


def normalize_frame_text(text: str) -> str:
    """Append a trailing newline to a text frame unless it already has one."""
    if not text.endswith("\n"):
        text += "\n"
    return text
