"""
Frame assembly - Build the ordered frame list from a directory.

Binary .cframe files take precedence: as soon as one exists, the whole
sequence is built from .cframe files. Otherwise frame_*.txt files are used,
each optionally paired with a .cframe file of the same stem that contributes
the color grid.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .cframe import parse_cframe, parse_cframe_text
from .exceptions import FormatError, FrameIOError, NoFramesError
from .frame import Frame, FrameFile, normalize_frame_text

logger = logging.getLogger(__name__)

CFRAME_EXTENSION = "cframe"
TEXT_EXTENSION = "txt"
TEXT_FRAME_PREFIX = "frame_"


def collect_frame_paths(
    directory: Path,
    extension: str,
    require_frame_prefix: bool = False,
) -> list[Path]:
    """
    List frame files of one kind in playback order.

    :param directory: Directory to scan (not recursive)
    :param extension: File extension without dot, matched case-insensitively
    :param require_frame_prefix: Only accept names starting with ``frame_``
    :return: Paths sorted by numeric suffix, then by filename
    :raises FrameIOError: If the directory cannot be read
    """
    try:
        entries = list(Path(directory).iterdir())
    except OSError as e:
        raise FrameIOError(f"reading frame directory {directory}: {e}") from e

    frame_files = []
    for fallback, path in enumerate(entries):
        if not path.is_file():
            continue
        if path.suffix[1:].lower() != extension.lower():
            continue
        if require_frame_prefix and not path.name.startswith(TEXT_FRAME_PREFIX):
            continue
        frame_files.append(FrameFile.from_path(path, fallback))

    frame_files.sort(key=FrameFile.sort_key)
    return [frame_file.path for frame_file in frame_files]


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise FrameIOError(f"reading {path}: {e}") from e


def _read_text(path: Path) -> str:
    try:
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FrameIOError(f"reading {path}: {e}") from e


def _parse(path: Path, data: bytes, with_text: bool):
    try:
        cframe = parse_cframe(data)
        text = parse_cframe_text(data) if with_text else None
    except FormatError as e:
        raise FormatError(f"parsing .cframe file {path}: {e}") from e
    return cframe, text


def load_cframe_frames(paths: list[Path]) -> list[Frame]:
    """Build frames from .cframe files, taking the text from the same bytes."""
    frames = []
    for path in paths:
        logger.debug(f"Loading {path}")
        cframe, text = _parse(path, _read_bytes(path), with_text=True)
        frames.append(Frame.with_color(text, cframe))
    return frames


def load_text_frames(paths: list[Path]) -> list[Frame]:
    """
    Build frames from text files.

    A .cframe file with the same stem as a text file supplies the color grid;
    the text always comes from the text file.
    """
    frames = []
    for txt_path in paths:
        logger.debug(f"Loading {txt_path}")
        content = normalize_frame_text(_read_text(txt_path))
        cframe_path = txt_path.with_suffix(f".{CFRAME_EXTENSION}")
        if cframe_path.is_file():
            cframe, _ = _parse(cframe_path, _read_bytes(cframe_path), with_text=False)
            frames.append(Frame.with_color(content, cframe))
        else:
            frames.append(Frame.text_only(content))
    return frames


def load_frames(directory: Path) -> list[Frame]:
    """
    Load every frame of an animation directory.

    :param directory: Directory containing .cframe or frame_*.txt files
    :return: Frames in playback order (never empty)
    :raises NoFramesError: If the directory holds no frame files
    :raises FrameIOError: If the directory or a frame file cannot be read
    :raises FormatError: If a .cframe file is malformed
    """
    directory = Path(directory)

    cframe_paths = collect_frame_paths(directory, CFRAME_EXTENSION)
    if cframe_paths:
        frames = load_cframe_frames(cframe_paths)
        logger.info(f"Loaded {len(frames)} .cframe frames from {directory}")
        return frames

    txt_paths = collect_frame_paths(
        directory, TEXT_EXTENSION, require_frame_prefix=True
    )
    if not txt_paths:
        raise NoFramesError(
            f"No frame files found in {directory} (expected .cframe or frame_*.txt)"
        )

    frames = load_text_frames(txt_paths)
    colored = sum(1 for frame in frames if frame.has_color)
    logger.info(
        f"Loaded {len(frames)} text frames from {directory} ({colored} with color)"
    )
    return frames
