"""
CFrame decoding - Turn .cframe bytes into a character/color grid.

A .cframe file stores one ASCII art frame. After a fixed 16 byte header the
cells follow in row-major order, grouped into runs that share one color:

    header:  magic "CFRM" | u8 version | 3 reserved bytes | i32 width | i32 height
    run:     u16 length | u8 r | u8 g | u8 b | u8 flags | <length> char bytes

All integers are little-endian. Flag bit 0 marks the cells of a run as skip
(transparent). A run may continue across row boundaries; the decoder only
cares that the runs add up to exactly ``width * height`` cells.

Example:
    from cframeview.cframe import parse_cframe, parse_cframe_text

    data = Path("frame_0001.cframe").read_bytes()
    grid = parse_cframe(data)
    print(grid.char_at(0, 0), grid.rgb_at(0, 0))
    print(parse_cframe_text(data))
"""

from __future__ import annotations

import struct
from typing import Iterator

import numpy as np

from .exceptions import FormatError

MAGIC = b"CFRM"
VERSION = 1

HEADER = struct.Struct("<4sB3xii")
RUN_HEADER = struct.Struct("<HBBBB")

FLAG_SKIP = 0x01
KNOWN_FLAGS = FLAG_SKIP

# Cell characters must not break the row structure of the text view
FORBIDDEN_CHARS = frozenset(b"\r\n")

RGB = tuple[int, int, int]


class CFrame:
    """
    Decoded .cframe grid with per-cell character, color and skip flag.

    The grid is immutable. All accessors are O(1) lookups into numpy arrays
    and return ``None`` (or ``True`` for :meth:`should_skip`) for coordinates
    outside the grid instead of raising.
    """

    __slots__ = ("_width", "_height", "_chars", "_colors", "_skip")

    def __init__(
        self,
        width: int,
        height: int,
        chars: np.ndarray,
        colors: np.ndarray,
        skip_mask: np.ndarray,
    ):
        """
        Create a grid from already decoded arrays.

        :param width: Grid width in cells
        :param height: Grid height in cells
        :param chars: uint8 array of shape (height, width)
        :param colors: uint8 array of shape (height, width, 3)
        :param skip_mask: bool array of shape (height, width)
        """
        if width <= 0 or height <= 0:
            raise FormatError(f"invalid grid size {width}x{height}")
        if (
            chars.shape != (height, width)
            or colors.shape != (height, width, 3)
            or skip_mask.shape != (height, width)
        ):
            raise FormatError(f"cell arrays do not match grid size {width}x{height}")

        self._width = width
        self._height = height
        self._chars = _frozen(np.array(chars, dtype=np.uint8))
        self._colors = _frozen(np.array(colors, dtype=np.uint8))
        self._skip = _frozen(np.array(skip_mask, dtype=bool))

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def chars(self) -> np.ndarray:
        """Read-only character bytes, shape (height, width)."""
        return self._chars

    @property
    def colors(self) -> np.ndarray:
        """Read-only RGB values, shape (height, width, 3)."""
        return self._colors

    @property
    def skip_mask(self) -> np.ndarray:
        """Read-only skip flags, shape (height, width)."""
        return self._skip

    def contains(self, row: int, col: int) -> bool:
        """Whether (row, col) lies inside the grid."""
        return 0 <= row < self._height and 0 <= col < self._width

    def char_at(self, row: int, col: int) -> str | None:
        """Character at (row, col), or None outside the grid."""
        if not self.contains(row, col):
            return None
        return chr(self._chars[row, col])

    def rgb_at(self, row: int, col: int) -> RGB | None:
        """RGB triplet at (row, col), or None outside the grid."""
        if not self.contains(row, col):
            return None
        r, g, b = self._colors[row, col]
        return int(r), int(g), int(b)

    def should_skip(self, row: int, col: int) -> bool:
        """Whether the cell must not be drawn. True outside the grid."""
        if not self.contains(row, col):
            return True
        return bool(self._skip[row, col])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CFrame):
            return NotImplemented
        return (
            self._width == other._width
            and self._height == other._height
            and np.array_equal(self._chars, other._chars)
            and np.array_equal(self._colors, other._colors)
            and np.array_equal(self._skip, other._skip)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"CFrame(width={self._width}, height={self._height})"


def _frozen(array: np.ndarray) -> np.ndarray:
    array = np.ascontiguousarray(array)
    array.flags.writeable = False
    return array


def _read_header(data: bytes | memoryview) -> tuple[int, int]:
    """Validate the header and return (width, height)."""
    if len(data) < HEADER.size:
        raise FormatError(
            f"truncated header: expected {HEADER.size} bytes, got {len(data)}"
        )
    magic, version, width, height = HEADER.unpack_from(data, 0)
    if magic != MAGIC:
        raise FormatError(f"bad magic {magic!r}, expected {MAGIC!r}")
    if version != VERSION:
        raise FormatError(f"unsupported format version {version}")
    if width <= 0 or height <= 0:
        raise FormatError(f"invalid grid size {width}x{height}")
    return width, height


def _iter_runs(
    data: bytes | memoryview, cell_count: int
) -> Iterator[tuple[int, RGB, int, memoryview]]:
    """
    Yield (length, rgb, flags, chars) for every run after the header.

    Stops once exactly ``cell_count`` cells were produced and raises
    FormatError for every structural inconsistency on the way.
    """
    view = memoryview(data)
    offset = HEADER.size
    filled = 0

    while filled < cell_count:
        if offset + RUN_HEADER.size > len(view):
            raise FormatError(
                f"truncated data: {filled} of {cell_count} cells decoded"
            )
        length, r, g, b, flags = RUN_HEADER.unpack_from(view, offset)
        offset += RUN_HEADER.size

        if length == 0:
            raise FormatError(f"empty run at byte {offset - RUN_HEADER.size}")
        if flags & ~KNOWN_FLAGS:
            raise FormatError(f"unknown run flags 0x{flags:02x}")
        if filled + length > cell_count:
            raise FormatError(
                f"cell count mismatch: runs exceed the declared {cell_count} cells"
            )
        if offset + length > len(view):
            raise FormatError(
                f"truncated run: expected {length} chars, got {len(view) - offset}"
            )

        chars = view[offset : offset + length]
        if not FORBIDDEN_CHARS.isdisjoint(chars):
            raise FormatError(f"line terminator inside run at byte {offset}")
        offset += length
        filled += length
        yield length, (r, g, b), flags, chars

    if offset != len(view):
        raise FormatError(f"{len(view) - offset} trailing bytes after the last cell")


def parse_cframe(data: bytes) -> CFrame:
    """
    Decode a .cframe buffer into a :class:`CFrame`.

    :param data: Raw file contents
    :return: The decoded grid
    :raises FormatError: If the buffer is truncated or inconsistent
    """
    width, height = _read_header(data)
    cell_count = width * height

    lengths: list[int] = []
    run_colors: list[RGB] = []
    run_skips: list[bool] = []
    chunks: list[bytes] = []
    for length, rgb, flags, chars in _iter_runs(data, cell_count):
        lengths.append(length)
        run_colors.append(rgb)
        run_skips.append(bool(flags & FLAG_SKIP))
        chunks.append(bytes(chars))

    chars = np.frombuffer(b"".join(chunks), dtype=np.uint8).reshape(height, width)
    colors = np.repeat(
        np.array(run_colors, dtype=np.uint8).reshape(-1, 3), lengths, axis=0
    ).reshape(height, width, 3)
    skip_mask = np.repeat(np.array(run_skips, dtype=bool), lengths).reshape(
        height, width
    )
    return CFrame(width, height, chars, colors, skip_mask)


def parse_cframe_text(data: bytes) -> str:
    """
    Extract the plain text view of a .cframe buffer.

    Colors and skip flags are ignored; every row ends with a newline.

    :param data: Raw file contents
    :return: Newline-delimited text, one line per grid row
    :raises FormatError: If the buffer is truncated or inconsistent
    """
    width, height = _read_header(data)
    raw = b"".join(bytes(chars) for _, _, _, chars in _iter_runs(data, width * height))
    text = raw.decode("latin-1")
    return "".join(text[row * width : (row + 1) * width] + "\n" for row in range(height))
