"""
Pytest fixtures for cframeview tests
"""

import struct

import pytest

WHITE = (255, 255, 255)


def encode_cells(width, height, cells, max_run=None, version=1, magic=b"CFRM"):
    """
    Encode row-major (char, rgb, skip) cells as .cframe bytes.

    Adjacent cells with equal color and skip flag share a run, also across
    row boundaries. ``max_run`` splits runs into smaller pieces.
    """
    data = bytearray(struct.pack("<4sB3xii", magic, version, width, height))
    runs = []
    for char, rgb, skip in cells:
        key = (tuple(rgb), bool(skip))
        if runs and runs[-1][0] == key and (max_run is None or len(runs[-1][1]) < max_run):
            runs[-1][1].append(char)
        else:
            runs.append((key, [char]))
    for (rgb, skip), chars in runs:
        data += struct.pack("<HBBBB", len(chars), *rgb, 1 if skip else 0)
        data += "".join(chars).encode("latin-1")
    return bytes(data)


def build_cframe(lines, colors=None, skip=None, max_run=None):
    """
    Encode a frame from text lines.

    :param lines: Equal-length strings, one per row
    :param colors: Optional callable (row, col) -> rgb, white by default
    :param skip: Optional callable (row, col) -> bool
    :param max_run: Optional maximum run length
    """
    height = len(lines)
    width = len(lines[0])
    cells = []
    for row, line in enumerate(lines):
        assert len(line) == width
        for col, char in enumerate(line):
            rgb = colors(row, col) if colors else WHITE
            is_skip = skip(row, col) if skip else False
            cells.append((char, rgb, is_skip))
    return encode_cells(width, height, cells, max_run=max_run)


@pytest.fixture
def make_cframe():
    """Returns a builder for .cframe byte buffers from text lines."""
    return build_cframe


@pytest.fixture
def make_cells():
    """Returns a builder for .cframe byte buffers from explicit cells."""
    return encode_cells


@pytest.fixture
def sample_cframe_bytes() -> bytes:
    """
    A 4x3 frame with a red block, a blue block and a skipped background column.
    """

    def colors(row, col):
        return (255, 0, 0) if col < 2 else (0, 0, 255)

    return build_cframe(
        ["##@ ", "#+@ ", "..o "],
        colors=colors,
        skip=lambda row, col: col == 3,
    )
