"""Exception classes for frame loading and decoding."""


class CFrameError(Exception):
    """Base exception for cframeview errors."""

    pass


class FormatError(CFrameError):
    """Raised for malformed, truncated or inconsistent .cframe data."""

    pass


class FrameIOError(CFrameError):
    """Raised when a frame directory or frame file cannot be read."""

    pass


class NoFramesError(CFrameError):
    """Raised when a directory contains no .cframe or frame_*.txt files."""

    pass
