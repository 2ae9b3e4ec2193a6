"""
cframeview - Decode .cframe ASCII art frames and play them back in the terminal
"""

from .cframe import CFrame, parse_cframe, parse_cframe_text
from .controller import AnimationController, LoopMode, PlaybackState, TickResult
from .exceptions import CFrameError, FormatError, FrameIOError, NoFramesError
from .frame import Frame, FrameFile, normalize_frame_text
from .loader import collect_frame_paths, load_frames

__all__ = [
    # Decoding
    "CFrame",
    "parse_cframe",
    "parse_cframe_text",
    # Frames
    "Frame",
    "FrameFile",
    "normalize_frame_text",
    "collect_frame_paths",
    "load_frames",
    # Playback
    "AnimationController",
    "LoopMode",
    "PlaybackState",
    "TickResult",
    # Errors
    "CFrameError",
    "FormatError",
    "FrameIOError",
    "NoFramesError",
]
