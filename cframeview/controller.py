"""
Animation Controller - Playback state machine over an ordered frame list.

The controller only tracks indices and timing parameters; it never touches
frames or the terminal. Every operation clamps or saturates its input, so
nothing here can fail once the frame count is known.

Example:
    controller = AnimationController(fps=24)
    controller.set_frame_count(len(frames))
    controller.set_loop_mode(LoopMode.ONCE)
    controller.play()

    while controller.is_playing:
        time.sleep(controller.interval)
        controller.tick()
"""

from __future__ import annotations

from enum import Enum

MIN_FPS = 1


class PlaybackState(Enum):
    """Playback state machine."""

    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


class LoopMode(Enum):
    """What happens when playback moves past the last frame."""

    LOOP = "loop"  # Wrap around to the first frame
    ONCE = "once"  # Stop on the last frame


class TickResult(Enum):
    """Outcome of :meth:`AnimationController.tick`."""

    ADVANCED = "advanced"
    UNCHANGED = "unchanged"

    def __bool__(self) -> bool:
        return self is TickResult.ADVANCED


class AnimationController:
    """Control frame index, play state, loop mode and fps of an animation."""

    def __init__(self, fps: int = 24):
        self._fps = max(MIN_FPS, fps)
        self._frame_count = 0
        self._current_frame = 0
        self._state = PlaybackState.PAUSED
        self._loop_mode = LoopMode.LOOP

    @property
    def fps(self) -> int:
        """Playback rate in frames per second (at least 1)."""
        return self._fps

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def current_frame(self) -> int:
        """Index of the frame to display; 0 while no frames are attached."""
        return self._current_frame

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def loop_mode(self) -> LoopMode:
        return self._loop_mode

    @property
    def is_playing(self) -> bool:
        return self._state == PlaybackState.PLAYING

    @property
    def interval_ms(self) -> int:
        """Milliseconds per frame. 0 at very high fps means redraw as fast as possible."""
        return 1000 // self._fps

    @property
    def interval(self) -> float:
        """Seconds per frame, derived from :attr:`interval_ms`."""
        return self.interval_ms / 1000.0

    @property
    def last_frame(self) -> int:
        return max(0, self._frame_count - 1)

    def set_frame_count(self, count: int) -> None:
        """Attach the number of loaded frames and clamp the current index."""
        self._frame_count = max(0, count)
        self._current_frame = min(self._current_frame, self.last_frame)

    def play(self) -> None:
        """Start or resume playback. A finished animation restarts from frame 0."""
        if self._state == PlaybackState.FINISHED:
            self._current_frame = 0
        self._state = PlaybackState.PLAYING

    def pause(self) -> None:
        """Pause playback."""
        if self._state == PlaybackState.PLAYING:
            self._state = PlaybackState.PAUSED

    def toggle(self) -> None:
        """Toggle between play and pause."""
        if self._state == PlaybackState.PLAYING:
            self.pause()
        else:
            self.play()

    def step_forward(self) -> None:
        self._current_frame = min(self._current_frame + 1, self.last_frame)

    def step_backward(self) -> None:
        self._current_frame = max(self._current_frame - 1, 0)

    def set_current_frame(self, index: int) -> None:
        """Jump to a frame, clamping the index into the valid range."""
        self._current_frame = max(0, min(index, self.last_frame))

    def set_fps(self, fps: int) -> None:
        """Set the playback rate, saturating at 1 fps."""
        self._fps = max(MIN_FPS, fps)

    def set_loop_mode(self, mode: LoopMode) -> None:
        self._loop_mode = mode

    def toggle_loop_mode(self) -> None:
        """Switch between LOOP and ONCE."""
        if self._loop_mode == LoopMode.LOOP:
            self._loop_mode = LoopMode.ONCE
        else:
            self._loop_mode = LoopMode.LOOP

    def tick(self) -> TickResult:
        """
        Advance playback by one frame interval.

        Past the last frame, LOOP wraps to frame 0 and ONCE stays on the last
        frame and switches to FINISHED.

        :return: ADVANCED if the frame index changed, UNCHANGED otherwise
        """
        if self._state != PlaybackState.PLAYING or self._frame_count == 0:
            return TickResult.UNCHANGED

        previous = self._current_frame
        if self._current_frame < self.last_frame:
            self._current_frame += 1
        elif self._loop_mode == LoopMode.LOOP:
            self._current_frame = 0
        else:
            self._state = PlaybackState.FINISHED

        if self._current_frame == previous:
            return TickResult.UNCHANGED
        return TickResult.ADVANCED
