"""Tests for the AnimationController playback state machine."""

import pytest

from cframeview.controller import (
    AnimationController,
    LoopMode,
    PlaybackState,
    TickResult,
)


@pytest.fixture
def controller():
    """A paused controller over five frames."""
    ctrl = AnimationController(fps=10)
    ctrl.set_frame_count(5)
    return ctrl


class TestEnums:
    """Tests for controller enums."""

    def test_playback_state_values(self):
        """Test PlaybackState values."""
        assert PlaybackState.PLAYING.value == "playing"
        assert PlaybackState.PAUSED.value == "paused"
        assert PlaybackState.FINISHED.value == "finished"
        assert len(PlaybackState) == 3

    def test_loop_mode_values(self):
        """Test LoopMode values."""
        assert LoopMode.LOOP.value == "loop"
        assert LoopMode.ONCE.value == "once"

    def test_tick_result_truthiness(self):
        """Test only ADVANCED is truthy."""
        assert TickResult.ADVANCED
        assert not TickResult.UNCHANGED


class TestInitialState:
    """Tests for a freshly created controller."""

    def test_defaults(self):
        """Test initial values."""
        ctrl = AnimationController()

        assert ctrl.fps == 24
        assert ctrl.frame_count == 0
        assert ctrl.current_frame == 0
        assert ctrl.state == PlaybackState.PAUSED
        assert ctrl.loop_mode == LoopMode.LOOP
        assert ctrl.is_playing is False

    def test_fps_clamped_on_creation(self):
        """Test non-positive fps is raised to 1."""
        assert AnimationController(fps=0).fps == 1
        assert AnimationController(fps=-3).fps == 1

    def test_no_frames_operations(self):
        """Test stepping and ticking without frames keeps index 0."""
        ctrl = AnimationController()
        ctrl.play()

        ctrl.step_forward()
        assert ctrl.current_frame == 0
        ctrl.step_backward()
        assert ctrl.current_frame == 0
        ctrl.set_current_frame(3)
        assert ctrl.current_frame == 0
        assert ctrl.tick() is TickResult.UNCHANGED
        assert ctrl.current_frame == 0

    def test_properties_read_only(self, controller):
        """Test state cannot be assigned from outside."""
        with pytest.raises(AttributeError):
            controller.current_frame = 3
        with pytest.raises(AttributeError):
            controller.state = PlaybackState.PLAYING


class TestPlayPause:
    """Tests for play, pause and toggle."""

    def test_play(self, controller):
        """Test play starts playback."""
        controller.play()

        assert controller.state == PlaybackState.PLAYING
        assert controller.is_playing

    def test_toggle(self, controller):
        """Test toggle alternates between playing and paused."""
        controller.toggle()
        assert controller.state == PlaybackState.PLAYING

        controller.toggle()
        assert controller.state == PlaybackState.PAUSED

    def test_pause_only_from_playing(self, controller):
        """Test pause leaves FINISHED untouched."""
        controller.set_loop_mode(LoopMode.ONCE)
        controller.set_current_frame(4)
        controller.play()
        controller.tick()
        assert controller.state == PlaybackState.FINISHED

        controller.pause()
        assert controller.state == PlaybackState.FINISHED

    def test_play_restarts_finished(self, controller):
        """Test play from FINISHED restarts from the first frame."""
        controller.set_loop_mode(LoopMode.ONCE)
        controller.set_current_frame(4)
        controller.play()
        controller.tick()

        controller.play()

        assert controller.state == PlaybackState.PLAYING
        assert controller.current_frame == 0

    def test_toggle_resumes_finished(self, controller):
        """Test toggle from FINISHED resumes playing from the start."""
        controller.set_loop_mode(LoopMode.ONCE)
        controller.set_current_frame(4)
        controller.play()
        controller.tick()

        controller.toggle()

        assert controller.state == PlaybackState.PLAYING
        assert controller.current_frame == 0

    def test_play_while_playing_keeps_index(self, controller):
        """Test play while already playing does not move the index."""
        controller.set_current_frame(2)
        controller.play()
        controller.play()

        assert controller.current_frame == 2


class TestStepping:
    """Tests for stepping and jumping."""

    @pytest.mark.parametrize("start", [1, 2, 3])
    def test_step_round_trip(self, controller, start):
        """Test forward then backward returns to an interior index."""
        controller.set_current_frame(start)

        controller.step_forward()
        controller.step_backward()

        assert controller.current_frame == start

    def test_step_forward_clamps(self, controller):
        """Test stepping past the last frame is idempotent."""
        controller.set_current_frame(4)

        controller.step_forward()
        controller.step_forward()

        assert controller.current_frame == 4

    def test_step_backward_clamps(self, controller):
        """Test stepping before the first frame is idempotent."""
        controller.step_backward()
        controller.step_backward()

        assert controller.current_frame == 0

    def test_steps_keep_state(self, controller):
        """Test stepping does not change the play state."""
        controller.play()
        controller.step_forward()
        assert controller.state == PlaybackState.PLAYING

        controller.pause()
        controller.step_backward()
        assert controller.state == PlaybackState.PAUSED

    @pytest.mark.parametrize("index,expected", [(0, 0), (3, 3), (4, 4), (7, 4), (-2, 0)])
    def test_set_current_frame_clamps(self, controller, index, expected):
        """Test set_current_frame clamps into range."""
        controller.set_current_frame(index)

        assert controller.current_frame == expected

    def test_set_frame_count_clamps_index(self, controller):
        """Test shrinking the frame count clamps the current index."""
        controller.set_current_frame(4)

        controller.set_frame_count(2)
        assert controller.current_frame == 1

        controller.set_frame_count(0)
        assert controller.current_frame == 0
        assert controller.frame_count == 0


class TestFps:
    """Tests for fps handling."""

    def test_set_fps_zero(self, controller):
        """Test set_fps(0) saturates at 1."""
        controller.set_fps(0)

        assert controller.fps == 1

    def test_set_fps_negative(self, controller):
        """Test negative fps saturates at 1."""
        controller.set_fps(-10)

        assert controller.fps == 1

    @pytest.mark.parametrize(
        "fps,interval_ms",
        [(1, 1000), (3, 333), (24, 41), (1000, 1), (5000, 0)],
    )
    def test_interval(self, controller, fps, interval_ms):
        """Test interval_ms is integer division of 1000 by fps."""
        controller.set_fps(fps)

        assert controller.interval_ms == interval_ms
        assert controller.interval == pytest.approx(interval_ms / 1000.0)


class TestLoopMode:
    """Tests for loop mode switching."""

    def test_set_loop_mode(self, controller):
        """Test set_loop_mode only changes the policy."""
        controller.set_current_frame(2)
        controller.set_loop_mode(LoopMode.ONCE)

        assert controller.loop_mode == LoopMode.ONCE
        assert controller.current_frame == 2
        assert controller.state == PlaybackState.PAUSED

    def test_toggle_loop_mode(self, controller):
        """Test toggle_loop_mode alternates."""
        controller.toggle_loop_mode()
        assert controller.loop_mode == LoopMode.ONCE

        controller.toggle_loop_mode()
        assert controller.loop_mode == LoopMode.LOOP


class TestTick:
    """Tests for time-driven advancement."""

    def test_tick_while_paused(self, controller):
        """Test ticks do nothing while paused."""
        assert controller.tick() is TickResult.UNCHANGED
        assert controller.current_frame == 0

    def test_loop_cycles(self, controller):
        """Test LOOP mode cycles through all frames and wraps around."""
        controller.play()
        seen = [controller.current_frame]

        for _ in range(10):
            assert controller.tick() is TickResult.ADVANCED
            assert controller.state == PlaybackState.PLAYING
            seen.append(controller.current_frame)

        assert seen == [0, 1, 2, 3, 4, 0, 1, 2, 3, 4, 0]

    def test_once_finishes(self, controller):
        """Test ONCE mode stops on the last frame and finishes."""
        controller.set_loop_mode(LoopMode.ONCE)
        controller.play()

        for expected in range(1, 5):
            assert controller.tick() is TickResult.ADVANCED
            assert controller.current_frame == expected
        assert controller.state == PlaybackState.PLAYING

        assert controller.tick() is TickResult.UNCHANGED
        assert controller.state == PlaybackState.FINISHED
        assert controller.current_frame == 4

        for _ in range(3):
            assert controller.tick() is TickResult.UNCHANGED
            assert controller.current_frame == 4
            assert controller.state == PlaybackState.FINISHED

    def test_loop_mode_change_takes_effect_at_boundary(self, controller):
        """Test switching to ONCE mid-way finishes at the next boundary."""
        controller.play()
        controller.tick()
        controller.set_loop_mode(LoopMode.ONCE)

        while controller.tick():
            pass

        assert controller.current_frame == 4
        assert controller.state == PlaybackState.FINISHED

    def test_single_frame_loop(self):
        """Test a single looping frame never reports a change."""
        ctrl = AnimationController()
        ctrl.set_frame_count(1)
        ctrl.play()

        assert ctrl.tick() is TickResult.UNCHANGED
        assert ctrl.state == PlaybackState.PLAYING
        assert ctrl.current_frame == 0
