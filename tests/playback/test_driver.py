"""Tests for PlaybackDriver transport and frame loop."""

from __future__ import annotations

import math

import pytest

from hoopers_sim.course.models import Course, Equipment, EquipmentType
from hoopers_sim.playback.driver import PlaybackDriver, build_playback_path
from hoopers_sim.playback.handler import compute_handler_position
from hoopers_sim.playback.models import PlaybackConfig

# ---------------------------------------------------------------------------
# Test-data helpers
# ---------------------------------------------------------------------------

def make_course(*coords: tuple[float, float]) -> Course:
    """Start, numbered hoops and finish at *coords* (pixels) in a 25 x 35 m ring."""
    equipment = []
    for i, (x, y) in enumerate(coords):
        if i == 0:
            equipment.append(Equipment(id="s", type=EquipmentType.START, x=x, y=y))
        elif i == len(coords) - 1:
            equipment.append(Equipment(id="f", type=EquipmentType.FINISH, x=x, y=y))
        else:
            equipment.append(Equipment(id=f"h{i}", type=EquipmentType.HOOP, x=x, y=y, order_number=i))
    return Course(id="c", name="Straight", ring_width=25.0, ring_height=35.0, equipment=tuple(equipment))


STRAIGHT = make_course((100, 100), (300, 100), (500, 100))


@pytest.fixture()
def driver() -> PlaybackDriver:
    return PlaybackDriver(STRAIGHT)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

class TestLoad:
    def test_duration_from_length_and_speed(self, driver):
        # 400 px = 20 m at 3.5 m/s
        assert driver.state.duration == pytest.approx(20.0 / 3.5, rel=1e-6)
        assert driver.state.progress == 0.0
        assert not driver.state.playing

    def test_geometry_is_memoised(self):
        cfg = PlaybackConfig()
        assert build_playback_path(STRAIGHT, cfg) is build_playback_path(STRAIGHT, cfg)

    def test_no_course_gives_origin_frame(self):
        frame = PlaybackDriver().tick(0.1)
        assert frame.dog_position.x == 0.0
        assert frame.handler_position.y == 0.0

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            PlaybackConfig(handler_smoothing=0.0)


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class TestTransport:
    def test_play_to_end(self, driver):
        driver.toggle_play()
        frame = driver.tick(driver.state.duration)
        assert frame.progress == 1.0
        assert not driver.state.playing

    def test_overshoot_clamps_to_end(self, driver):
        driver.toggle_play()
        driver.tick(driver.state.duration * 3)
        assert driver.state.progress == 1.0

    def test_toggle_at_end_restarts(self, driver):
        driver.seek(1.0)
        driver.toggle_play()
        assert driver.state.progress == 0.0
        assert driver.state.playing

    def test_pause_freezes_progress(self, driver):
        driver.toggle_play()
        driver.tick(0.5)
        driver.toggle_play()
        before = driver.state.progress
        driver.tick(0.5)
        assert driver.state.progress == before

    def test_seek_clamps(self, driver):
        driver.seek(1.5)
        assert driver.state.progress == 1.0
        driver.seek(-0.3)
        assert driver.state.progress == 0.0

    def test_seek_keeps_playing_flag(self, driver):
        driver.toggle_play()
        driver.seek(0.5)
        assert driver.state.playing

    def test_step_forward_and_back(self, driver):
        driver.toggle_play()
        driver.step_forward()
        assert driver.state.progress == pytest.approx(0.02)
        assert not driver.state.playing
        driver.step_back()
        driver.step_back()
        assert driver.state.progress == 0.0

    def test_step_forward_stops_at_end(self, driver):
        driver.seek(0.99)
        driver.step_forward()
        assert driver.state.progress == 1.0

    def test_restart(self, driver):
        driver.toggle_play()
        driver.tick(1.0)
        driver.restart()
        assert driver.state.progress == 0.0
        assert not driver.state.playing

    def test_reset_restores_defaults(self, driver):
        driver.set_speed(2.0)
        driver.toggle_play()
        driver.tick(1.0)
        driver.reset()
        assert driver.state.progress == 0.0
        assert not driver.state.playing
        assert driver.state.speed == 1.0
        assert driver.state.duration == pytest.approx(20.0 / 3.5, rel=1e-6)

    def test_reset_clears_smoothing(self, driver):
        driver.tick(0.0)
        driver.seek(0.5)
        driver.tick(0.0)
        driver.reset()
        frame = driver.tick(0.0)
        assert frame.handler_position.x == pytest.approx(100.0)
        assert frame.handler_position.y == pytest.approx(160.0)

    def test_reset_without_course(self):
        driver = PlaybackDriver()
        driver.reset()
        assert driver.state.duration == 0.0

    def test_speed_multiplier(self, driver):
        driver.set_speed(2.0)
        driver.toggle_play()
        driver.tick(driver.state.duration / 2)
        assert driver.state.progress == pytest.approx(1.0)

    def test_non_positive_speed_ignored(self, driver):
        driver.set_speed(0.0)
        driver.set_speed(-1.0)
        assert driver.state.speed == 1.0

    def test_zero_length_course_finishes_immediately(self):
        driver = PlaybackDriver(make_course((100, 100)))
        assert driver.state.duration == 0.0
        driver.toggle_play()
        frame = driver.tick(0.016)
        assert frame.progress == 1.0
        assert not frame.playing
        assert frame.dog_position.x == 100


# ---------------------------------------------------------------------------
# Frames and handler smoothing
# ---------------------------------------------------------------------------

class TestFrames:
    def test_dog_follows_path(self, driver):
        start = driver.tick(0.0)
        assert start.dog_position.x == pytest.approx(100.0)
        assert start.dog_heading == pytest.approx(0.0)
        driver.seek(1.0)
        end = driver.tick(0.0)
        assert end.dog_position.x == pytest.approx(500.0)

    def test_handler_smoothing_between_ticks(self, driver):
        first = driver.tick(0.0)
        assert first.handler_position.x == pytest.approx(100.0)
        assert first.handler_position.y == pytest.approx(160.0)

        driver.step_forward()
        second = driver.tick(0.0)
        expected_x = 100.0 + 0.12 * (second.dog_position.x - 100.0)
        assert second.handler_position.x == pytest.approx(expected_x)
        assert second.handler_position.y == pytest.approx(160.0)

    def test_seek_resets_smoothing(self, driver):
        driver.toggle_play()
        for _ in range(10):
            driver.tick(0.1)
        driver.seek(0.5)
        frame = driver.tick(0.0)
        path = driver.path
        raw = compute_handler_position(
            frame.dog_position,
            frame.dog_tangent,
            path.ring_width,
            path.ring_height,
            driver.config.handler_offset_px,
            None,
            0.0,
            driver.config.ring_padding,
        )
        assert frame.handler_position == raw

    def test_frame_does_not_advance(self, driver):
        driver.toggle_play()
        driver.tick(0.5)
        before = driver.state
        frame = driver.frame()
        assert driver.state == before
        assert frame.progress == before.progress

    def test_rate_based_smoothing(self):
        cfg = PlaybackConfig(smoothing_rate=5.0)
        driver = PlaybackDriver(STRAIGHT, cfg)
        driver.tick(0.0)
        driver.step_forward()
        frame = driver.tick(0.1)
        factor = 1.0 - math.exp(-0.5)
        expected_x = 100.0 + factor * (frame.dog_position.x - 100.0)
        assert frame.handler_position.x == pytest.approx(expected_x)
