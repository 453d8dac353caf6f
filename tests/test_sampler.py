import math

import pytest

from motioncast.cursor.sampler import frame_count_for, sample_frames
from motioncast.cursor.telemetry import ClickEvent, Trajectory
from motioncast.errors import InvalidInputError


@pytest.mark.parametrize(
    "duration, fps, expected",
    [(1000, 60, 60), (100, 30, 3), (1001, 60, 61), (0, 60, 0)],
)
def test_frame_count(duration, fps, expected):
    assert frame_count_for(duration, fps) == expected


def test_frames_cover_the_whole_recording(three_point_trajectory):
    frames = sample_frames(three_point_trajectory, 60)
    assert len(frames) == 61
    assert frames[0].time_ms == 0.0
    assert frames[-1].time_ms == 1000.0
    assert (frames[-1].x, frames[-1].y) == pytest.approx((100.0, 100.0))
    assert [f.index for f in frames] == list(range(61))


def test_terminal_frame_is_clamped_to_duration():
    traj = Trajectory.from_points([(0, 0, 0), (10, 0, 1010)])
    frames = sample_frames(traj, 10)
    assert frames[-1].time_ms == 1010.0
    assert frames[-2].time_ms == pytest.approx(1000.0)


def test_click_proximity_window_is_strict():
    traj = Trajectory.from_points([(0, 0, 0), (100, 0, 1000)], clicks=[(50, 0, 500)])
    near = {f.time_ms: f.is_click_nearby for f in sample_frames(traj, 10)}
    assert near[500.0] is True
    assert near[400.0] is False
    assert near[600.0] is False


def test_click_between_frames():
    traj = Trajectory.from_points([(0, 0, 0), (100, 0, 1000)])
    frames = sample_frames(traj, 10, clicks=[ClickEvent(0, 0, 450)])
    flagged = [f.time_ms for f in frames if f.is_click_nearby]
    assert flagged == pytest.approx([400.0, 500.0])


def test_velocity_is_pixels_per_second():
    traj = Trajectory.from_points([(0, 0, 0), (100, 0, 1000)])
    frames = sample_frames(traj, 10)
    assert frames[0].velocity_px_per_sec == 0.0
    for prev, cur in zip(frames, frames[1:]):
        dt_s = (cur.time_ms - prev.time_ms) / 1000.0
        expected = math.hypot(cur.x - prev.x, cur.y - prev.y) / dt_s
        assert cur.velocity_px_per_sec == pytest.approx(expected)


def test_stationary_cursor_has_no_velocity():
    traj = Trajectory.from_points([(5, 5, 0), (5, 5, 500)])
    assert all(f.velocity_px_per_sec == 0.0 for f in sample_frames(traj, 30))


def test_empty_trajectory_and_bad_fps():
    assert sample_frames(Trajectory(), 60) == []
    with pytest.raises(InvalidInputError):
        sample_frames(Trajectory(), 0)
