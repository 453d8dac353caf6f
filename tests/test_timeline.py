import logging

import pytest

from motioncast.cursor.keyframes import Keyframe
from motioncast.cursor.telemetry import Trajectory
from motioncast.easing import EasingKind
from motioncast.errors import InvalidInputError
from motioncast.zoom.timeline import (
    FocusPoint,
    ZoomParams,
    ZoomState,
    generate_zoom_keyframes,
    smooth_damp,
    zoom_at,
)

W, H = 1920, 1080


def test_no_clicks_means_no_zoom():
    traj = Trajectory.from_points([(0, 0, 0), (10, 10, 100)])
    assert generate_zoom_keyframes("clicks", traj, W, H) == []
    assert generate_zoom_keyframes("none", traj, W, H) == []


def test_click_pulse_has_four_keyframes():
    traj = Trajectory.from_points([(0, 0, 0), (300, 200, 2500)], clicks=[(300, 200, 2000)])
    params = ZoomParams(zoom_duration_ms=600, hold_duration_ms=1500)
    keyframes = generate_zoom_keyframes("clicks", traj, W, H, params)

    assert [kf.time for kf in keyframes] == [1400.0, 2000.0, 3500.0, 4100.0]
    assert [kf.zoom for kf in keyframes] == [1.0, 1.3, 1.3, 1.0]
    assert (keyframes[0].x, keyframes[0].y) == (W / 2, H / 2)
    assert (keyframes[1].x, keyframes[1].y) == (300.0, 200.0)
    assert all(kf.easing is EasingKind.EASE_IN_OUT_CUBIC for kf in keyframes)


def test_early_click_pulse_starts_at_zero():
    traj = Trajectory.from_points([(0, 0, 0)], clicks=[(5000, -20, 100)])
    keyframes = generate_zoom_keyframes("clicks", traj, W, H)
    assert keyframes[0].time == 0.0
    assert (keyframes[1].x, keyframes[1].y) == (float(W), 0.0)


def test_focus_points_zoom_by_importance():
    params = ZoomParams(hold_duration_ms=1000)
    points = [
        FocusPoint(100, 100, 1000, importance="high"),
        {"x": 500, "y": 500, "time": 5000, "duration": 400},
    ]
    keyframes = generate_zoom_keyframes("focusPoints", points, W, H, params)

    assert len(keyframes) == 8
    assert keyframes[1].zoom == params.max_zoom
    assert keyframes[2].time == 2000.0
    assert keyframes[5].zoom == params.default_zoom
    assert keyframes[6].time - keyframes[5].time == 400.0


def test_focus_point_without_time_is_rejected():
    with pytest.raises(InvalidInputError):
        generate_zoom_keyframes("focusPoints", [{"x": 1, "y": 2}], W, H)


def test_follow_with_zero_intensity_stays_centred():
    traj = Trajectory.from_points([(0, 0, 0), (1900, 1000, 800), (10, 900, 1600)])
    params = ZoomParams(follow_intensity=0.0)
    keyframes = generate_zoom_keyframes("follow", traj, W, H, params)

    assert len(keyframes) == 8
    assert all((kf.x, kf.y) == (W / 2, H / 2) for kf in keyframes)
    assert all(kf.zoom == 1.0 for kf in keyframes)


def test_follow_camera_keeps_viewport_inside_frame():
    traj = Trajectory.from_points([(W / 2, H / 2, 0), (W, H, 500), (W, H, 3000)])
    params = ZoomParams(follow_intensity=1.0)
    keyframes = generate_zoom_keyframes("follow", traj, W, H, params)

    zoom = keyframes[0].zoom
    half_w, half_h = W / (2 * zoom), H / (2 * zoom)
    assert zoom == pytest.approx(params.default_zoom)
    assert keyframes[-1].x > W / 2
    for kf in keyframes:
        assert half_w - 1e-9 <= kf.x <= W - half_w + 1e-9
        assert half_h - 1e-9 <= kf.y <= H - half_h + 1e-9
        assert kf.easing is EasingKind.LINEAR


def test_follow_camera_ignores_motion_inside_deadzone():
    traj = Trajectory.from_points([(960, 540, 0), (990, 560, 500), (970, 530, 1000)])
    keyframes = generate_zoom_keyframes("follow", traj, W, H, ZoomParams(follow_intensity=1.0))
    first = keyframes[0]
    assert all((kf.x, kf.y) == (first.x, first.y) for kf in keyframes)


def test_follow_needs_a_trajectory():
    with pytest.raises(InvalidInputError):
        generate_zoom_keyframes("follow", [], W, H)


def test_unknown_mode_is_rejected():
    with pytest.raises(InvalidInputError):
        generate_zoom_keyframes("smart", [], W, H)


def test_zoom_at_eases_between_keyframes():
    keyframes = [
        Keyframe(0, 960, 540, EasingKind.EASE_IN_OUT_CUBIC, 1.0),
        Keyframe(1000, 200, 100, EasingKind.EASE_IN_OUT_CUBIC, 2.0),
    ]
    mid = zoom_at(keyframes, 500)
    assert mid.zoom == pytest.approx(1.5)
    assert mid.x == pytest.approx(580.0)
    assert zoom_at(keyframes, 250).zoom < 1.25
    assert zoom_at(keyframes, -10) == ZoomState(1.0, 960, 540)
    assert zoom_at(keyframes, 5000) == ZoomState(2.0, 200, 100)


def test_zoom_at_without_keyframes_is_at_rest():
    assert zoom_at([], 1234) == ZoomState(1.0, 0.0, 0.0)


def test_smooth_damp_limits_step():
    assert smooth_damp(0.0, 100.0, 1000.0, 0.05) == pytest.approx(15.0)
    assert smooth_damp(0.0, 10.0, 1000.0, 1.0) == pytest.approx(3.0)
    assert smooth_damp(100.0, 0.0, 1000.0, 0.01) == pytest.approx(97.0)


def test_zoom_params_validation():
    assert ZoomParams(easing="linear").easing is EasingKind.LINEAR
    with pytest.raises(InvalidInputError):
        ZoomParams(min_zoom=2.0, max_zoom=1.5)
    with pytest.raises(InvalidInputError):
        ZoomParams(follow_intensity=1.5)
    with pytest.raises(InvalidInputError):
        ZoomParams(hold_duration_ms=-1)


def test_overlapping_click_pulses_stay_unmerged(caplog):
    traj = Trajectory.from_points(
        [(0, 0, 0), (500, 400, 3000)], clicks=[(300, 200, 2000), (500, 400, 3000)]
    )
    with caplog.at_level(logging.DEBUG, logger="motioncast.zoom.timeline"):
        keyframes = generate_zoom_keyframes("clicks", traj, W, H)

    assert [kf.time for kf in keyframes] == [
        1200.0, 2000.0, 2200.0, 3000.0, 3500.0, 4300.0, 4500.0, 5300.0,
    ]  # fmt: skip
    assert [kf.zoom for kf in keyframes].count(1.0) == 4
    assert "1 zoom pulse(s) overlap" in caplog.text


def test_separate_pulses_are_not_flagged(caplog):
    traj = Trajectory.from_points([(0, 0, 0)], clicks=[(1, 1, 1000), (1, 1, 9000)])
    with caplog.at_level(logging.DEBUG, logger="motioncast.zoom.timeline"):
        generate_zoom_keyframes("clicks", traj, W, H)
    assert "overlap" not in caplog.text


def test_negative_focus_duration_is_rejected():
    with pytest.raises(InvalidInputError):
        FocusPoint(100, 100, 5000, duration=-3000)
    with pytest.raises(InvalidInputError):
        generate_zoom_keyframes(
            "focusPoints", [{"x": 1, "y": 1, "time": 5000, "duration": -1}], W, H
        )


def test_zero_focus_duration_is_a_zero_length_hold():
    keyframes = generate_zoom_keyframes(
        "focusPoints", [FocusPoint(100, 100, 5000, duration=0)], W, H
    )
    assert [kf.time for kf in keyframes] == [4200.0, 5000.0, 5000.0, 5800.0]
    assert keyframes[-1].zoom == 1.0


def test_default_zoom_must_lie_between_min_and_max():
    with pytest.raises(InvalidInputError):
        ZoomParams(max_zoom=1.1, default_zoom=1.3)
    with pytest.raises(InvalidInputError):
        ZoomParams(min_zoom=1.5, default_zoom=1.3)
