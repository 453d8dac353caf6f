import logging
import math

import pytest

from motioncast.cursor.expression import (
    DISABLED_OVERLAY,
    MAX_EXPRESSION_CHARS,
    compile_overlay,
    format_number,
)
from motioncast.cursor.keyframes import Keyframe, reduce_frames
from motioncast.cursor.sampler import sample_frames
from motioncast.cursor.styles import CursorStyle, HotspotOffset, hotspot_offset
from motioncast.errors import InvalidInputError

NO_HOTSPOT = HotspotOffset(0.0, 0.0)


def test_no_keyframes_disables_overlay():
    expr = compile_overlay([], NO_HOTSPOT, 1920, 1080)
    assert expr is DISABLED_OVERLAY
    assert expr.to_filter_args() == "x=0:y=0:enable=0"


def test_single_keyframe_is_a_clamped_constant():
    expr = compile_overlay([Keyframe(0, -50, 500)], HotspotOffset(8, 8), 100, 100)
    assert expr.x_expr == "-8.00"
    assert expr.y_expr == "92.00"
    assert expr.conditionals == 0


def test_two_keyframes_exact_output():
    keyframes = [Keyframe(0, 10, 20), Keyframe(1000, 110, 20)]
    expr = compile_overlay(keyframes, NO_HOTSPOT, 200, 100)
    assert expr.x_expr == "if(lt(t,1.000),10.00+(100.00)*(t-0.000)/1.000,110.00)"
    assert expr.y_expr == "if(lt(t,1.000),20.00+(0.00)*(t-0.000)/1.000,20.00)"
    assert expr.to_filter_args() == f"x='{expr.x_expr}':y='{expr.y_expr}'"


def test_values_at_and_around_keyframe_boundaries(evaluate, three_point_trajectory):
    hotspot = hotspot_offset(CursorStyle.DEFAULT)
    keyframes = reduce_frames(sample_frames(three_point_trajectory, 60), 60, 2.0)
    expr = compile_overlay(keyframes, hotspot, 1920, 1080)

    for kf in keyframes:
        t = kf.time / 1000.0
        assert evaluate(expr.x_expr, t=t) == pytest.approx(kf.x - hotspot.x, abs=0.01)
        assert evaluate(expr.y_expr, t=t) == pytest.approx(kf.y - hotspot.y, abs=0.01)

    assert evaluate(expr.x_expr, t=0.25) == pytest.approx(50.0 - hotspot.x, abs=0.01)
    assert evaluate(expr.x_expr, t=0.499) < evaluate(expr.x_expr, t=0.5) + 0.01
    assert evaluate(expr.y_expr, t=0.75) == pytest.approx(50.0 - hotspot.y, abs=0.01)
    # after the last keyframe the final position holds
    assert evaluate(expr.y_expr, t=30.0) == pytest.approx(100.0 - hotspot.y, abs=0.01)


def test_parentheses_are_balanced(three_point_trajectory):
    keyframes = reduce_frames(sample_frames(three_point_trajectory, 60), 60, 20.0)
    expr = compile_overlay(keyframes, NO_HOTSPOT, 1920, 1080)
    for text in (expr.x_expr, expr.y_expr):
        assert text.count("(") == text.count(")")
        assert text.count("if(") == expr.conditionals == len(keyframes) - 1


def test_first_position_is_held_until_first_keyframe(evaluate):
    keyframes = [Keyframe(500, 10, 10), Keyframe(1000, 20, 20)]
    expr = compile_overlay(keyframes, NO_HOTSPOT, 100, 100)
    assert expr.x_expr.startswith("if(lt(t,0.500),10.00,")
    assert evaluate(expr.x_expr, t=0.0) == pytest.approx(10.0)
    assert evaluate(expr.x_expr, t=0.75) == pytest.approx(15.0)


def test_zero_span_segments_are_skipped(evaluate):
    keyframes = [
        Keyframe(0, 0, 0),
        Keyframe(500, 40, 0),
        Keyframe(500, 60, 0),
        Keyframe(1000, 100, 0),
    ]
    expr = compile_overlay(keyframes, NO_HOTSPOT, 200, 200)
    assert expr.conditionals == 2
    assert evaluate(expr.x_expr, t=0.5) == pytest.approx(60.0)
    assert evaluate(expr.x_expr, t=0.25) == pytest.approx(20.0)


def test_coordinates_are_clamped_before_hotspot(evaluate):
    keyframes = [Keyframe(0, -100, 0), Keyframe(1000, 500, 0)]
    expr = compile_overlay(keyframes, HotspotOffset(8, 8), 300, 300)
    assert evaluate(expr.x_expr, t=0.0) == pytest.approx(-8.0)
    assert evaluate(expr.x_expr, t=1.0) == pytest.approx(292.0)


def test_hotspot_shifts_every_constant(evaluate, three_point_trajectory):
    keyframes = reduce_frames(sample_frames(three_point_trajectory, 60), 60, 2.0)
    arrow = hotspot_offset("default")
    dot = hotspot_offset("dot")
    arrow_expr = compile_overlay(keyframes, arrow, 1920, 1080)
    dot_expr = compile_overlay(keyframes, dot, 1920, 1080)

    assert arrow_expr.x_expr != dot_expr.x_expr
    for t in (0.0, 0.3, 0.5, 0.8, 1.0):
        shift = evaluate(arrow_expr.x_expr, t=t) - evaluate(dot_expr.x_expr, t=t)
        assert shift == pytest.approx(dot.x - arrow.x, abs=0.02)


def test_invalid_keyframes_fail_fast():
    with pytest.raises(InvalidInputError):
        compile_overlay([Keyframe(100, 0, 0), Keyframe(50, 0, 0)], NO_HOTSPOT, 10, 10)
    with pytest.raises(InvalidInputError):
        compile_overlay([Keyframe(0, math.nan, 0)], NO_HOTSPOT, 10, 10)
    with pytest.raises(InvalidInputError):
        compile_overlay([Keyframe(0, 0, 0)], NO_HOTSPOT, 0, 10)


def test_format_number_never_emits_negative_zero():
    assert format_number(-0.0001, 2) == "0.00"
    assert format_number(1.23456, 3) == "1.235"
    assert format_number(-2.5, 2) == "-2.50"


def test_long_expressions_report_size_and_warn(caplog):
    keyframes = [Keyframe(i * 10, i % 500, (i * 7) % 300) for i in range(2000)]
    with caplog.at_level(logging.WARNING, logger="motioncast.cursor.expression"):
        expr = compile_overlay(keyframes, NO_HOTSPOT, 1920, 1080)

    assert expr.size == max(len(expr.x_expr), len(expr.y_expr))
    assert expr.size > MAX_EXPRESSION_CHARS
    assert expr.exceeds()
    assert expr.exceeds(1000)
    assert "consider frame-by-frame rendering" in caplog.text


def test_short_expressions_do_not_warn(caplog):
    keyframes = [Keyframe(0, 10, 20), Keyframe(1000, 110, 20)]
    with caplog.at_level(logging.WARNING, logger="motioncast.cursor.expression"):
        expr = compile_overlay(keyframes, NO_HOTSPOT, 200, 100)
    assert not expr.exceeds()
    assert not expr.exceeds(expr.size)
    assert expr.exceeds(expr.size - 1)
    assert caplog.text == ""
