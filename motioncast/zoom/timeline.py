"""Zoom/pan camera keyframes, independent of the cursor overlay.

Three generators share one keyframe shape:

  - clicks:      a pulse per click (rest -> zoom in -> hold -> back to rest)
  - focusPoints: the same pulse per externally supplied focus point
  - follow:      continuous pan/zoom tracking the cursor path

zoom_at() evaluates any of them at a point in time with the shared easing
curves.
"""

from __future__ import annotations
from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union
import logging
import math

from ..easing import EasingKind, ease, parse_easing
from ..errors import InvalidInputError
from ..utils import clamp, require_finite, require_positive
from ..cursor.geometry import CatmullRomPath, clamp_point_to_frame
from ..cursor.keyframes import Keyframe
from ..cursor.telemetry import ClickEvent, Trajectory
from .config import zcfg


class ZoomMode(str, Enum):
    NONE = "none"
    CLICKS = "clicks"
    FOCUS_POINTS = "focusPoints"
    FOLLOW = "follow"


@dataclass(frozen=True)
class FocusPoint:
    """A moment worth zooming into, detected or supplied by scene analysis."""

    x: float
    y: float
    time: float  # ms
    importance: str = "medium"  # "high" zooms to max_zoom
    duration: Optional[float] = None  # hold override, ms
    reason: str = ""
    label: str = ""

    def __post_init__(self) -> None:
        # duration 0 is a valid zero-length hold
        if self.duration is not None:
            duration = require_finite(self.duration, "focus point duration")
            if duration < 0:
                raise InvalidInputError(
                    f"focus point duration must not be negative, got {duration}"
                )
            object.__setattr__(self, "duration", duration)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "FocusPoint":
        try:
            return cls(
                x=require_finite(raw["x"], "focus point x"),
                y=require_finite(raw["y"], "focus point y"),
                time=require_finite(raw["time"], "focus point time"),
                importance=str(raw.get("importance", "medium")),
                duration=raw.get("duration"),
                reason=str(raw.get("reason", "")),
                label=str(raw.get("label", "")),
            )
        except KeyError as exc:
            raise InvalidInputError(f"focus point is missing {exc}") from exc


@dataclass(frozen=True)
class ZoomState:
    zoom: float
    x: float
    y: float


@dataclass(frozen=True)
class ZoomParams:
    """Zoom timeline tuning; validated on construction."""

    min_zoom: float = zcfg.MIN_ZOOM
    max_zoom: float = zcfg.MAX_ZOOM
    default_zoom: float = zcfg.DEFAULT_ZOOM
    zoom_duration_ms: float = zcfg.ZOOM_DURATION_MS
    hold_duration_ms: float = zcfg.HOLD_DURATION_MS
    easing: Union[EasingKind, str] = zcfg.EASING
    follow_intensity: float = zcfg.FOLLOW_INTENSITY
    deadzone: float = zcfg.DEADZONE
    max_pan_speed: float = zcfg.MAX_PAN_SPEED_PX_S
    anticipation_ms: float = zcfg.ANTICIPATION_MS

    def __post_init__(self) -> None:
        require_positive(self.min_zoom, "min_zoom")
        require_positive(self.max_zoom, "max_zoom")
        require_positive(self.default_zoom, "default_zoom")
        if self.min_zoom > self.max_zoom:
            raise InvalidInputError(
                f"min_zoom ({self.min_zoom}) must not exceed max_zoom ({self.max_zoom})"
            )
        if not self.min_zoom <= self.default_zoom <= self.max_zoom:
            raise InvalidInputError(
                f"default_zoom ({self.default_zoom}) must lie within "
                f"[{self.min_zoom}, {self.max_zoom}]"
            )
        for name in ("zoom_duration_ms", "hold_duration_ms", "anticipation_ms"):
            if require_finite(getattr(self, name), name) < 0:
                raise InvalidInputError(f"{name} must not be negative")
        intensity = require_finite(self.follow_intensity, "follow_intensity")
        if not 0.0 <= intensity <= 1.0:
            raise InvalidInputError(
                f"follow_intensity must be within [0, 1], got {intensity}"
            )
        deadzone = require_finite(self.deadzone, "deadzone")
        if not 0.0 <= deadzone < 1.0:
            raise InvalidInputError(f"deadzone must be within [0, 1), got {deadzone}")
        require_positive(self.max_pan_speed, "max_pan_speed")
        object.__setattr__(self, "easing", parse_easing(self.easing))


def parse_zoom_mode(mode: Union[ZoomMode, str]) -> ZoomMode:
    if isinstance(mode, ZoomMode):
        return mode
    try:
        return ZoomMode(mode)
    except ValueError as exc:
        known = ", ".join(m.value for m in ZoomMode)
        raise InvalidInputError(
            f"Unknown zoom mode {mode!r} (expected one of: {known})"
        ) from exc


def smooth_damp(
    current: float,
    target: float,
    max_speed: float,
    dt: float,
    smoothing: float = zcfg.FOLLOW_SMOOTHING,
) -> float:
    """Move current toward target, at most max_speed*dt, scaled by smoothing."""
    max_delta = max_speed * dt
    delta = clamp(target - current, -max_delta, max_delta)
    return current + delta * smoothing


def _pulse(
    x: float,
    y: float,
    time: float,
    zoom: float,
    hold_ms: float,
    width: float,
    height: float,
    params: ZoomParams,
) -> List[Keyframe]:
    """Rest -> target -> hold -> rest around one triggering event."""
    center_x, center_y = width / 2.0, height / 2.0
    x, y = clamp_point_to_frame(x, y, width, height)
    time = max(0.0, time)
    start = max(0.0, time - params.zoom_duration_ms)
    hold_end = time + hold_ms
    easing = params.easing
    return [
        Keyframe(start, center_x, center_y, easing, params.min_zoom),
        Keyframe(time, x, y, easing, zoom),
        Keyframe(hold_end, x, y, easing, zoom),
        Keyframe(
            hold_end + params.zoom_duration_ms,
            center_x,
            center_y,
            easing,
            params.min_zoom,
        ),
    ]


def _log_overlaps(pulses: List[List[Keyframe]]) -> None:
    """Overlapping pulses are kept as-is; just make them visible in logs."""
    spans = sorted((p[0].time, p[-1].time) for p in pulses)
    overlaps = sum(1 for a, b in zip(spans, spans[1:]) if b[0] < a[1])
    if overlaps:
        logging.getLogger(__name__).debug(
            "%d zoom pulse(s) overlap their predecessor; left unmerged", overlaps
        )


def _flatten_sorted(pulses: List[List[Keyframe]]) -> List[Keyframe]:
    _log_overlaps(pulses)
    keyframes = [kf for pulse in pulses for kf in pulse]
    keyframes.sort(key=lambda kf: kf.time)
    return keyframes


def click_keyframes(
    clicks: Iterable[ClickEvent], width: float, height: float, params: ZoomParams
) -> List[Keyframe]:
    """One default_zoom pulse per click."""
    zoom, hold = params.default_zoom, params.hold_duration_ms
    pulses = [_pulse(c.x, c.y, c.t, zoom, hold, width, height, params) for c in clicks]
    return _flatten_sorted(pulses)


def focus_point_keyframes(
    points: Iterable[Union[FocusPoint, Mapping[str, Any]]],
    width: float,
    height: float,
    params: ZoomParams,
) -> List[Keyframe]:
    """One pulse per focus point; high importance zooms to max_zoom."""
    pulses = []
    for point in points:
        if not isinstance(point, FocusPoint):
            point = FocusPoint.from_dict(point)
        zoom = params.max_zoom if point.importance == "high" else params.default_zoom
        hold = params.hold_duration_ms
        if point.duration is not None:
            hold = point.duration
        pulses.append(
            _pulse(point.x, point.y, point.time, zoom, hold, width, height, params)
        )
    return _flatten_sorted(pulses)


def follow_keyframes(
    trajectory: Trajectory, width: float, height: float, params: ZoomParams
) -> List[Keyframe]:
    """Continuous camera that trails the cursor.

    The camera aims at centre + (cursor - centre) * follow_intensity, looking
    anticipation_ms ahead on the interpolated path. While the cursor stays
    inside the deadzone around the camera the camera holds still; otherwise it
    is pulled along by smooth_damp. The camera is kept far enough from the
    edges that the zoomed viewport never leaves the frame.
    """
    if not trajectory.samples:
        return []

    path = CatmullRomPath(trajectory)
    intensity = params.follow_intensity
    zoom = params.min_zoom + (params.default_zoom - params.min_zoom) * intensity
    center_x, center_y = width / 2.0, height / 2.0
    half_w = width / (2.0 * max(zoom, 1.0))
    half_h = height / (2.0 * max(zoom, 1.0))
    dead_x = params.deadzone * width / 2.0
    dead_y = params.deadzone * height / 2.0

    duration = trajectory.duration_ms
    interval = float(zcfg.FOLLOW_INTERVAL_MS)
    steps = int(math.ceil(duration / interval)) if duration > 0 else 0

    keyframes: List[Keyframe] = []
    cam_x, cam_y = center_x, center_y
    prev_t = 0.0
    for i in range(steps + 1):
        t = min(i * interval, duration)
        cursor_x, cursor_y = path.position_at(t + params.anticipation_ms)
        goal_x = center_x + (cursor_x - center_x) * intensity
        goal_y = center_y + (cursor_y - center_y) * intensity
        if i == 0:
            cam_x, cam_y = goal_x, goal_y
        else:
            dt = (t - prev_t) / 1000.0
            if abs(cursor_x - cam_x) > dead_x or abs(cursor_y - cam_y) > dead_y:
                cam_x = smooth_damp(cam_x, goal_x, params.max_pan_speed, dt)
                cam_y = smooth_damp(cam_y, goal_y, params.max_pan_speed, dt)
        cam_x = clamp(cam_x, half_w, width - half_w)
        cam_y = clamp(cam_y, half_h, height - half_h)
        keyframes.append(Keyframe(t, cam_x, cam_y, EasingKind.LINEAR, zoom))
        prev_t = t
    return keyframes


def generate_zoom_keyframes(
    mode: Union[ZoomMode, str],
    source: Any,
    width: float,
    height: float,
    params: Optional[ZoomParams] = None,
) -> List[Keyframe]:
    """Build a zoom keyframe timeline.

    Args:
        mode (ZoomMode | str): none, clicks, focusPoints or follow.
        source: Trajectory or click sequence for clicks, focus points for
            focusPoints, Trajectory for follow; ignored for none.
        width (float): Frame width in pixels.
        height (float): Frame height in pixels.
        params (ZoomParams | None): Tuning; defaults from zcfg.

    Returns:
        List[Keyframe]: Time-ordered keyframes with zoom set; may be empty.
    """
    mode = parse_zoom_mode(mode)
    width = require_positive(width, "width")
    height = require_positive(height, "height")
    params = params or ZoomParams()

    if mode is ZoomMode.NONE:
        keyframes: List[Keyframe] = []
    elif mode is ZoomMode.CLICKS:
        clicks: Sequence[ClickEvent] = getattr(source, "clicks", source) or ()
        keyframes = click_keyframes(clicks, width, height, params)
    elif mode is ZoomMode.FOCUS_POINTS:
        keyframes = focus_point_keyframes(source or (), width, height, params)
    else:
        if not isinstance(source, Trajectory):
            raise InvalidInputError("follow zoom needs a Trajectory source")
        keyframes = follow_keyframes(source, width, height, params)

    logging.getLogger(__name__).debug(
        "Generated %d zoom keyframes (%s mode)", len(keyframes), mode.value
    )
    return keyframes


def _state_of(kf: Keyframe) -> ZoomState:
    return ZoomState(kf.zoom if kf.zoom is not None else 1.0, kf.x, kf.y)


def zoom_at(
    keyframes: Sequence[Keyframe], t: float, rest: Optional[ZoomState] = None
) -> ZoomState:
    """Zoom and pan at time t (ms), eased between the surrounding keyframes.

    The earlier keyframe's easing shapes the transition. Before the first or
    after the last keyframe the boundary keyframe holds; with no keyframes the
    rest state (zoom 1, origin) is returned.
    """
    if not keyframes:
        return rest or ZoomState(1.0, 0.0, 0.0)
    first, last = keyframes[0], keyframes[-1]
    if not math.isfinite(t):
        return _state_of(last if t > 0 else first)
    if t <= first.time:
        return _state_of(first)
    if t >= last.time:
        return _state_of(last)

    times = [kf.time for kf in keyframes]
    i = bisect_right(times, t) - 1
    before, after = keyframes[i], keyframes[i + 1]
    span = after.time - before.time
    progress = clamp((t - before.time) / span, 0.0, 1.0) if span > 0 else 1.0
    p = ease(before.easing, progress)

    a, b = _state_of(before), _state_of(after)
    return ZoomState(
        zoom=a.zoom + (b.zoom - a.zoom) * p,
        x=a.x + (b.x - a.x) * p,
        y=a.y + (b.y - a.y) * p,
    )
