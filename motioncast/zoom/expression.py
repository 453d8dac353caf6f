"""zoompan filter output for zoom timelines.

The compiled zoom expression only honours the first and last keyframe's zoom,
interpolated linearly over the output frame number `n`. Intermediate pulses
are not represented in it. Callers that need every pulse sample the timeline
frame by frame with sample_zoom_frames() and rasterize the zoom themselves.
"""

from __future__ import annotations
from typing import List, Optional, Sequence

from ..cursor.expression import format_number
from ..cursor.keyframes import Keyframe
from ..cursor.sampler import frame_count_for
from ..utils import require_finite, require_positive
from .timeline import ZoomState, zoom_at

ZOOM_DECIMALS = 3

_CENTERED_PAN = "x='iw/2-(iw/zoom/2)':y='ih/2-(ih/zoom/2)'"


def _fps_text(fps: float) -> str:
    return f"{fps:g}"


def compile_zoom_filter(
    keyframes: Sequence[Keyframe], width: int, height: int, fps: float = 60
) -> str:
    """Build a zoompan filter string for the timeline.

    Empty timelines produce a static, centred z=1 zoompan. Otherwise the zoom
    ramps from the first keyframe's zoom to the last one's across the
    timeline's frames and drops back to 1 afterwards.
    """
    fps = require_positive(fps, "fps")
    width = int(require_positive(width, "width"))
    height = int(require_positive(height, "height"))
    tail = f"d=1:s={width}x{height}:fps={_fps_text(fps)}"

    if not keyframes:
        return f"zoompan=z=1:{_CENTERED_PAN}:{tail}"

    duration_ms = require_finite(keyframes[-1].time, "keyframes[-1].time")
    total_frames = max(1, frame_count_for(duration_ms, fps))
    start_zoom = format_number(keyframes[0].zoom or 1.0, ZOOM_DECIMALS)
    end_zoom = format_number(keyframes[-1].zoom or 1.0, ZOOM_DECIMALS)

    zoom_expr = (
        f"'if(between(n,0,{total_frames}),"
        f"{start_zoom}+({end_zoom}-{start_zoom})*n/{total_frames},1)'"
    )
    return f"zoompan=z={zoom_expr}:{_CENTERED_PAN}:{tail}"


def sample_zoom_frames(
    keyframes: Sequence[Keyframe], fps: float, duration_ms: Optional[float] = None
) -> List[ZoomState]:
    """Per-frame zoom states for frame-by-frame zoom rendering.

    Covers frames 0..ceil(duration*fps), the last one clamped onto
    duration_ms (default: the last keyframe's time).
    """
    fps = require_positive(fps, "fps")
    if not keyframes:
        return []
    if duration_ms is None:
        duration_ms = keyframes[-1].time
    duration_ms = max(0.0, require_finite(duration_ms, "duration_ms"))
    interval = 1000.0 / fps
    return [
        zoom_at(keyframes, min(i * interval, duration_ms))
        for i in range(frame_count_for(duration_ms, fps) + 1)
    ]
