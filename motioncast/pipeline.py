from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Union
import logging

from .cursor.controller import CursorController, CursorOverlay
from .cursor.keyframes import Keyframe
from .cursor.telemetry import Trajectory
from .settings import RenderSettings
from .zoom.detection import detect_focus_points
from .zoom.expression import compile_zoom_filter
from .zoom.timeline import FocusPoint, ZoomMode, generate_zoom_keyframes


@dataclass(frozen=True)
class MotionResult:
    cursor: CursorOverlay
    zoom_keyframes: List[Keyframe]
    zoom_filter: str


def _merge_focus_points(
    trajectory: Trajectory,
    supplied: Optional[Iterable[Union[FocusPoint, Mapping[str, Any]]]],
) -> List[FocusPoint]:
    points = detect_focus_points(trajectory)
    for point in supplied or ():
        if not isinstance(point, FocusPoint):
            point = FocusPoint.from_dict(point)
        points.append(point)
    points.sort(key=lambda p: p.time)
    return points


def build_motion(
    trajectory: Trajectory,
    settings: Optional[RenderSettings] = None,
    focus_points: Optional[Iterable[Union[FocusPoint, Mapping[str, Any]]]] = None,
) -> MotionResult:
    """Cursor overlay plus zoom timeline for one recording.

    Args:
        trajectory (Trajectory): Recorded cursor telemetry.
        settings (RenderSettings | None): Render job settings; defaults apply when omitted.
        focus_points: Extra focus points from scene analysis, merged with the
            detected ones in smart mode.

    Returns:
        MotionResult: Overlay expression and frames, zoom keyframes and the
        zoompan filter string.
    """
    settings = settings or RenderSettings()
    overlay = CursorController.from_settings(settings).compile(trajectory)

    mode = settings.generator_mode
    if mode is ZoomMode.FOCUS_POINTS:
        source: Any = _merge_focus_points(trajectory, focus_points)
    else:
        source = trajectory
    zoom_keyframes = generate_zoom_keyframes(
        mode, source, settings.width, settings.height, settings.zoom_params()
    )
    zoom_filter = compile_zoom_filter(
        zoom_keyframes, settings.width, settings.height, settings.fps
    )

    logging.getLogger(__name__).info(
        "Motion built: %d cursor keyframes, %d zoom keyframes (%s)",
        len(overlay.keyframes),
        len(zoom_keyframes),
        settings.zoom_mode,
    )
    return MotionResult(
        cursor=overlay, zoom_keyframes=zoom_keyframes, zoom_filter=zoom_filter
    )
