from .detection import detect_focus_points
from .expression import compile_zoom_filter, sample_zoom_frames
from .timeline import (
    FocusPoint,
    ZoomMode,
    ZoomParams,
    ZoomState,
    generate_zoom_keyframes,
    zoom_at,
)

__all__ = [
    "detect_focus_points",
    "compile_zoom_filter",
    "sample_zoom_frames",
    "FocusPoint",
    "ZoomMode",
    "ZoomParams",
    "ZoomState",
    "generate_zoom_keyframes",
    "zoom_at",
]
