from __future__ import annotations
from .cursor import (
    CursorController,
    Keyframe,
    Trajectory,
    compile_overlay,
    position_at,
    reduce_frames,
    sample_frames,
)
from .errors import InvalidInputError
from .pipeline import MotionResult, build_motion
from .settings import RenderSettings
from .zoom import compile_zoom_filter, generate_zoom_keyframes, zoom_at

__all__ = [
    "CursorController",
    "Keyframe",
    "Trajectory",
    "compile_overlay",
    "position_at",
    "reduce_frames",
    "sample_frames",
    "InvalidInputError",
    "MotionResult",
    "build_motion",
    "RenderSettings",
    "compile_zoom_filter",
    "generate_zoom_keyframes",
    "zoom_at",
]
