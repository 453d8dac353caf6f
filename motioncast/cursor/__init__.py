from .analysis import analyze_trajectory, summarize_speeds
from .controller import CursorController, CursorOverlay
from .expression import DISABLED_OVERLAY, OverlayExpression, compile_overlay
from .geometry import CatmullRomPath, position_at
from .keyframes import Keyframe, reduce_frames
from .sampler import Frame, sample_frames
from .styles import CursorStyle, hotspot_offset, render_cursor_icon
from .telemetry import ClickEvent, TemporalSample, Trajectory, TrajectoryRecorder

__all__ = [
    "analyze_trajectory",
    "summarize_speeds",
    "CursorController",
    "CursorOverlay",
    "DISABLED_OVERLAY",
    "OverlayExpression",
    "compile_overlay",
    "CatmullRomPath",
    "position_at",
    "Keyframe",
    "reduce_frames",
    "Frame",
    "sample_frames",
    "CursorStyle",
    "hotspot_offset",
    "render_cursor_icon",
    "ClickEvent",
    "TemporalSample",
    "Trajectory",
    "TrajectoryRecorder",
]
