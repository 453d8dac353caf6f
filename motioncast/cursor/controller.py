from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Union
import logging

from PIL import Image

from .config import cfg
from .expression import DISABLED_OVERLAY, OverlayExpression, compile_overlay
from .keyframes import Keyframe, reduce_frames
from .render import render_trajectory
from .sampler import Frame, sample_frames
from .styles import (
    CursorAppearance,
    CursorStyle,
    HotspotOffset,
    hotspot_offset,
    parse_style,
    render_cursor_icon,
)
from .telemetry import Trajectory
from ..utils import require_positive


@dataclass(frozen=True)
class CursorOverlay:
    """Everything the compositor needs to draw the cursor for one render job.

    `expression` is the compact x(t)/y(t) form; `frames` is the raw per-frame
    data for collaborators that rasterize frame by frame (click ripples,
    trails, multi-pulse zoom).
    """

    expression: OverlayExpression
    frames: List[Frame]
    keyframes: List[Keyframe]
    hotspot: HotspotOffset
    style: CursorStyle

    @property
    def is_static(self) -> bool:
        """Fewer than two keyframes: the cursor never moves."""
        return len(self.keyframes) < 2


class CursorController:
    """Tiny façade binding the cursor pipeline to one set of render parameters."""

    def __init__(
        self,
        width: float,
        height: float,
        *,
        fps: float = cfg.DEFAULT_FPS,
        style: Union[CursorStyle, str] = CursorStyle.DEFAULT,
        appearance: Optional[CursorAppearance] = None,
        keyframe_density: float = cfg.KEYFRAME_DENSITY_PER_S,
    ):
        self.width = require_positive(width, "width")
        self.height = require_positive(height, "height")
        self.fps = require_positive(fps, "fps")
        self.style = parse_style(style)
        self.appearance = appearance or CursorAppearance()
        self.keyframe_density = require_positive(keyframe_density, "keyframe_density")
        self.hotspot = hotspot_offset(self.style, self.appearance)

    @classmethod
    def from_settings(cls, settings) -> "CursorController":
        """Build from a RenderSettings-like object."""
        return cls(
            settings.width,
            settings.height,
            fps=settings.fps,
            style=settings.effective_style,
            appearance=settings.appearance(),
            keyframe_density=settings.keyframe_density,
        )

    def compile(self, trajectory: Trajectory) -> CursorOverlay:
        """Sample, reduce and compile the trajectory into an overlay."""
        frames = sample_frames(trajectory, self.fps)
        keyframes = reduce_frames(frames, self.fps, self.keyframe_density)
        if self.style is CursorStyle.NONE:
            expression = DISABLED_OVERLAY
        else:
            expression = compile_overlay(
                keyframes, self.hotspot, self.width, self.height
            )
        logging.getLogger(__name__).debug(
            "Cursor overlay (%s): %d frames, %d keyframes, %d chars",
            self.style.value,
            len(frames),
            len(keyframes),
            expression.size,
        )
        return CursorOverlay(
            expression=expression,
            frames=frames,
            keyframes=keyframes,
            hotspot=self.hotspot,
            style=self.style,
        )

    def render_icon(self, *, clicked: bool = False) -> Image.Image:
        return render_cursor_icon(self.style, self.appearance, clicked=clicked)

    def render_preview(self, trajectory: Trajectory) -> Image.Image:
        """Velocity-coloured preview of the sampled path, with click rings."""
        frames = sample_frames(trajectory, self.fps)
        return render_trajectory(
            frames, trajectory.clicks, int(self.width), int(self.height)
        )
