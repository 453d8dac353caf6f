"""Per-render-job settings, read from the option names the pipeline uses."""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional
import logging

from .cursor.config import cfg
from .cursor.styles import (
    CURSOR_PRESETS,
    CursorAppearance,
    CursorStyle,
    appearance_from_preset,
    parse_style,
)
from .errors import InvalidInputError
from .utils import clamp, require_finite, require_positive
from .zoom.config import zcfg
from .zoom.timeline import ZoomMode, ZoomParams

# user-facing zoom modes -> timeline generator
ZOOM_MODES = {
    "none": ZoomMode.NONE,
    "basic": ZoomMode.CLICKS,
    "smart": ZoomMode.FOCUS_POINTS,
    "follow": ZoomMode.FOLLOW,
}

_OPTION_NAMES = {
    "fps": "fps",
    "width": "width",
    "height": "height",
    "zoomMode": "zoom_mode",
    "followIntensity": "follow_intensity",
    "maxZoom": "max_zoom",
    "minZoom": "min_zoom",
    "zoomSpeed": "zoom_speed",
    "holdDuration": "hold_duration_ms",
    "cursorStyle": "cursor_style",
    "cursorPreset": "cursor_preset",
    "keyframeDensity": "keyframe_density",
}


@dataclass(frozen=True)
class RenderSettings:
    fps: float = cfg.DEFAULT_FPS
    width: int = 1920
    height: int = 1080
    zoom_mode: str = "smart"
    follow_intensity: float = zcfg.FOLLOW_INTENSITY
    max_zoom: float = zcfg.MAX_ZOOM
    min_zoom: float = zcfg.MIN_ZOOM
    zoom_speed: str = "medium"
    hold_duration_ms: float = zcfg.HOLD_DURATION_MS
    cursor_style: str = CursorStyle.DEFAULT.value
    cursor_preset: Optional[str] = None
    keyframe_density: float = cfg.KEYFRAME_DENSITY_PER_S

    def __post_init__(self) -> None:
        require_positive(self.fps, "fps")
        require_positive(self.width, "width")
        require_positive(self.height, "height")
        require_positive(self.keyframe_density, "keyframe_density")
        if self.zoom_mode not in ZOOM_MODES:
            raise InvalidInputError(
                f"zoomMode must be one of {sorted(ZOOM_MODES)}, got {self.zoom_mode!r}"
            )
        if self.zoom_speed not in zcfg.ZOOM_SPEED_MS:
            raise InvalidInputError(
                f"zoomSpeed must be one of {sorted(zcfg.ZOOM_SPEED_MS)}, "
                f"got {self.zoom_speed!r}"
            )
        intensity = require_finite(self.follow_intensity, "followIntensity")
        if not 0.0 <= intensity <= 1.0:
            raise InvalidInputError(f"followIntensity must be within [0, 1], got {intensity}")
        if require_positive(self.min_zoom, "minZoom") > require_positive(
            self.max_zoom, "maxZoom"
        ):
            raise InvalidInputError("minZoom must not exceed maxZoom")
        parse_style(self.cursor_style)

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "RenderSettings":
        """Read collaborator options (camelCase keys); unknown keys are ignored."""
        kwargs = {}
        for key, value in options.items():
            field_name = _OPTION_NAMES.get(key)
            if field_name is None:
                logging.getLogger(__name__).debug("Ignoring unknown option %r", key)
                continue
            if value is not None:
                kwargs[field_name] = value
        return cls(**kwargs)

    @property
    def zoom_duration_ms(self) -> int:
        return zcfg.ZOOM_SPEED_MS[self.zoom_speed]

    @property
    def default_zoom(self) -> float:
        """Pulse zoom 1.2 + (maxZoom - 1) * 0.3, kept within [minZoom, maxZoom]."""
        return clamp(1.2 + (self.max_zoom - 1.0) * 0.3, self.min_zoom, self.max_zoom)

    @property
    def generator_mode(self) -> ZoomMode:
        return ZOOM_MODES[self.zoom_mode]

    @property
    def effective_style(self) -> CursorStyle:
        """A preset that names a style wins over cursor_style."""
        preset = CURSOR_PRESETS.get(self.cursor_preset or "", {})
        return parse_style(preset.get("style") or self.cursor_style)

    def appearance(self) -> CursorAppearance:
        if self.cursor_preset:
            return appearance_from_preset(self.cursor_preset)
        return CursorAppearance()

    def zoom_params(self) -> ZoomParams:
        return ZoomParams(
            min_zoom=self.min_zoom,
            max_zoom=self.max_zoom,
            default_zoom=self.default_zoom,
            zoom_duration_ms=self.zoom_duration_ms,
            hold_duration_ms=self.hold_duration_ms,
            follow_intensity=self.follow_intensity,
        )

    def with_options(self, **changes: Any) -> "RenderSettings":
        return replace(self, **changes)
