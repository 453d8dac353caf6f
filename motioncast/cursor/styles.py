"""Cursor icon geometry and hotspot table.

Each CursorStyle maps to one StyleSpec in STYLE_TABLE: a Pillow drawing routine
plus the anchor that says where the "real" pointer location sits inside the
icon. The hotspot is derived from the same numbers the drawing uses, so the
compiled overlay position and the rendered icon can never disagree.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union
import logging

from PIL import Image, ImageColor, ImageDraw, ImageFilter

from ..errors import InvalidInputError
from .config import cfg


class CursorStyle(str, Enum):
    DEFAULT = "default"
    ARROW_MODERN = "arrow-modern"
    POINTER = "pointer"
    DOT = "dot"
    CIRCLE = "circle"
    CROSSHAIR = "crosshair"
    SPOTLIGHT = "spotlight"
    NONE = "none"


@dataclass(frozen=True)
class HotspotOffset:
    """Pixel offset of the pointer location inside the icon canvas."""

    x: float
    y: float


@dataclass(frozen=True)
class CursorAppearance:
    size: int = cfg.CURSOR_SIZE
    color: str = cfg.CURSOR_COLOR
    outline_color: str = cfg.CURSOR_OUTLINE_COLOR
    outline_width: int = cfg.CURSOR_OUTLINE_WIDTH
    shadow_blur: int = cfg.SHADOW_BLUR
    shadow_opacity: float = cfg.SHADOW_OPACITY
    click_scale: float = cfg.CLICK_SCALE
    glow: bool = False
    style: Optional[str] = None

    @property
    def glow_extra(self) -> int:
        return cfg.GLOW_EXTRA_PX if self.glow else 0

    @property
    def canvas_size(self) -> int:
        return self.size + self.shadow_blur * 2 + 4 + self.glow_extra

    @property
    def offset(self) -> float:
        """Distance from the canvas edge to the icon's drawing origin."""
        return self.shadow_blur + 2 + self.glow_extra / 2.0


CURSOR_PRESETS: Dict[str, Dict[str, Any]] = {
    "light": {"color": "#000000", "outline_color": "#FFFFFF", "shadow_opacity": 0.4},
    "dark": {"color": "#FFFFFF", "outline_color": "#000000", "shadow_opacity": 0.6},
    "blue": {"color": "#3B82F6", "outline_color": "#FFFFFF", "glow": True},
    "green": {"color": "#10B981", "outline_color": "#FFFFFF", "glow": True},
    "red": {"color": "#EF4444", "outline_color": "#FFFFFF", "glow": True},
    "purple": {"color": "#8B5CF6", "outline_color": "#FFFFFF", "glow": True},
    "orange": {"color": "#F97316", "outline_color": "#FFFFFF", "glow": True},
    "github": {"color": "#24292F", "outline_color": "#FFFFFF", "style": "default"},
    "figma": {
        "color": "#F24E1E",
        "outline_color": "#FFFFFF",
        "style": "dot",
        "glow": True,
    },
    "notion": {"color": "#000000", "outline_color": "#FFFFFF", "style": "default"},
}


def appearance_from_preset(name: str, **overrides: Any) -> CursorAppearance:
    """Build an appearance from a named preset; unknown names fall back to light."""
    preset = CURSOR_PRESETS.get(name)
    if preset is None:
        logging.getLogger(__name__).debug(
            "Unknown cursor preset %r; using 'light'", name
        )
        preset = CURSOR_PRESETS["light"]
    return replace(CursorAppearance(), **{**preset, **overrides})


def parse_style(style: Union[CursorStyle, str]) -> CursorStyle:
    """Resolve a CursorStyle from the enum or its string value."""
    if isinstance(style, CursorStyle):
        return style
    try:
        return CursorStyle(style)
    except ValueError as exc:
        known = ", ".join(s.value for s in CursorStyle)
        raise InvalidInputError(
            f"Unknown cursor style {style!r} (expected one of: {known})"
        ) from exc


# ---------------------------------------------------------------------------
# Geometry generators
# ---------------------------------------------------------------------------

Rgba = Tuple[int, int, int, int]
DrawFn = Callable[[ImageDraw.ImageDraw, CursorAppearance, float, Rgba, Rgba], None]

# Outlines in 24-unit icon space, scaled by size/24 when drawn.
_ARROW_OUTLINE = [(0, 0), (0, 20), (4, 16), (7, 23), (10, 22), (7, 15), (12, 15)]
_MODERN_ARROW_OUTLINE = [(1, 1), (1, 18), (5, 14), (8, 21), (11, 19), (8, 13), (13, 13)]
_POINTER_OUTLINE = [
    (8, 0), (8, 14), (5, 11), (3, 13), (8, 20), (12, 20), (12, 15),
    (15, 15), (15, 12), (18, 12), (18, 9), (12, 9), (12, 0),
]  # fmt: skip


def _rgba(color: str, alpha: float = 1.0) -> Rgba:
    r, g, b = ImageColor.getrgb(color)[:3]
    return r, g, b, int(round(255 * alpha))


def _polygon(outline: Sequence[Tuple[float, float]]) -> DrawFn:
    def draw_polygon(draw, appearance, size, fill, stroke):
        s = size / 24.0
        o = appearance.offset
        points = [(o + px * s, o + py * s) for px, py in outline]
        draw.polygon(points, fill=fill, outline=stroke, width=appearance.outline_width)

    return draw_polygon


def _draw_dot(draw, appearance, size, fill, stroke):
    c = appearance.canvas_size / 2.0
    r = size / 2.0
    draw.ellipse(
        [c - r, c - r, c + r, c + r],
        fill=fill,
        outline=stroke,
        width=appearance.outline_width,
    )


def _draw_circle(draw, appearance, size, fill, stroke):
    c = appearance.canvas_size / 2.0
    r = size / 2.0 - 2
    box = [c - r, c - r, c + r, c + r]
    draw.ellipse(box, outline=fill, width=appearance.outline_width + 2)
    draw.ellipse(box, outline=stroke, width=appearance.outline_width)


def _draw_crosshair(draw, appearance, size, fill, stroke):
    c = appearance.canvas_size / 2.0
    half = size / 2.0
    inner = size / 6.0
    width = appearance.outline_width + 1
    draw.line([(c, c - half), (c, c - inner)], fill=fill, width=width)
    draw.line([(c, c + inner), (c, c + half)], fill=fill, width=width)
    draw.line([(c - half, c), (c - inner, c)], fill=fill, width=width)
    draw.line([(c + inner, c), (c + half, c)], fill=fill, width=width)
    dot = inner / 2.0
    draw.ellipse([c - dot, c - dot, c + dot, c + dot], fill=fill)


def _draw_spotlight(draw, appearance, size, fill, stroke):
    c = appearance.canvas_size / 2.0
    outer = size / 2.0
    inner = size / 4.0
    halo = fill[:3] + (int(fill[3] * 0.25),)
    draw.ellipse([c - outer, c - outer, c + outer, c + outer], fill=halo)
    draw.ellipse(
        [c - inner, c - inner, c + inner, c + inner],
        fill=fill,
        outline=stroke,
        width=appearance.outline_width,
    )


@dataclass(frozen=True)
class StyleSpec:
    """Geometry generator plus anchor for one cursor style.

    anchor is "tip" (pointer location at `tip`, in 24-unit icon space, from the
    drawing origin) or "center" (pointer location at the canvas centre).
    """

    draw: Optional[DrawFn]
    anchor: str
    tip: Tuple[float, float] = (0.0, 0.0)


STYLE_TABLE: Dict[CursorStyle, StyleSpec] = {
    CursorStyle.DEFAULT: StyleSpec(_polygon(_ARROW_OUTLINE), "tip", (0.0, 0.0)),
    CursorStyle.ARROW_MODERN: StyleSpec(
        _polygon(_MODERN_ARROW_OUTLINE), "tip", (1.0, 1.0)
    ),
    CursorStyle.POINTER: StyleSpec(_polygon(_POINTER_OUTLINE), "tip", (8.0, 0.0)),
    CursorStyle.DOT: StyleSpec(_draw_dot, "center"),
    CursorStyle.CIRCLE: StyleSpec(_draw_circle, "center"),
    CursorStyle.CROSSHAIR: StyleSpec(_draw_crosshair, "center"),
    CursorStyle.SPOTLIGHT: StyleSpec(_draw_spotlight, "center"),
    CursorStyle.NONE: StyleSpec(None, "center"),
}


def hotspot_offset(
    style: Union[CursorStyle, str], appearance: Optional[CursorAppearance] = None
) -> HotspotOffset:
    """Pointer location inside the icon canvas for the given style."""
    spec = STYLE_TABLE[parse_style(style)]
    appearance = appearance or CursorAppearance()
    if spec.anchor == "center":
        c = appearance.canvas_size / 2.0
        return HotspotOffset(c, c)
    s = appearance.size / 24.0
    o = appearance.offset
    return HotspotOffset(o + spec.tip[0] * s, o + spec.tip[1] * s)


def render_cursor_icon(
    style: Union[CursorStyle, str],
    appearance: Optional[CursorAppearance] = None,
    *,
    clicked: bool = False,
) -> Image.Image:
    """Draw the cursor icon as an RGBA image with drop shadow (and optional glow).

    The click variant is the same icon shrunk by `click_scale`, drawn on the
    same canvas so the hotspot stays put.
    """
    style = parse_style(style)
    spec = STYLE_TABLE[style]
    if spec.draw is None:
        raise InvalidInputError(f"Cursor style {style.value!r} has no icon")

    appearance = appearance or CursorAppearance()
    size = round(appearance.size * (appearance.click_scale if clicked else 1.0))
    canvas = (appearance.canvas_size, appearance.canvas_size)
    fill = _rgba(appearance.color)
    stroke = _rgba(appearance.outline_color)

    shape = Image.new("RGBA", canvas, (0, 0, 0, 0))
    spec.draw(ImageDraw.Draw(shape), appearance, size, fill, stroke)

    alpha = shape.getchannel("A")
    shadow = Image.new("RGBA", canvas, (0, 0, 0, 0))
    shadow_alpha = alpha.point(lambda a: int(a * appearance.shadow_opacity))
    shadow.putalpha(shadow_alpha)
    shadow = shadow.transform(
        canvas, Image.Transform.AFFINE, (1, 0, -1, 0, 1, -2)
    ).filter(ImageFilter.GaussianBlur(appearance.shadow_blur / 2.0))

    icon = Image.new("RGBA", canvas, (0, 0, 0, 0))
    if appearance.glow:
        glow = Image.new("RGBA", canvas, fill[:3] + (0,))
        glow.putalpha(alpha.filter(ImageFilter.GaussianBlur(3)))
        icon = Image.alpha_composite(icon, glow)
    icon = Image.alpha_composite(icon, shadow)
    return Image.alpha_composite(icon, shape)
