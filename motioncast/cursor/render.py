from __future__ import annotations
from typing import List, Sequence, Tuple
from PIL import Image, ImageDraw

from ..utils import clamp
from .config import cfg
from .sampler import Frame
from .telemetry import ClickEvent

Rgb = Tuple[int, int, int]

# slow -> medium -> fast
SPEED_PALETTE: List[Rgb] = [(0, 120, 255), (60, 205, 60), (255, 60, 60)]

LEGEND_GUTTER = 80
TEXT_COLOR: Rgb = (200, 200, 200)
CLICK_RING: Rgb = (255, 200, 80)
CLICK_HALO: Rgb = (255, 140, 40)


def _gradient(stops: Sequence[Rgb], u: float) -> Rgb:
    """Piecewise-linear colour along evenly spaced stops, u in [0, 1]."""
    u = clamp(u, 0.0, 1.0) * (len(stops) - 1)
    i = min(int(u), len(stops) - 2)
    frac = u - i
    lo, hi = stops[i], stops[i + 1]
    return tuple(int(a + (b - a) * frac) for a, b in zip(lo, hi))


def speed_color(speed: float, v_min: float, v_max: float) -> Rgb:
    if v_max <= v_min:
        return SPEED_PALETTE[0]
    return _gradient(SPEED_PALETTE, (speed - v_min) / (v_max - v_min))


def _interpolated_percentile(values: Sequence[float], q: float) -> float:
    if not values:
        return 0.0
    data = sorted(values)
    pos = clamp(q, 0.0, 1.0) * (len(data) - 1)
    lo = int(pos)
    hi = min(lo + 1, len(data) - 1)
    return data[lo] + (data[hi] - data[lo]) * (pos - lo)


def _draw_click(draw: ImageDraw.ImageDraw, x: float, y: float, radius: int) -> None:
    halo = radius + 4
    draw.ellipse([x - halo, y - halo, x + halo, y + halo], outline=CLICK_HALO, width=1)
    draw.ellipse(
        [x - radius, y - radius, x + radius, y + radius], outline=CLICK_RING, width=2
    )
    draw.ellipse([x - 2, y - 2, x + 2, y + 2], fill=(255, 255, 255), outline=CLICK_RING)


def _draw_legend(
    draw: ImageDraw.ImageDraw, left: int, top: int, height: int, v_min: float, v_max: float
) -> None:
    """Vertical speed scale, fast at the top."""
    bar_width = 18
    for row in range(height):
        speed = v_max - (v_max - v_min) * row / max(1, height - 1)
        draw.line(
            [(left, top + row), (left + bar_width, top + row)],
            fill=speed_color(speed, v_min, v_max),
        )
    draw.rectangle(
        [left - 1, top - 1, left + bar_width + 1, top + height + 1],
        outline=TEXT_COLOR,
    )
    label_x = left + bar_width + 6
    draw.text((label_x, top - 2), f"fast\n{v_max:.0f} px/s", fill=TEXT_COLOR)
    draw.text((label_x, top + height - 22), f"slow\n{v_min:.0f} px/s", fill=TEXT_COLOR)


def render_trajectory(
    frames: Sequence[Frame],
    clicks: Sequence[ClickEvent],
    width: int,
    height: int,
    *,
    background_color: Rgb = (12, 12, 14),
    point_radius: int = 3,
    click_ring_radius: int = 5,
    canvas_margin: int = 20,
    annotate: bool = True,
) -> Image.Image:
    """Draw sampled cursor frames as a velocity-coloured preview.

    Each frame is a dot coloured by its speed (blue slow, red fast), clicks get
    a ring, and a speed legend sits in a gutter on the right. The image is
    returned; saving it is up to the caller.
    """
    width, height = int(width), int(height)
    size = (width + 2 * canvas_margin + LEGEND_GUTTER, height + 2 * canvas_margin)
    image = Image.new("RGB", size, background_color)
    draw = ImageDraw.Draw(image)

    if not frames:
        if annotate:
            draw.text((canvas_margin, canvas_margin), "No cursor frames sampled", fill=TEXT_COLOR)
        return image

    v_min = cfg.MIN_SPEED_PX_PER_S
    v_max = max(cfg.MAX_SPEED_PX_PER_S, v_min + 1e-6)

    def to_canvas(x: float, y: float) -> Tuple[float, float]:
        return (
            canvas_margin + clamp(x, 0.0, width - 1.0),
            canvas_margin + clamp(y, 0.0, height - 1.0),
        )

    r = point_radius
    for frame in frames:
        px, py = to_canvas(frame.x, frame.y)
        color = speed_color(frame.velocity_px_per_sec, v_min, v_max)
        draw.ellipse([px - r, py - r, px + r, py + r], fill=color)

    for click in clicks:
        _draw_click(draw, *to_canvas(click.x, click.y), click_ring_radius)

    _draw_legend(
        draw,
        left=canvas_margin + width + 20,
        top=canvas_margin,
        height=max(80, height - 40),
        v_min=v_min,
        v_max=v_max,
    )

    speeds = [f.velocity_px_per_sec for f in frames[1:]]
    if annotate and speeds:
        footer = (
            f"Frames: {len(frames)} | Speed px/s "
            f"p50 {_interpolated_percentile(speeds, 0.5):.0f} | "
            f"p95 {_interpolated_percentile(speeds, 0.95):.0f} | max {max(speeds):.0f}"
        )
        draw.text((canvas_margin, size[1] - canvas_margin - 14), footer, fill=TEXT_COLOR)
    return image
