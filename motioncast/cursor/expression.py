"""Compile cursor keyframes into compositor overlay expressions.

The output grammar is the ffmpeg expression language used by the overlay
filter: `t` is render time in seconds, `if(lt(t,T),a,b)` selects a branch,
and arithmetic is limited to `+ - * /`. A trajectory with keyframes k0..kn
compiles to

    if(lt(t,T1),x0+(dx0)*(t-T0)/D0,if(lt(t,T2),x1+(dx1)*(t-T1)/D1,...,xn))

with one `)` per opened `if(`. Coordinates are clamped into the frame before
the hotspot is subtracted, so every branch stays inside
[-hotspot, frame dimension - hotspot].
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence, Tuple
import logging
import math

from ..errors import InvalidInputError
from ..utils import clamp, require_finite, require_positive
from .config import cfg
from .keyframes import Keyframe
from .styles import HotspotOffset

TIME_DECIMALS: int = getattr(cfg, "TIME_DECIMALS", 3)
COORD_DECIMALS: int = getattr(cfg, "COORD_DECIMALS", 2)
MAX_EXPRESSION_CHARS: int = getattr(cfg, "MAX_EXPRESSION_CHARS", 60000)


@dataclass(frozen=True)
class OverlayExpression:
    """Compiled x(t)/y(t) pair for the overlay filter.

    Attributes:
        x_expr (str): Expression for the overlay's left edge.
        y_expr (str): Expression for the overlay's top edge.
        enabled (bool): False means "do not draw the overlay at all".
        conditionals (int): Number of `if(` branches opened in each expression.
    """

    x_expr: str
    y_expr: str
    enabled: bool = True
    conditionals: int = 0

    @property
    def size(self) -> int:
        """Length of the longer expression, for checking compositor limits."""
        return max(len(self.x_expr), len(self.y_expr))

    def exceeds(self, limit: int = MAX_EXPRESSION_CHARS) -> bool:
        return self.size > limit

    def to_filter_args(self) -> str:
        """Render as overlay filter arguments, e.g. x='...':y='...'."""
        if not self.enabled:
            return "x=0:y=0:enable=0"
        return f"x='{self.x_expr}':y='{self.y_expr}'"


DISABLED_OVERLAY = OverlayExpression(x_expr="0", y_expr="0", enabled=False)


def format_number(value: float, decimals: int) -> str:
    """Fixed-precision, locale-independent number formatting (never "-0.00")."""
    text = f"{value:.{decimals}f}"
    if float(text) == 0.0:
        text = f"{0.0:.{decimals}f}"
    return text


def _validate_keyframes(keyframes: Sequence[Keyframe]) -> None:
    last_time = -math.inf
    for i, kf in enumerate(keyframes):
        time = require_finite(kf.time, f"keyframes[{i}].time")
        require_finite(kf.x, f"keyframes[{i}].x")
        require_finite(kf.y, f"keyframes[{i}].y")
        if time < last_time:
            raise InvalidInputError(
                f"keyframes must be time-ordered: keyframes[{i}].time={time} < {last_time}"
            )
        last_time = time


def _segment_term(v1: str, v2: str, t1: str, dt: str) -> str:
    """Linear term v1 + (v2-v1)*(t-t1)/dt over already-formatted endpoints."""
    delta = format_number(float(v2) - float(v1), COORD_DECIMALS)
    return f"{v1}+({delta})*(t-{t1})/{dt}"


def _chain(branches: List[Tuple[str, str]], fallback: str) -> str:
    """Nest (end_time, term) branches around a fallback, closing every if(."""
    opened = "".join(f"if(lt(t,{end}),{term}," for end, term in branches)
    return opened + fallback + ")" * len(branches)


def compile_overlay(
    keyframes: Sequence[Keyframe],
    hotspot: HotspotOffset,
    width: float,
    height: float,
) -> OverlayExpression:
    """Compile keyframes into piecewise-linear x(t)/y(t) overlay expressions.

    Args:
        keyframes (Sequence[Keyframe]): Time-ordered cursor keyframes (ms).
        hotspot (HotspotOffset): Icon offset subtracted from every position.
        width (float): Frame width; x is clamped into [0, width] first.
        height (float): Frame height; y is clamped into [0, height] first.

    Returns:
        OverlayExpression: DISABLED_OVERLAY for no keyframes, a constant for
        one keyframe, otherwise one conditional per segment with the final
        position as the unconditional fallback.

    Raises:
        InvalidInputError: Unsorted keyframes, non-finite values, or
            non-positive frame dimensions.
    """
    width = require_positive(width, "width")
    height = require_positive(height, "height")
    hot_x = require_finite(hotspot.x, "hotspot.x")
    hot_y = require_finite(hotspot.y, "hotspot.y")
    if not keyframes:
        return DISABLED_OVERLAY
    _validate_keyframes(keyframes)

    times = [format_number(kf.time / 1000.0, TIME_DECIMALS) for kf in keyframes]
    xs = [
        format_number(clamp(kf.x, 0.0, width) - hot_x, COORD_DECIMALS)
        for kf in keyframes
    ]
    ys = [
        format_number(clamp(kf.y, 0.0, height) - hot_y, COORD_DECIMALS)
        for kf in keyframes
    ]

    if len(keyframes) == 1:
        return OverlayExpression(x_expr=xs[0], y_expr=ys[0])

    x_branches: List[Tuple[str, str]] = []
    y_branches: List[Tuple[str, str]] = []
    if float(times[0]) > 0.0:
        # hold the first position until the first keyframe instead of extrapolating
        x_branches.append((times[0], xs[0]))
        y_branches.append((times[0], ys[0]))

    for i in range(len(keyframes) - 1):
        t1, t2 = times[i], times[i + 1]
        span = float(t2) - float(t1)
        if span <= 0.0:
            continue
        dt = format_number(span, TIME_DECIMALS)
        x_branches.append((t2, _segment_term(xs[i], xs[i + 1], t1, dt)))
        y_branches.append((t2, _segment_term(ys[i], ys[i + 1], t1, dt)))

    expression = OverlayExpression(
        x_expr=_chain(x_branches, xs[-1]),
        y_expr=_chain(y_branches, ys[-1]),
        conditionals=len(x_branches),
    )

    logger = logging.getLogger(__name__)
    logger.debug(
        "Compiled %d keyframes into %d branches (%d chars)",
        len(keyframes),
        expression.conditionals,
        expression.size,
    )
    if expression.exceeds(MAX_EXPRESSION_CHARS):
        logger.warning(
            "Overlay expression is %d chars (> %d); consider frame-by-frame rendering",
            expression.size,
            MAX_EXPRESSION_CHARS,
        )
    return expression
