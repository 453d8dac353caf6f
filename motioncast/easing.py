"""Progress-remapping curves shared by the cursor and zoom pipelines.

Every curve maps t in [0, 1] onto [0, 1] with f(0) = 0 and f(1) = 1. Both the
spline interpolator and the zoom timeline call ease() from here; there is no
second copy of these formulas anywhere in the package.
"""

from __future__ import annotations
from enum import Enum
from typing import Callable, Dict, Union

from .errors import InvalidInputError
from .utils import clamp


class EasingKind(str, Enum):
    LINEAR = "linear"
    EASE_IN_CUBIC = "easeInCubic"
    EASE_OUT_CUBIC = "easeOutCubic"
    EASE_IN_OUT_CUBIC = "easeInOutCubic"
    EASE_IN_OUT_QUAD = "easeInOutQuad"


def _linear(t: float) -> float:
    return t


def _ease_in_cubic(t: float) -> float:
    return t * t * t


def _ease_out_cubic(t: float) -> float:
    inv = 1.0 - t
    return 1.0 - inv * inv * inv


def _ease_in_out_cubic(t: float) -> float:
    """Two cubic halves joined at 0.5: slow start, fast middle, slow landing."""
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - ((-2.0 * t + 2.0) ** 3) / 2.0


def _ease_in_out_quad(t: float) -> float:
    if t < 0.5:
        return 2.0 * t * t
    return 1.0 - ((-2.0 * t + 2.0) ** 2) / 2.0


EASING_FUNCTIONS: Dict[EasingKind, Callable[[float], float]] = {
    EasingKind.LINEAR: _linear,
    EasingKind.EASE_IN_CUBIC: _ease_in_cubic,
    EasingKind.EASE_OUT_CUBIC: _ease_out_cubic,
    EasingKind.EASE_IN_OUT_CUBIC: _ease_in_out_cubic,
    EasingKind.EASE_IN_OUT_QUAD: _ease_in_out_quad,
}


def parse_easing(kind: Union[EasingKind, str]) -> EasingKind:
    """Resolve an EasingKind from the enum itself or its string value."""
    if isinstance(kind, EasingKind):
        return kind
    try:
        return EasingKind(kind)
    except ValueError as exc:
        known = ", ".join(k.value for k in EasingKind)
        raise InvalidInputError(
            f"Unknown easing {kind!r} (expected one of: {known})"
        ) from exc


def ease(kind: Union[EasingKind, str], t: float) -> float:
    """Remap linear progress t through the named curve.

    Args:
        kind (EasingKind | str): Curve to apply, e.g. "easeInOutCubic".
        t (float): Linear progress; values outside [0, 1] are clamped.

    Returns:
        float: Eased progress in [0, 1].
    """
    fn = EASING_FUNCTIONS[parse_easing(kind)]
    return fn(clamp(float(t), 0.0, 1.0))
