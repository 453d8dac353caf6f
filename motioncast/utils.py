from __future__ import annotations
import math
from typing import Any

from .errors import InvalidInputError


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Restrict value to [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def require_finite(value: Any, name: str) -> float:
    """Coerce value to float, raising InvalidInputError if it is not finite."""
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return number


def require_positive(value: Any, name: str) -> float:
    """Like require_finite, but also rejects zero and negative values."""
    number = require_finite(value, name)
    if number <= 0:
        raise InvalidInputError(f"{name} must be positive, got {value!r}")
    return number
