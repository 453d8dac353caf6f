from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when a caller hands the motion pipeline malformed input.

    Unsorted timestamps, non-finite coordinates and non-positive fps or frame
    dimensions all end up here instead of leaking into the numbers.
    """

    pass
