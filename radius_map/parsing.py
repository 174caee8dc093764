"""Parsing helpers for user-provided coordinate text."""

from __future__ import annotations

import math


def parse_coordinate(value: str | float | int | None) -> float | None:
    """Coerce a form value to a coordinate in decimal degrees.

    Empty input, whitespace, non-numeric text, NaN and inf all mean "not provided"
    and return None. ``"0"`` is a valid coordinate.

    Args:
        value: Raw form value (text or number).

    Returns:
        Float degrees, or None.
    """

    if value is None:
        return None
    if isinstance(value, (int, float)):
        f = float(value)
    else:
        s = value.strip().replace(",", ".")
        if not s:
            return None
        try:
            f = float(s)
        except ValueError:
            return None
    if not math.isfinite(f):
        return None
    return f
