"""Numeric helpers shared by the pipeline stages."""

import math
from typing import Any


def is_number(value: Any) -> bool:
    """True for finite ints and floats (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round with halves going up, unlike the builtin banker's rounding.

    Args:
        value: Number to round
        ndigits: Decimal places to keep

    Returns:
        Rounded value (a float; cast to int for ndigits=0 if needed).
        Values too large to scale are returned unchanged.
    """
    factor = 10 ** ndigits
    scaled = value * factor
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / factor
