"""
Scoring Engine - Normalization.

============================================================
RESPONSIBILITY
============================================================
Pure functions mapping raw domain values onto the common
0-100 sub-score scale.

- Linear range scaling with clamping
- Defined result for degenerate ranges (min == max)
- One rounding rule for every score in the engine

============================================================
ROUNDING
============================================================
Halves round up (floor(x + 0.5)), not to even. 2.5 -> 3,
-2.5 -> -2. Python's built-in round() would move fixed-point
scores by one on exact halves.

============================================================
"""

import math
from typing import Union

from core.constants import DEGENERATE_RANGE_SCORE, MAX_SCORE, MIN_SCORE


Number = Union[int, float]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return int(math.floor(value + 0.5))


def clamp(value: Number, lower: Number, upper: Number) -> Number:
    """Bound value to [lower, upper]."""
    return max(lower, min(upper, value))


def _bounded_score(value: float) -> int:
    if math.isnan(value):
        return DEGENERATE_RANGE_SCORE
    return round_half_up(clamp(value, MIN_SCORE, MAX_SCORE))


def scale_to_100(value: Number, lower: Number, upper: Number) -> int:
    """
    Linearly map value from [lower, upper] onto [0, 100].

    Values outside the range saturate at 0 or 100, including
    values large enough to overflow to infinity. A degenerate range
    (lower == upper) or a NaN input returns exactly 50.

    Args:
        value: Raw value
        lower: Value that maps to 0
        upper: Value that maps to 100

    Returns:
        Integer score in [0, 100]
    """
    if lower == upper:
        return DEGENERATE_RANGE_SCORE

    try:
        scaled = (value - lower) / (upper - lower) * 100
    except OverflowError:
        # int operands too large for a float
        scaled = math.inf if (value > lower) == (upper > lower) else -math.inf
    return _bounded_score(scaled)


def clamp_score(value: float) -> int:
    """Round a raw score and clamp it to [0, 100]. NaN scores 50."""
    return _bounded_score(value)


__all__ = [
    "round_half_up",
    "clamp",
    "scale_to_100",
    "clamp_score",
]
