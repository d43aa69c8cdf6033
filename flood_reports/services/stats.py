from __future__ import annotations

import math
from collections.abc import Sequence

"""Statistics helpers shared by the report aggregators.

All helpers are pure and total: empty input and degenerate arithmetic
resolve to 0 instead of raising or returning NaN/Infinity.
"""

__all__ = [
    "average",
    "median",
    "finite_or_zero",
    "clamp",
    "bounded_score",
    "rate_percent",
    "format_2dp",
]


def average(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def median(values: Sequence[float]) -> float:
    """Median of a sorted copy of ``values``; 0.0 for an empty sequence.

    Even-length input returns the mean of the two middle elements.

    >>> median([3, 1, 2])
    2
    >>> median([1, 2, 3, 4])
    2.5
    """
    if not values:
        return 0.0
    s = sorted(values)
    mid = len(s) // 2
    if len(s) % 2:
        return s[mid]
    return (s[mid - 1] + s[mid]) / 2


def finite_or_zero(value: float) -> float:
    """Replace NaN / +-Infinity with 0.0."""
    return value if math.isfinite(value) else 0.0


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(high, max(low, value))


def bounded_score(value: float) -> float:
    """Normalize a raw composite score into [0, 100].

    Non-finite and negative values become 0 before clamping.
    """
    value = finite_or_zero(value)
    if value < 0:
        value = 0.0
    return clamp(value)


def rate_percent(hits: int, total: int) -> float:
    """``100 * hits / total`` with an empty denominator treated as 0%."""
    if total == 0:
        return 0.0
    return hits / total * 100


def format_2dp(value: float) -> str:
    """Fixed two-decimal text, e.g. ``1234.5 -> '1234.50'``.

    Negative zero is printed as ``0.00``.
    """
    if value == 0:
        value = 0.0
    return f"{value:.2f}"
