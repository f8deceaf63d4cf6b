"""Precision-bounded float comparisons and unit conversions.

Repeated projection round-trips accumulate floating point drift, so every
equality check on geographic or screen values goes through these helpers
with an explicit tolerance.
"""

from __future__ import annotations

import math

DEGREE_PRECISION = 0.00001  # ~1 metre at the equator
VISUAL_PRECISION = 1.0  # one device independent pixel
KILOMETERS = 1000.0
MEAN_EARTH_RADIUS = 6371 * KILOMETERS


def is_same_as(first: float, second: float, precision: float) -> bool:
    """Return True if two floats differ by less than ``precision``.

    NaN is never the same as anything, including NaN.
    """
    return abs(first - second) < precision


def is_greater_than_or_same(first: float, second: float, precision: float) -> bool:
    return first > second or is_same_as(first, second, precision)


def is_less_than_or_same(first: float, second: float, precision: float) -> bool:
    return first < second or is_same_as(first, second, precision)


def is_in_range(
    value: float, min_value: float, max_value: float, precision: float
) -> bool:
    """Check ``min_value <= value <= max_value`` with tolerance on both ends."""
    return is_greater_than_or_same(
        value, min_value, precision
    ) and is_less_than_or_same(value, max_value, precision)


def clip_to_range(value: float, min_value: float, max_value: float) -> float:
    """Clamp ``value`` into ``[min_value, max_value]``.

    Unlike :func:`is_in_range` there is no tolerance: the result is always
    inside the closed range.
    """
    return max(min_value, min(value, max_value))


def to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180)


def to_degrees(radians: float) -> float:
    return radians * (180 / math.pi)
