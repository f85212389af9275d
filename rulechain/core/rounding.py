"""Rounding policies.

Two independent rounding operations share the Rounding enum:

- round_scaled: rounds a float at a decimal precision by scaling it by
  10**precision, rounding to an integer and scaling back. HalfUp rounds ties
  away from zero here (-124.5 -> -125).
- divide_rounded: divides two integers (a duration by its unit) and rounds
  the quotient using the remainder of a floor division. HalfUp rounds ties
  toward positive infinity here (-5.5 -> -5), which is what the duration
  family relies on.

Each family depends on its own table.
"""

import math
from enum import Enum


class Rounding(Enum):
    """Rounding policy for values that must be made integral or shortened."""

    NONE = "None"
    UP = "Up"
    DOWN = "Down"
    HALF_UP = "HalfUp"
    HALF_EVEN = "HalfEven"

    def __str__(self) -> str:
        return self.value


# Maximum distance between a float and its rounded value for the float to be
# accepted as integral when no rounding policy is configured.
ROUNDING_TOLERANCE = 1e-9


def _half_away_from_zero(value: float) -> int:
    truncated = math.trunc(value)
    if abs(value - truncated) >= 0.5:
        truncated += int(math.copysign(1, value))
    return truncated


def round_integral(value: float, policy: Rounding) -> int:
    """Round a finite float to an integer.

    Rounding.NONE rounds half away from zero, like HALF_UP; callers that must
    reject non-integral input compare the result against ROUNDING_TOLERANCE.

    Args:
        value: Finite float to round
        policy: Rounding policy

    Returns:
        The rounded value as a Python int.
    """
    if policy is Rounding.UP:
        return math.ceil(value)
    if policy is Rounding.DOWN:
        return math.floor(value)
    if policy is Rounding.HALF_EVEN:
        return round(value)
    return _half_away_from_zero(value)


def round_scaled(value: float, policy: Rounding, precision: int) -> float:
    """Round a float to ``precision`` decimal places.

    Example:
        >>> round_scaled(124.125, Rounding.HALF_UP, 2)
        124.13
        >>> round_scaled(124.125, Rounding.HALF_EVEN, 2)
        124.12
        >>> round_scaled(-122.124, Rounding.DOWN, 2)
        -122.13
    """
    if policy is Rounding.NONE or not math.isfinite(value):
        return value
    scale = 10.0**precision
    scaled = value * scale
    if not math.isfinite(scaled):
        return value
    return round_integral(scaled, policy) / scale


def divide_rounded(numerator: int, denominator: int, policy: Rounding) -> int:
    """Divide two integers and round the quotient.

    The quotient and remainder come from a floor division, so the remainder
    is always in ``[0, denominator)`` for a positive denominator.
    Rounding.NONE and Rounding.DOWN both return the floor.

    Example:
        >>> divide_rounded(5_500, 1_000, Rounding.HALF_EVEN)
        6
        >>> divide_rounded(6_500, 1_000, Rounding.HALF_EVEN)
        6
        >>> divide_rounded(-5_500, 1_000, Rounding.HALF_UP)
        -5
    """
    quotient, remainder = divmod(numerator, denominator)
    if remainder == 0:
        return quotient
    if policy is Rounding.UP:
        return quotient + 1
    if policy is Rounding.HALF_UP:
        return quotient + 1 if 2 * remainder >= denominator else quotient
    if policy is Rounding.HALF_EVEN:
        if 2 * remainder > denominator:
            return quotient + 1
        if 2 * remainder == denominator and quotient % 2 != 0:
            return quotient + 1
    return quotient
