"""
Money helpers shared by every invoice check.

Amounts travel as floats (that is what JSON clients send), so two values
that should be equal can differ by floating-point drift. Nothing compares
money with ``==``: use within_tolerance on values rounded with round2.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

# One cent
MONEY_EPSILON = 0.01


def within_tolerance(a: float, b: float, epsilon: float = MONEY_EPSILON) -> bool:
    """True iff |a - b| < epsilon. A difference of exactly epsilon is a mismatch."""
    return abs(a - b) < epsilon


def round_places(value: float, places: int) -> float:
    """Round half-up to a fixed number of decimal places."""
    # repr() keeps 2.675 as "2.675" instead of its binary expansion
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(exponent, rounding=ROUND_HALF_UP))


def round2(value: float) -> float:
    """Round half-up to cents."""
    return round_places(value, 2)


def to_number(value: Any) -> float:
    """
    Lenient numeric coercion for client-submitted amounts.

    Missing, blank, boolean and non-numeric values become 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(Decimal(str(value).strip()))
        except (InvalidOperation, ValueError):
            return 0.0
    # NaN and infinities are not amounts
    if number != number or number in (float("inf"), float("-inf")):
        return 0.0
    return number
