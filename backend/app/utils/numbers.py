"""Lenient numeric coercion for values coming off the wire."""

import math
import re
from typing import Any

# Leading decimal number, the way a browser's parseFloat reads "1500 INR".
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_price(value: Any) -> float:
    """Coerce a price to a float; anything unparseable counts as zero.

    Args:
        value: Number, numeric string, or anything else

    Returns:
        Finite float (0.0 for None, bools, NaN, infinities and non-numeric text)
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return 0.0
        number = float(match.group(1))
    else:
        return 0.0

    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def coerce_int(value: Any, default: int) -> int:
    """Coerce a count field, falling back to default when empty, zero or non-numeric."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return number or default
