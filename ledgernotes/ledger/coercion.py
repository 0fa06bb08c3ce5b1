"""Numeric coercion for ledger cells.

Aggregation parses the leading decimal number of a cell and treats anything
else as zero. Display formatting is kept separate from parsing.
"""

import math
import re
from typing import Any, Optional

# Leading decimal prefix: "12.5kg" -> 12.5, " -3" -> -3, ".5" -> 0.5
_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_number_or_none(value: Any) -> Optional[float]:
    """Parse the leading decimal number of ``value``.

    Returns None when no number can be read or the result is not finite.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMBER_PREFIX.match(str(value))
        if not match:
            return None
        try:
            number = float(match.group(1))
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_number(value: Any) -> float:
    """Parse a cell for aggregation; empty or invalid input yields 0."""
    number = parse_number_or_none(value)
    return 0.0 if number is None else number


def format_amount(value: float) -> str:
    """Two fixed decimals with thousands grouping: 1234.5 -> '1,234.50'."""
    return f"{value:,.2f}"


def format_plain_number(value: float) -> str:
    """Shortest textual form: 6.0 -> '6', -2.5 -> '-2.5'."""
    if value == 0:
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
