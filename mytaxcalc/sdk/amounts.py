"""Normalization of free-form amount input.

A calculator must never fail on a partial keystroke, so anything that
cannot be read as a number becomes 0.
"""

import math
import re
from typing import Union

_NON_NUMERIC = re.compile(r"[^\d.]")


def parse_amount(value: Union[str, int, float, None]) -> float:
    """Convert user input to a float amount.

    Text keeps only digits and decimal points before parsing, so currency
    prefixes, thousands separators and signs are dropped.

    Examples:
        parse_amount("RM 1,234.50")  # -> 1234.5
        parse_amount("")             # -> 0.0
        parse_amount("1.2.3")        # -> 0.0
        parse_amount(-50)            # -> -50.0 (numbers pass through)
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = _NON_NUMERIC.sub("", str(value))
        try:
            number = float(cleaned)
        except ValueError:
            return 0.0

    if not math.isfinite(number):
        return 0.0
    return number
