"""
Leave-count parsing. Pure functions, zero I/O.

Leave counts arrive as ints from callers, as floats from spreadsheet cells
and as strings from CSV files. Only whole numbers are accepted: ``25``,
``25.0`` and ``"25"`` all parse, ``"25.5"`` and ``"abc"`` do not.

Counts are stored in 32-bit INTEGER columns, so anything outside that range
is treated as unparseable rather than handed to the database driver.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any

from leave_kernel.exceptions import ValidationError

MAX_LEAVE_COUNT = 2**31 - 1


def parse_count(value: Any) -> int | None:
    """
    Return ``value`` as an int, or None if it is not a whole number that
    fits in a 32-bit INTEGER column.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if abs(value) <= MAX_LEAVE_COUNT else None
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return parse_count(int(value))
        return None
    if isinstance(value, Decimal):
        # Range check before int() so "1e999999" never becomes a huge int.
        if not value.is_finite() or abs(value) > MAX_LEAVE_COUNT:
            return None
        if value != value.to_integral_value():
            return None
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return parse_count(int(text))
        except ValueError:
            pass
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
        return parse_count(number)
    return None


def coerce_count(value: Any, field: str) -> int:
    """
    Parse a required non-negative leave count.

    Raises:
        ValidationError: If the value is missing, not a whole number,
            out of range or negative.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required", field=field)
    count = parse_count(value)
    if count is None:
        raise ValidationError(
            f"{field} must be a whole number no larger than {MAX_LEAVE_COUNT}, "
            f"got {value!r}",
            field=field,
        )
    if count < 0:
        raise ValidationError(f"{field} cannot be negative", field=field)
    return count
