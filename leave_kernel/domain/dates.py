"""
Leave date arithmetic. Pure functions, zero I/O.

A leave covers an inclusive calendar range: a leave starting and ending on
the same day is one day long.
"""

from __future__ import annotations

from datetime import date, datetime

from leave_kernel.exceptions import InvalidDateRangeError, ValidationError


def coerce_date(value: date | datetime | str | None, field: str) -> date:
    """Accept a date, datetime or ISO ``YYYY-MM-DD`` string and return a date."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required", field=field)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            raise ValidationError(
                f"{field} must be an ISO date (YYYY-MM-DD), got {value!r}",
                field=field,
            ) from None
    raise ValidationError(
        f"{field} must be a date, got {type(value).__name__}", field=field
    )


def inclusive_days(start_date: date, end_date: date) -> int:
    """
    Number of calendar days covered by [start_date, end_date].

    Raises:
        InvalidDateRangeError: If end_date is before start_date.
    """
    if end_date < start_date:
        raise InvalidDateRangeError(start_date.isoformat(), end_date.isoformat())
    return (end_date - start_date).days + 1
