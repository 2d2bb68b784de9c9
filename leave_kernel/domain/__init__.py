"""Pure domain helpers for the leave kernel. ZERO I/O."""

from leave_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from leave_kernel.domain.counts import MAX_LEAVE_COUNT, coerce_count, parse_count
from leave_kernel.domain.dates import coerce_date, inclusive_days
from leave_kernel.domain.identity import identity_key

__all__ = [
    "MAX_LEAVE_COUNT",
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "coerce_count",
    "coerce_date",
    "identity_key",
    "inclusive_days",
    "parse_count",
]
