"""ORM models for the leave kernel."""

from leave_kernel.models.employee import DEFAULT_DEPARTMENT, Employee
from leave_kernel.models.leave import Leave, LeaveStatus

__all__ = [
    "DEFAULT_DEPARTMENT",
    "Employee",
    "Leave",
    "LeaveStatus",
]
