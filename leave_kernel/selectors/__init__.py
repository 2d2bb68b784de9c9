"""Read-only query selectors for the leave kernel."""

from leave_kernel.selectors.balance_selector import BalanceCheck, BalanceSelector
from leave_kernel.selectors.base import BaseSelector
from leave_kernel.selectors.dashboard_selector import (
    DashboardSelector,
    DashboardStats,
    DepartmentSummary,
)
from leave_kernel.selectors.employee_selector import (
    EmployeeDetail,
    EmployeeInfo,
    EmployeeSelector,
    identity_key,
)
from leave_kernel.selectors.leave_selector import (
    DEFAULT_LEAVE_REASONS,
    LeaveInfo,
    LeaveSelector,
)

__all__ = [
    "DEFAULT_LEAVE_REASONS",
    "BalanceCheck",
    "BalanceSelector",
    "BaseSelector",
    "DashboardSelector",
    "DashboardStats",
    "DepartmentSummary",
    "EmployeeDetail",
    "EmployeeInfo",
    "EmployeeSelector",
    "LeaveInfo",
    "LeaveSelector",
    "identity_key",
]
