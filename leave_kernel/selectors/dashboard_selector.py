"""
Module: leave_kernel.selectors.dashboard_selector
Responsibility: Dashboard aggregates: employee headcount, leaves created in
    a calendar year (count and total days), and a per-department breakdown
    of entitlements and balances.
Architecture position: Kernel > Selectors.  Read-only.

The "this year" window is taken from the injected clock, never from the
wall clock directly, so reports are reproducible under test.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import case, func, select

from leave_kernel.domain.clock import Clock, SystemClock
from leave_kernel.models.employee import DEFAULT_DEPARTMENT, Employee
from leave_kernel.models.leave import Leave
from leave_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class DepartmentSummary:
    """Aggregated entitlement figures for one department."""

    department: str
    employee_count: int
    total_leaves: int
    available_leaves: int

    @property
    def used_leaves(self) -> int:
        return self.total_leaves - self.available_leaves

    def to_dict(self) -> dict:
        return {
            "department": self.department,
            "employee_count": self.employee_count,
            "total_leaves": self.total_leaves,
            "available_leaves": self.available_leaves,
            "used_leaves": self.used_leaves,
        }


@dataclass(frozen=True)
class DashboardStats:
    """Snapshot of the dashboard figures for one calendar year."""

    year: int
    total_employees: int
    leaves_this_year: int
    days_this_year: int
    departments: tuple[DepartmentSummary, ...]

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "total_employees": self.total_employees,
            "leaves_this_year": self.leaves_this_year,
            "days_this_year": self.days_this_year,
            "departments": [d.to_dict() for d in self.departments],
        }


class DashboardSelector(BaseSelector[Employee]):
    """Read-only dashboard aggregation."""

    def __init__(self, session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()

    def stats(self, year: int | None = None) -> DashboardStats:
        """
        Compute dashboard figures.

        Args:
            year: Calendar year for the leave figures. Defaults to the
                clock's current year.

        Returns:
            DashboardStats with departments ordered by name.
        """
        if year is None:
            year = self._clock.now().year

        total_employees = self.session.scalar(select(func.count(Employee.id))) or 0

        window_start = datetime(year, 1, 1, tzinfo=timezone.utc)
        window_end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
        leave_count, leave_days = self.session.execute(
            select(func.count(Leave.id), func.coalesce(func.sum(Leave.days), 0)).where(
                Leave.created_at >= window_start,
                Leave.created_at < window_end,
            )
        ).one()

        return DashboardStats(
            year=year,
            total_employees=int(total_employees),
            leaves_this_year=int(leave_count),
            days_this_year=int(leave_days),
            departments=tuple(self.department_summaries()),
        )

    def department_summaries(self) -> list[DepartmentSummary]:
        """Per-department headcount and leave totals; blank departments pooled."""
        department = case(
            (Employee.department.is_(None), DEFAULT_DEPARTMENT),
            (func.trim(Employee.department) == "", DEFAULT_DEPARTMENT),
            else_=Employee.department,
        ).label("department")
        stmt = (
            select(
                department,
                func.count(Employee.id),
                func.coalesce(func.sum(Employee.total_leaves), 0),
                func.coalesce(func.sum(Employee.available_leaves), 0),
            )
            .group_by(department)
            .order_by(department)
        )
        return [
            DepartmentSummary(
                department=name,
                employee_count=int(count),
                total_leaves=int(total),
                available_leaves=int(available),
            )
            for name, count, total, available in self.session.execute(stmt).all()
        ]
