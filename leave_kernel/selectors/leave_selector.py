"""
Module: leave_kernel.selectors.leave_selector
Responsibility: Read-only leave queries: single leave by id, the full ledger
    joined with employee names, one employee's history, and the reason
    picklist.  Every listing is newest-first (created_at DESC, id DESC as
    tie-breaker).
"""

from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import select

from leave_kernel.models.employee import Employee
from leave_kernel.models.leave import Leave
from leave_kernel.selectors.base import BaseSelector

DEFAULT_LEAVE_REASONS: tuple[str, ...] = (
    "Personal",
    "Medical",
    "Vacation",
    "Emergency",
    "Family",
    "Sick Leave",
    "Maternity",
    "Paternity",
    "Study Leave",
    "Other",
)


@dataclass(frozen=True)
class LeaveInfo:
    """Immutable DTO for a leave record, optionally with owner display fields."""

    id: int
    employee_id: int
    start_date: date
    end_date: date
    days: int
    reason: str
    status: str
    created_at: datetime | None
    employee_name: str | None = None
    employee_department: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "days": self.days,
            "reason": self.reason,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "employee_name": self.employee_name,
            "employee_department": self.employee_department,
        }


def leave_to_dto(
    leave: Leave,
    employee_name: str | None = None,
    employee_department: str | None = None,
) -> LeaveInfo:
    """Convert an ORM Leave to a LeaveInfo DTO."""
    return LeaveInfo(
        id=leave.id,
        employee_id=leave.employee_id,
        start_date=leave.start_date,
        end_date=leave.end_date,
        days=leave.days,
        reason=leave.reason,
        status=leave.status,
        created_at=leave.created_at,
        employee_name=employee_name,
        employee_department=employee_department,
    )


class LeaveSelector(BaseSelector[Leave]):
    """Read-only queries over the leave ledger."""

    def find_by_id(self, leave_id: int) -> LeaveInfo | None:
        """Leave by id with owner name/department, or None."""
        stmt = (
            select(Leave, Employee.name, Employee.department)
            .join(Employee, Leave.employee_id == Employee.id)
            .where(Leave.id == leave_id)
        )
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        leave, name, department = row
        return leave_to_dto(leave, name, department)

    def list_all(self) -> list[LeaveInfo]:
        """All leaves newest-first, joined with owner name and department."""
        stmt = (
            select(Leave, Employee.name, Employee.department)
            .join(Employee, Leave.employee_id == Employee.id)
            .order_by(Leave.created_at.desc(), Leave.id.desc())
        )
        return [
            leave_to_dto(leave, name, department)
            for leave, name, department in self.session.execute(stmt).all()
        ]

    def list_for_employee(self, employee_id: int) -> list[LeaveInfo]:
        """One employee's leaves, newest-first."""
        stmt = (
            select(Leave)
            .where(Leave.employee_id == employee_id)
            .order_by(Leave.created_at.desc(), Leave.id.desc())
        )
        return [leave_to_dto(leave) for leave in self.session.scalars(stmt).all()]

    def reasons(self) -> list[str]:
        """Default reasons merged with every reason already recorded, sorted."""
        stmt = select(Leave.reason).distinct().where(Leave.reason.is_not(None))
        stored = set(self.session.scalars(stmt).all())
        return sorted(set(DEFAULT_LEAVE_REASONS) | stored)
