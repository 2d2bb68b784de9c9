"""
Module: leave_kernel.selectors.employee_selector
Responsibility: Read-only employee queries: single employee with leave
    history, the name-ordered roster with usage annotations, and the
    identity set used by bulk-import duplicate detection.
"""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select

from leave_kernel.domain.identity import identity_key
from leave_kernel.models.employee import Employee
from leave_kernel.models.leave import Leave
from leave_kernel.selectors.base import BaseSelector
from leave_kernel.selectors.leave_selector import LeaveInfo, LeaveSelector


@dataclass(frozen=True)
class EmployeeInfo:
    """Immutable DTO for an employee and its balance counters."""

    id: int
    name: str
    department: str | None
    total_leaves: int
    available_leaves: int
    created_at: datetime | None
    leave_count: int = 0

    @property
    def used_leaves(self) -> int:
        return self.total_leaves - self.available_leaves

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "department": self.department,
            "total_leaves": self.total_leaves,
            "available_leaves": self.available_leaves,
            "used_leaves": self.used_leaves,
            "total_leave_requests": self.leave_count,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class EmployeeDetail:
    """An employee together with its leave history (newest-first)."""

    employee: EmployeeInfo
    leaves: tuple[LeaveInfo, ...]

    @property
    def used_leaves(self) -> int:
        return self.employee.used_leaves

    def to_dict(self) -> dict:
        payload = self.employee.to_dict()
        payload["leaves"] = [leave.to_dict() for leave in self.leaves]
        return payload


def employee_to_dto(employee: Employee, leave_count: int = 0) -> EmployeeInfo:
    """Convert an ORM Employee to an EmployeeInfo DTO."""
    return EmployeeInfo(
        id=employee.id,
        name=employee.name,
        department=employee.department,
        total_leaves=employee.total_leaves,
        available_leaves=employee.available_leaves,
        created_at=employee.created_at,
        leave_count=leave_count,
    )


class EmployeeSelector(BaseSelector[Employee]):
    """Read-only queries over employees."""

    def find_by_id(self, employee_id: int) -> Employee | None:
        return self.session.get(Employee, employee_id)

    def get_detail(self, employee_id: int) -> EmployeeDetail | None:
        """Employee plus full leave history, or None if absent."""
        employee = self.find_by_id(employee_id)
        if employee is None:
            return None
        leaves = LeaveSelector(self.session).list_for_employee(employee_id)
        return EmployeeDetail(
            employee=employee_to_dto(employee, leave_count=len(leaves)),
            leaves=tuple(leaves),
        )

    def list_all(self) -> list[EmployeeInfo]:
        """All employees ordered by name, annotated with their leave count."""
        stmt = (
            select(Employee, func.count(Leave.id))
            .outerjoin(Leave, Leave.employee_id == Employee.id)
            .group_by(Employee.id)
            .order_by(Employee.name, Employee.id)
        )
        return [
            employee_to_dto(employee, leave_count=count)
            for employee, count in self.session.execute(stmt).all()
        ]

    def count(self) -> int:
        return self.session.scalar(select(func.count(Employee.id))) or 0

    def existing_identities(self) -> set[tuple[str, str]]:
        """Case-folded (name, department) pairs of every stored employee."""
        rows = self.session.execute(select(Employee.name, Employee.department)).all()
        return {identity_key(name, department) for name, department in rows}
