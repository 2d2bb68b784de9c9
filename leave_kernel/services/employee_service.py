"""
Service layer for Employee operations.

Manages employee identity and the two leave counters (entitlement and
balance). Returns EmployeeInfo / EmployeeDetail DTOs instead of ORM
entities.

Balance-changing writes run inside a SAVEPOINT and verify the balance
invariant before the savepoint is released:

    available_leaves == total_leaves - prior_used_leaves - sum(leaves.days)

Entitlement edits keep the days already used fixed and recompute the
balance. An edit that would leave a negative balance is rejected with
EntitlementBelowUsageError.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from leave_kernel.domain.clock import Clock
from leave_kernel.domain.counts import coerce_count
from leave_kernel.exceptions import (
    EmployeeNotFoundError,
    EntitlementBelowUsageError,
    ValidationError,
)
from leave_kernel.logging_config import LogContext, get_logger
from leave_kernel.models.employee import DEFAULT_DEPARTMENT, Employee
from leave_kernel.models.leave import Leave
from leave_kernel.selectors.balance_selector import BalanceSelector
from leave_kernel.selectors.employee_selector import (
    EmployeeDetail,
    EmployeeInfo,
    EmployeeSelector,
    employee_to_dto,
)
from leave_kernel.services.base import STORAGE_FAILURES, BaseService, storage_error

logger = get_logger("services.employee")


def _clean_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Employee name is required", field="name")
    return name.strip()


def _clean_department(department: Any, default: str) -> str:
    if department is None:
        return default
    text = str(department).strip()
    return text or default


class EmployeeService(BaseService[Employee]):
    """
    Service for managing employees and their leave entitlement.

    All public methods return DTOs, not ORM Employee entities.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        default_department: str = DEFAULT_DEPARTMENT,
    ):
        super().__init__(session, clock=clock)
        self._default_department = default_department

    def _get_by_id(self, employee_id: int) -> Employee:
        """Get employee by ID, raising if not found."""
        employee = self.session.get(Employee, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    def _lock(self, employee_id: int) -> Employee:
        """Load the employee row FOR UPDATE (no-op lock on SQLite)."""
        stmt = select(Employee).where(Employee.id == employee_id).with_for_update()
        employee = self.session.execute(stmt).scalar_one_or_none()
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    def create_employee(
        self,
        name: str,
        total_leaves: int | str,
        department: str | None = None,
        available_leaves: int | str | None = None,
    ) -> EmployeeInfo:
        """
        Create a new employee with a full (or explicitly supplied) balance.

        Args:
            name: Display name. Must be non-blank.
            total_leaves: Annual entitlement, a non-negative whole number.
            department: Department name. Blank or None becomes the
                service default ("Not Specified" unless configured).
            available_leaves: Opening balance for imported employees.
                Defaults to total_leaves. Days between the two are
                recorded as prior usage.

        Returns:
            Created EmployeeInfo DTO.

        Raises:
            ValidationError: On a blank name or an invalid count.
            StorageError: If the insert fails.
        """
        clean_name = _clean_name(name)
        total = coerce_count(total_leaves, "total_leaves")
        if available_leaves is None:
            available = total
        else:
            available = coerce_count(available_leaves, "available_leaves")
            if available > total:
                raise ValidationError(
                    "Available leaves cannot exceed total leaves",
                    field="available_leaves",
                )

        employee = Employee(
            name=clean_name,
            department=_clean_department(department, self._default_department),
            total_leaves=total,
            available_leaves=available,
            prior_used_leaves=total - available,
            created_at=self._clock.now(),
        )

        try:
            with self.session.begin_nested():
                self.session.add(employee)
                self.session.flush()
                BalanceSelector(self.session).check(employee.id)
        except STORAGE_FAILURES as exc:
            raise storage_error("create employee", exc) from exc

        logger.info(
            "employee_created",
            extra={
                "employee_id": employee.id,
                "employee_name": employee.name,
                "department": employee.department,
                "total_leaves": employee.total_leaves,
                "available_leaves": employee.available_leaves,
            },
        )
        return employee_to_dto(employee)

    def update_employee(
        self,
        employee_id: int,
        name: str,
        department: str | None,
        total_leaves: int | str,
    ) -> EmployeeInfo:
        """
        Edit an employee's name, department and entitlement.

        The days already used are preserved: the new balance is
        ``new_total - (old_total - old_available)``.

        Args:
            employee_id: Employee to edit.
            name: New display name.
            department: New department, or None to keep the current one.
            total_leaves: New entitlement.

        Returns:
            Updated EmployeeInfo DTO.

        Raises:
            EmployeeNotFoundError: If the employee does not exist.
            EntitlementBelowUsageError: If the new entitlement is below the
                days already used.
            ValidationError: On a blank name or an invalid count.
        """
        with LogContext.bind(employee_id=employee_id):
            employee = self._lock(employee_id)
            clean_name = _clean_name(name)
            new_total = coerce_count(total_leaves, "total_leaves")
            used = employee.total_leaves - employee.available_leaves
            new_available = new_total - used
            if new_available < 0:
                logger.warning(
                    "employee_update_rejected_below_usage",
                    extra={"total_leaves": new_total, "used_leaves": used},
                )
                raise EntitlementBelowUsageError(employee_id, new_total, used)

            old_total = employee.total_leaves
            try:
                with self.session.begin_nested():
                    employee.name = clean_name
                    if department is not None:
                        employee.department = _clean_department(department, self._default_department)
                    employee.total_leaves = new_total
                    employee.available_leaves = new_available
                    self.session.flush()
                    BalanceSelector(self.session).check(employee_id)
            except STORAGE_FAILURES as exc:
                raise storage_error("update employee", exc) from exc

            logger.info(
                "employee_updated",
                extra={
                    "previous_total_leaves": old_total,
                    "total_leaves": new_total,
                    "available_leaves": new_available,
                },
            )
        return employee_to_dto(employee)

    def delete_employee(self, employee_id: int) -> int:
        """
        Delete an employee and every leave it owns.

        Returns:
            Number of leave records removed with the employee.

        Raises:
            EmployeeNotFoundError: If the employee does not exist.
            StorageError: If the delete fails; the caller's earlier work
                in the transaction is kept.
        """
        employee = self._get_by_id(employee_id)
        leave_count = self.session.scalar(
            select(func.count(Leave.id)).where(Leave.employee_id == employee_id)
        ) or 0

        # StorageError from _flush rolls back only this savepoint.
        with self.session.begin_nested():
            self.session.delete(employee)
            self._flush("delete employee")

        logger.info(
            "employee_deleted",
            extra={"employee_id": employee_id, "leaves_removed": leave_count},
        )
        return int(leave_count)

    def get_employee(self, employee_id: int) -> EmployeeDetail:
        """
        Get an employee with its leave history (newest first).

        Raises:
            EmployeeNotFoundError: If the employee does not exist.
        """
        detail = EmployeeSelector(self.session).get_detail(employee_id)
        if detail is None:
            raise EmployeeNotFoundError(employee_id)
        return detail

    def list_employees(self) -> list[EmployeeInfo]:
        """All employees ordered by name, with usage and leave counts."""
        return EmployeeSelector(self.session).list_all()

    def existing_identities(self) -> set[tuple[str, str]]:
        """Case-folded (name, department) pairs already in the store."""
        return EmployeeSelector(self.session).existing_identities()
