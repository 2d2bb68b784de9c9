"""
Module: leave_kernel.services.leave_ledger_service
Responsibility: The leave ledger.  Records leaves against employees and
    keeps each employee's stored balance in step with the ledger: adding a
    leave debits its days, deleting one restores them.
Architecture position: Kernel > Services.  Uses selectors for reads and
    BalanceSelector for the invariant check.

Invariants enforced:
    - days is computed from the inclusive date range, never accepted from
      callers.
    - A leave is only recorded when days <= available_leaves.
    - Insert + debit (and delete + restore) run in one SAVEPOINT.  The
      balance invariant is verified before the savepoint is released, so a
      failure at any step leaves neither half visible.
    - The employee row is selected FOR UPDATE on backends that support it.

Failure modes:
    - EmployeeNotFoundError / LeaveNotFoundError for unknown ids.
    - ValidationError / InvalidDateRangeError for malformed requests.
    - InsufficientBalanceError when the request exceeds the balance.
    - StorageError (with the driver exception chained) when a flush fails;
      BalanceInvariantError when the stored balance disagrees with the
      ledger.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import select

from leave_kernel.domain.dates import coerce_date, inclusive_days
from leave_kernel.exceptions import (
    EmployeeNotFoundError,
    InsufficientBalanceError,
    LeaveNotFoundError,
    ValidationError,
)
from leave_kernel.logging_config import LogContext, get_logger
from leave_kernel.models.employee import Employee
from leave_kernel.models.leave import Leave, LeaveStatus
from leave_kernel.selectors.balance_selector import BalanceSelector
from leave_kernel.selectors.leave_selector import LeaveInfo, LeaveSelector
from leave_kernel.services.base import STORAGE_FAILURES, BaseService, storage_error

logger = get_logger("services.leave_ledger")


def _clean_status(status: LeaveStatus | str | None) -> str:
    if status is None:
        return LeaveStatus.APPROVED.value
    try:
        return LeaveStatus(status).value
    except ValueError:
        allowed = ", ".join(s.value for s in LeaveStatus)
        raise ValidationError(
            f"Invalid leave status {status!r}; expected one of: {allowed}",
            field="status",
        ) from None


class LeaveLedgerService(BaseService[Leave]):
    """
    Records and removes leaves, keeping balances consistent with the ledger.

    Contract:
        Flushes within the caller's transaction; the caller commits.
        Every returned value is a LeaveInfo DTO.
    """

    def _lock_employee(self, employee_id: int) -> Employee:
        stmt = select(Employee).where(Employee.id == employee_id).with_for_update()
        employee = self.session.execute(stmt).scalar_one_or_none()
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    def add_leave(
        self,
        employee_id: int,
        start_date: date | datetime | str,
        end_date: date | datetime | str,
        reason: str,
        status: LeaveStatus | str | None = None,
    ) -> LeaveInfo:
        """
        Record a leave and debit its days from the employee's balance.

        Args:
            employee_id: Owner of the leave.
            start_date: First day of leave (date, datetime or ISO string).
            end_date: Last day of leave, inclusive.
            reason: Free-text reason. Must be non-blank.
            status: Display status, "approved" by default.

        Returns:
            LeaveInfo for the new record, including the owner's name.

        Raises:
            EmployeeNotFoundError: If the employee does not exist.
            ValidationError: On missing dates or reason, or bad status.
            InvalidDateRangeError: If end_date is before start_date.
            InsufficientBalanceError: If days exceed available_leaves.
            StorageError: If the write fails; nothing is persisted.
        """
        with LogContext.bind(employee_id=employee_id):
            employee = self._lock_employee(employee_id)

            start = coerce_date(start_date, "start_date")
            end = coerce_date(end_date, "end_date")
            days = inclusive_days(start, end)
            if not isinstance(reason, str) or not reason.strip():
                raise ValidationError("Leave reason is required", field="reason")
            clean_status = _clean_status(status)

            if days > employee.available_leaves:
                logger.warning(
                    "leave_rejected_insufficient_balance",
                    extra={
                        "available_leaves": employee.available_leaves,
                        "requested_days": days,
                    },
                )
                raise InsufficientBalanceError(
                    employee_id, employee.available_leaves, days
                )

            try:
                with self.session.begin_nested():
                    leave = Leave(
                        start_date=start,
                        end_date=end,
                        days=days,
                        reason=reason.strip(),
                        status=clean_status,
                        created_at=self._clock.now(),
                    )
                    employee.leaves.append(leave)
                    employee.available_leaves = employee.available_leaves - days
                    self.session.flush()
                    BalanceSelector(self.session).check(employee_id)
            except STORAGE_FAILURES as exc:
                logger.error(
                    "leave_add_failed",
                    extra={"requested_days": days},
                    exc_info=True,
                )
                raise storage_error("add leave", exc) from exc

            logger.info(
                "leave_added",
                extra={
                    "leave_id": leave.id,
                    "days": days,
                    "start_date": start,
                    "end_date": end,
                    "available_leaves": employee.available_leaves,
                },
            )
            return LeaveInfo(
                id=leave.id,
                employee_id=employee.id,
                start_date=leave.start_date,
                end_date=leave.end_date,
                days=leave.days,
                reason=leave.reason,
                status=leave.status,
                created_at=leave.created_at,
                employee_name=employee.name,
                employee_department=employee.department,
            )

    def delete_leave(self, leave_id: int) -> LeaveInfo:
        """
        Delete a leave and restore its days to the owner's balance.

        The restore is unconditional: exactly ``days`` is credited back.

        Returns:
            LeaveInfo of the removed record.

        Raises:
            LeaveNotFoundError: If the leave does not exist.
            StorageError: If the write fails; nothing is changed.
        """
        leave = self.session.get(Leave, leave_id)
        if leave is None:
            raise LeaveNotFoundError(leave_id)
        removed = self.get_leave(leave_id)

        with LogContext.bind(employee_id=leave.employee_id, leave_id=leave_id):
            employee = self._lock_employee(leave.employee_id)
            try:
                with self.session.begin_nested():
                    employee.leaves.remove(leave)
                    employee.available_leaves = employee.available_leaves + leave.days
                    self.session.flush()
                    BalanceSelector(self.session).check(employee.id)
            except STORAGE_FAILURES as exc:
                logger.error("leave_delete_failed", exc_info=True)
                raise storage_error("delete leave", exc) from exc

            logger.info(
                "leave_deleted",
                extra={
                    "days": removed.days,
                    "available_leaves": employee.available_leaves,
                },
            )
        return removed

    def get_leave(self, leave_id: int) -> LeaveInfo:
        """Get a leave by id. Raises LeaveNotFoundError if absent."""
        info = LeaveSelector(self.session).find_by_id(leave_id)
        if info is None:
            raise LeaveNotFoundError(leave_id)
        return info

    def list_all(self) -> list[LeaveInfo]:
        return LeaveSelector(self.session).list_all()

    def list_for_employee(self, employee_id: int) -> list[LeaveInfo]:
        """One employee's leaves, newest first."""
        if self.session.get(Employee, employee_id) is None:
            raise EmployeeNotFoundError(employee_id)
        return LeaveSelector(self.session).list_for_employee(employee_id)
