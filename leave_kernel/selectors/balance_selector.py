"""
Module: leave_kernel.selectors.balance_selector
Responsibility: Read-only verification of the balance invariant.  The leave
    ledger is authoritative; ``available_leaves`` is a stored projection of it
    and must always agree with:

        total_leaves - prior_used_leaves - sum(leaves.days)

Architecture position: Kernel > Selectors.  Used by the write services
    inside their savepoints, and by tests and scripts for whole-store audits.

Failure modes:
    - check() raises BalanceInvariantError when the projection has drifted.
      Because services call it before releasing their savepoint, the
      offending write is rolled back with the error.
"""

from dataclasses import dataclass

from sqlalchemy import func, select

from leave_kernel.exceptions import BalanceInvariantError, EmployeeNotFoundError
from leave_kernel.models.employee import Employee
from leave_kernel.models.leave import Leave
from leave_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class BalanceCheck:
    """Outcome of comparing one employee's stored balance to the ledger."""

    employee_id: int
    total_leaves: int
    prior_used_leaves: int
    ledger_days: int
    available_leaves: int

    @property
    def expected_available(self) -> int:
        return self.total_leaves - self.prior_used_leaves - self.ledger_days

    @property
    def is_consistent(self) -> bool:
        return self.available_leaves == self.expected_available


class BalanceSelector(BaseSelector[Employee]):
    """Compares stored balances against the leave ledger."""

    def ledger_days(self, employee_id: int) -> int:
        """Sum of days over the employee's existing leaves."""
        stmt = select(func.coalesce(func.sum(Leave.days), 0)).where(
            Leave.employee_id == employee_id
        )
        return int(self.session.scalar(stmt) or 0)

    def evaluate(self, employee_id: int) -> BalanceCheck:
        employee = self.session.get(Employee, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return BalanceCheck(
            employee_id=employee.id,
            total_leaves=employee.total_leaves,
            prior_used_leaves=employee.prior_used_leaves,
            ledger_days=self.ledger_days(employee_id),
            available_leaves=employee.available_leaves,
        )

    def check(self, employee_id: int) -> BalanceCheck:
        """
        Verify one employee's balance.

        Raises:
            EmployeeNotFoundError: If the employee does not exist.
            BalanceInvariantError: If the stored balance disagrees with the
                ledger.
        """
        result = self.evaluate(employee_id)
        if not result.is_consistent:
            raise BalanceInvariantError(
                employee_id=employee_id,
                expected=result.expected_available,
                actual=result.available_leaves,
            )
        return result

    def find_violations(self) -> list[BalanceCheck]:
        """Every employee whose stored balance disagrees with the ledger."""
        ledger = (
            select(
                Leave.employee_id.label("employee_id"),
                func.sum(Leave.days).label("days"),
            )
            .group_by(Leave.employee_id)
            .subquery()
        )
        stmt = (
            select(Employee, func.coalesce(ledger.c.days, 0))
            .outerjoin(ledger, ledger.c.employee_id == Employee.id)
            .order_by(Employee.id)
        )
        checks = [
            BalanceCheck(
                employee_id=employee.id,
                total_leaves=employee.total_leaves,
                prior_used_leaves=employee.prior_used_leaves,
                ledger_days=int(days),
                available_leaves=employee.available_leaves,
            )
            for employee, days in self.session.execute(stmt).all()
        ]
        return [c for c in checks if not c.is_consistent]
