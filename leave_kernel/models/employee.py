"""
Module: leave_kernel.models.employee
Responsibility: ORM persistence for employees and their leave-balance
    counters (entitlement and balance).
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - total_leaves >= 0 and available_leaves >= 0 (check constraints).
    - available_leaves <= total_leaves (check constraint).
    - Balance invariant (enforced by the services, verified by
      BalanceSelector):
          available_leaves == total_leaves - prior_used_leaves - sum(leaves.days)
    - Deleting an Employee deletes all of its Leave rows (ORM cascade plus
      ON DELETE CASCADE on the foreign key).

Failure modes:
    - IntegrityError on a negative counter or balance above entitlement.
"""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leave_kernel.db.base import TrackedBase

if TYPE_CHECKING:
    from leave_kernel.models.leave import Leave

DEFAULT_DEPARTMENT = "Not Specified"


class Employee(TrackedBase):
    """
    A person holding an annual leave entitlement.

    Contract:
        ``total_leaves`` is the entitlement and ``available_leaves`` the
        balance left after debits.  ``prior_used_leaves`` records days
        consumed before the ledger tracked this employee (bulk import with an
        explicit balance); it is zero for employees added by hand.
    """

    __tablename__ = "employees"

    __table_args__ = (
        CheckConstraint("total_leaves >= 0", name="ck_employee_total_non_negative"),
        CheckConstraint("available_leaves >= 0", name="ck_employee_available_non_negative"),
        CheckConstraint("available_leaves <= total_leaves", name="ck_employee_available_within_total"),
        CheckConstraint("prior_used_leaves >= 0", name="ck_employee_prior_used_non_negative"),
        Index("idx_employee_name", "name"),
        Index("idx_employee_department", "department"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    department: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default=DEFAULT_DEPARTMENT,
    )

    # Entitlement
    total_leaves: Mapped[int] = mapped_column(nullable=False)

    # Balance
    available_leaves: Mapped[int] = mapped_column(nullable=False)

    prior_used_leaves: Mapped[int] = mapped_column(nullable=False, default=0)

    leaves: Mapped[list["Leave"]] = relationship(
        back_populates="employee",
        cascade="all, delete-orphan",
        order_by="Leave.id",
    )

    @property
    def used_leaves(self) -> int:
        """Days consumed out of the entitlement."""
        return self.total_leaves - self.available_leaves

    def __repr__(self) -> str:
        return (
            f"<Employee {self.id} {self.name!r} "
            f"{self.available_leaves}/{self.total_leaves}>"
        )
