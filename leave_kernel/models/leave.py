"""
Module: leave_kernel.models.leave
Responsibility: ORM persistence for leave records.  Each row is a debit of
    ``days`` against the owning employee's balance.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - days > 0 and end_date >= start_date (check constraints).
    - days is always derived from the inclusive date range by the ledger
      service; it is never accepted from callers.
    - employee_id references exactly one Employee; ON DELETE CASCADE.
"""

from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leave_kernel.db.base import TrackedBase

if TYPE_CHECKING:
    from leave_kernel.models.employee import Employee


class LeaveStatus(str, Enum):
    """
    Display status of a leave record.

    Cosmetic only: there is no approval workflow and a leave consumes
    balance from the moment it exists, whatever its status.
    """

    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"


class Leave(TrackedBase):
    """A single leave taken by an employee over an inclusive date range."""

    __tablename__ = "leaves"

    __table_args__ = (
        CheckConstraint("days > 0", name="ck_leave_days_positive"),
        CheckConstraint("end_date >= start_date", name="ck_leave_range_ordered"),
        Index("idx_leave_employee", "employee_id"),
        Index("idx_leave_created_at", "created_at"),
    )

    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
    )

    start_date: Mapped[date] = mapped_column(nullable=False)
    end_date: Mapped[date] = mapped_column(nullable=False)

    days: Mapped[int] = mapped_column(nullable=False)

    reason: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=LeaveStatus.APPROVED.value,
    )

    employee: Mapped["Employee"] = relationship(back_populates="leaves")

    def __repr__(self) -> str:
        return (
            f"<Leave {self.id} employee={self.employee_id} "
            f"{self.start_date}..{self.end_date} ({self.days}d)>"
        )
