"""
Sample data for demos and local development.

Four employees and six leaves, written through EmployeeService and
LeaveLedgerService so every seeded balance satisfies the ledger invariant.
Seeding only happens against an empty store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy.orm import Session

from leave_kernel.domain.clock import Clock
from leave_kernel.logging_config import get_logger
from leave_kernel.selectors.employee_selector import EmployeeSelector
from leave_kernel.services.employee_service import EmployeeService
from leave_kernel.services.leave_ledger_service import LeaveLedgerService

logger = get_logger("services.seed")

SAMPLE_EMPLOYEES: tuple[tuple[str, str, int], ...] = (
    ("John Doe", "IT", 25),
    ("Jane Smith", "HR", 30),
    ("Mike Johnson", "Finance", 25),
    ("Sarah Wilson", "Marketing", 28),
)

# (employee index into SAMPLE_EMPLOYEES, start, end, reason)
SAMPLE_LEAVES: tuple[tuple[int, date, date, str], ...] = (
    (0, date(2024, 1, 15), date(2024, 1, 17), "Personal"),
    (0, date(2024, 2, 20), date(2024, 2, 21), "Medical"),
    (1, date(2024, 1, 10), date(2024, 1, 14), "Vacation"),
    (1, date(2024, 3, 5), date(2024, 3, 7), "Personal"),
    (3, date(2024, 2, 1), date(2024, 2, 10), "Vacation"),
    (3, date(2024, 3, 15), date(2024, 3, 17), "Medical"),
)


@dataclass(frozen=True)
class SeedResult:
    employees_created: int
    leaves_created: int

    @property
    def seeded(self) -> bool:
        return self.employees_created > 0


def seed_sample_data(session: Session, clock: Clock | None = None) -> SeedResult:
    """
    Insert the sample employees and leaves if the store has no employees.

    Flushes only; the caller commits.
    """
    if EmployeeSelector(session).count() > 0:
        logger.info("seed_skipped_store_not_empty")
        return SeedResult(employees_created=0, leaves_created=0)

    employees = EmployeeService(session, clock=clock)
    ledger = LeaveLedgerService(session, clock=clock)

    ids = [
        employees.create_employee(name, total, department=department).id
        for name, department, total in SAMPLE_EMPLOYEES
    ]
    for index, start, end, reason in SAMPLE_LEAVES:
        ledger.add_leave(ids[index], start, end, reason)

    result = SeedResult(
        employees_created=len(ids), leaves_created=len(SAMPLE_LEAVES)
    )
    logger.info(
        "seed_completed",
        extra={
            "employees_created": result.employees_created,
            "leaves_created": result.leaves_created,
        },
    )
    return result
