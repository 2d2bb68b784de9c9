"""
Employee roster export.

Writes every employee with its balance as a UTF-8 CSV that opens cleanly in
Excel: a byte-order mark, text columns quoted, counts unquoted.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from leave_kernel.selectors.employee_selector import EmployeeInfo

EXPORT_FILENAME = "employees_export.csv"
EXPORT_HEADERS: tuple[str, ...] = (
    "Name",
    "Department",
    "Total Leaves",
    "Available Leaves",
    "Used Leaves",
)


def write_employee_export(employees: Iterable[EmployeeInfo], path: str | Path) -> Path:
    """
    Write ``employees`` to ``path`` in the order given.

    Callers pass EmployeeService.list_employees(), which is ordered by name.

    Returns:
        The path written.
    """
    target = Path(path)
    with target.open("w", encoding="utf-8-sig", newline="") as f:
        # Header stays unquoted; rows quote strings only.
        f.write(",".join(EXPORT_HEADERS) + "\n")
        writer = csv.writer(f, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
        for emp in employees:
            writer.writerow([
                emp.name,
                emp.department or "",
                emp.total_leaves,
                emp.available_leaves,
                emp.used_leaves,
            ])
    return target
