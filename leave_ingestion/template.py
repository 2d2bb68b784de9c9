"""
Downloadable roster template.

Writes the four importable columns and two example rows, as an .xlsx
workbook (sheet "Employee Template") or a .csv file depending on the
target extension.
"""

from __future__ import annotations

import csv
from pathlib import Path

import openpyxl

from leave_kernel.exceptions import UnsupportedSourceError

TEMPLATE_SHEET = "Employee Template"
TEMPLATE_HEADERS: tuple[str, ...] = (
    "name",
    "department",
    "total_leaves",
    "available_leaves",
)
TEMPLATE_ROWS: tuple[tuple[str, str, int, int], ...] = (
    ("John Doe", "IT", 25, 25),
    ("Jane Smith", "HR", 30, 30),
)


def write_template(path: str | Path) -> Path:
    """
    Write the import template to ``path``.

    Returns:
        The path written.

    Raises:
        UnsupportedSourceError: If the extension is neither .xlsx nor .csv.
    """
    target = Path(path)
    suffix = target.suffix.lower()
    if suffix == ".xlsx":
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = TEMPLATE_SHEET
        ws.append(list(TEMPLATE_HEADERS))
        for row in TEMPLATE_ROWS:
            ws.append(list(row))
        wb.save(target)
    elif suffix == ".csv":
        with target.open("w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(TEMPLATE_HEADERS)
            writer.writerows(TEMPLATE_ROWS)
    else:
        raise UnsupportedSourceError(target.name, (".xlsx", ".csv"))
    return target
