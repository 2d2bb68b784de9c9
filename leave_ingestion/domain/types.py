"""
leave_ingestion.domain.types -- Pure frozen dataclasses for roster imports.

ZERO I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from leave_kernel.domain.identity import identity_key


@dataclass(frozen=True)
class RowIssue:
    """A row rejected during validation. ``row_number`` is the spreadsheet row."""

    row_number: int
    message: str
    duplicate_of: str | None = None  # "Name (Department)" for duplicate rejects

    def __str__(self) -> str:
        return f"Row {self.row_number}: {self.message}"


@dataclass(frozen=True)
class ValidatedRow:
    """A row that passed every per-row check, ready to write."""

    row_number: int
    name: str
    department: str
    total_leaves: int
    available_leaves: int

    @property
    def identity(self) -> tuple[str, str]:
        return identity_key(self.name, self.department)

    @property
    def label(self) -> str:
        return f"{self.name} ({self.department})"


@dataclass(frozen=True)
class BatchValidation:
    """Outcome of validating a whole upload against the store."""

    accepted: tuple[ValidatedRow, ...] = ()
    issues: tuple[RowIssue, ...] = ()

    @property
    def duplicates(self) -> tuple[str, ...]:
        return tuple(i.duplicate_of for i in self.issues if i.duplicate_of)


@dataclass(frozen=True)
class ImportResult:
    """
    Summary of one import.

    ``skipped`` counts rows rejected by validation (including duplicates);
    ``failed`` counts valid rows lost to a rolled-back write batch.
    ``duplicates`` is None when no row was rejected as a duplicate.
    """

    imported: int = 0
    skipped: int = 0
    errors: tuple[str, ...] = ()
    duplicates: tuple[str, ...] | None = None
    failed: int = 0
    employee_ids: tuple[int, ...] = field(default=(), compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "imported": self.imported,
            "skipped": self.skipped,
            "errors": list(self.errors),
            "duplicates": list(self.duplicates) if self.duplicates is not None else None,
            "failed": self.failed,
        }
