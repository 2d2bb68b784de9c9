"""
Import service: read -> validate -> write employee rosters.

Orchestrates source adapters, the header alias table and the row
validators, then writes accepted rows through EmployeeService in fixed-size
batches. Each batch runs in its own SAVEPOINT: a failing batch is rolled
back as a unit and reported, and later batches still run.

Uses structured logging (LogContext, get_logger("ingestion.*")).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence
from uuid import uuid4

from sqlalchemy.orm import Session

from leave_kernel.config import DEFAULT_IMPORT_BATCH_SIZE
from leave_kernel.domain.clock import Clock
from leave_kernel.exceptions import EmptySourceError, StorageError
from leave_kernel.logging_config import LogContext, get_logger
from leave_kernel.models.employee import DEFAULT_DEPARTMENT
from leave_kernel.services.base import STORAGE_FAILURES
from leave_kernel.services.employee_service import EmployeeService

from leave_ingestion.adapters.base import SourceProbe
from leave_ingestion.adapters.registry import adapter_for
from leave_ingestion.domain.types import ImportResult, ValidatedRow
from leave_ingestion.domain.validators import validate_rows

logger = get_logger("ingestion.import_service")


def _chunks(rows: Sequence[ValidatedRow], size: int) -> Iterator[tuple[ValidatedRow, ...]]:
    for start in range(0, len(rows), size):
        yield tuple(rows[start : start + size])


class EmployeeImportService:
    """
    Bulk-import employees from parsed rows or from a CSV/XLSX file.

    Flushes within the caller's transaction; the caller commits.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        batch_size: int = DEFAULT_IMPORT_BATCH_SIZE,
        default_department: str = DEFAULT_DEPARTMENT,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.session = session
        self.batch_size = batch_size
        self._employees = EmployeeService(
            session, clock=clock, default_department=default_department
        )

    def probe_file(self, source_path: str | Path, options: dict[str, Any] | None = None) -> SourceProbe:
        """Row count, columns and sample rows of a roster file, without importing."""
        path = Path(source_path)
        return adapter_for(path).probe(path, options or {})

    def import_file(
        self,
        source_path: str | Path,
        options: dict[str, Any] | None = None,
    ) -> ImportResult:
        """
        Import a .csv or .xlsx roster.

        Raises:
            UnsupportedSourceError: For any other file type.
            EmptySourceError: If the file has no data rows.
            UnreadableSourceError: If the file cannot be decoded.
        """
        path = Path(source_path)
        adapter = adapter_for(path)
        records = list(adapter.read(path, options or {}))
        if not records:
            raise EmptySourceError(path.name)
        return self.import_rows(records, source_filename=path.name)

    def import_rows(
        self,
        records: Sequence[Mapping[str, Any]],
        source_filename: str | None = None,
    ) -> ImportResult:
        """
        Validate and write parsed roster rows.

        Args:
            records: Raw rows in file order, keyed by any header spelling.
            source_filename: For logging only.

        Returns:
            ImportResult with counts, row-level errors and duplicates.
        """
        import_id = uuid4().hex
        with LogContext.bind(correlation_id=import_id):
            logger.info(
                "import_started",
                extra={"source_filename": source_filename, "row_count": len(records)},
            )

            validation = validate_rows(records, self._employees.existing_identities())
            errors = [str(issue) for issue in validation.issues]
            for issue in validation.issues:
                logger.debug(
                    "import_row_rejected",
                    extra={"row_number": issue.row_number, "reason": issue.message},
                )

            imported = 0
            failed = 0
            employee_ids: list[int] = []
            for number, chunk in enumerate(_chunks(validation.accepted, self.batch_size), start=1):
                with LogContext.bind(batch_id=f"{import_id}-{number}"):
                    try:
                        ids = self._write_batch(chunk)
                    except (StorageError, *STORAGE_FAILURES) as exc:
                        reason = exc.reason if isinstance(exc, StorageError) else str(exc)
                        first, last = chunk[0].row_number, chunk[-1].row_number
                        errors.append(f"Database error (rows {first}-{last}): {reason}")
                        failed += len(chunk)
                        logger.error(
                            "import_batch_failed",
                            extra={"first_row": first, "last_row": last, "reason": reason},
                        )
                        continue
                    imported += len(ids)
                    employee_ids.extend(ids)
                    logger.info("import_batch_written", extra={"rows_written": len(ids)})

            duplicates = validation.duplicates
            result = ImportResult(
                imported=imported,
                skipped=len(validation.issues),
                errors=tuple(errors),
                duplicates=duplicates or None,
                failed=failed,
                employee_ids=tuple(employee_ids),
            )
            logger.info(
                "import_completed",
                extra={
                    "imported": result.imported,
                    "skipped": result.skipped,
                    "failed": result.failed,
                    "duplicate_count": len(duplicates),
                },
            )
            return result

    def _write_batch(self, chunk: Sequence[ValidatedRow]) -> list[int]:
        ids: list[int] = []
        with self.session.begin_nested():
            for row in chunk:
                info = self._employees.create_employee(
                    name=row.name,
                    total_leaves=row.total_leaves,
                    department=row.department,
                    available_leaves=row.available_leaves,
                )
                ids.append(info.id)
        return ids
