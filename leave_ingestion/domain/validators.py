"""
Validators for roster import rows.

Record-level checks run in a fixed order and the first failure wins:

    1. required fields present and non-blank
    2. both leave counts are whole numbers
    3. both counts non-negative
    4. available_leaves <= total_leaves
    5. (name, department) not already stored and not accepted earlier in
       the same upload (case-insensitive, trimmed)

Row numbers are spreadsheet rows: the header is row 1, so the record at
index i is row i + 2.

Architecture: leave_ingestion/domain. ZERO I/O. The set of identities
already in the store is read by the service layer and passed in.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from leave_kernel.domain.counts import parse_count
from leave_kernel.domain.identity import identity_key

from leave_ingestion.domain.fields import REQUIRED_FIELDS, resolve_fields
from leave_ingestion.domain.types import BatchValidation, RowIssue, ValidatedRow

FIRST_DATA_ROW = 2


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def missing_fields(record: Mapping[str, Any]) -> list[str]:
    """Required canonical fields that are absent or blank."""
    return [f for f in REQUIRED_FIELDS if _is_blank(record.get(f))]


def validate_row(raw: Mapping[str, Any], row_number: int) -> ValidatedRow | RowIssue:
    """
    Apply checks 1-4 to one raw record (any header spelling).

    Returns:
        ValidatedRow on success, RowIssue describing the first failure.
    """
    record = resolve_fields(raw)

    missing = missing_fields(record)
    if missing:
        return RowIssue(row_number, f"Missing required fields: {', '.join(missing)}")

    total = parse_count(record["total_leaves"])
    available = parse_count(record["available_leaves"])
    if total is None or available is None:
        return RowIssue(row_number, "Invalid number format for leave values")

    if total < 0 or available < 0:
        return RowIssue(row_number, "Leave values cannot be negative")

    if available > total:
        return RowIssue(row_number, "Available leaves cannot exceed total leaves")

    return ValidatedRow(
        row_number=row_number,
        name=str(record["name"]).strip(),
        department=str(record["department"]).strip(),
        total_leaves=total,
        available_leaves=available,
    )


def validate_rows(
    records: Sequence[Mapping[str, Any]],
    existing: Iterable[tuple[str, str]] = (),
) -> BatchValidation:
    """
    Validate an upload against itself and the identities already stored.

    Args:
        records: Raw records in file order.
        existing: Case-folded (name, department) pairs already in the store.

    Returns:
        BatchValidation with accepted rows in file order and one issue per
        rejected row.
    """
    seen = set(existing)
    accepted: list[ValidatedRow] = []
    issues: list[RowIssue] = []

    for index, raw in enumerate(records):
        outcome = validate_row(raw, index + FIRST_DATA_ROW)
        if isinstance(outcome, RowIssue):
            issues.append(outcome)
            continue
        key = identity_key(outcome.name, outcome.department)
        if key in seen:
            issues.append(
                RowIssue(
                    outcome.row_number,
                    f"Employee '{outcome.name}' in department "
                    f"'{outcome.department}' already exists",
                    duplicate_of=outcome.label,
                )
            )
            continue
        seen.add(key)
        accepted.append(outcome)

    return BatchValidation(accepted=tuple(accepted), issues=tuple(issues))
