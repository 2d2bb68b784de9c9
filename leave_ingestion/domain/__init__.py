"""Pure roster-import domain: header aliases, row types and validators. ZERO I/O."""

from leave_ingestion.domain.fields import (
    FIELD_ALIASES,
    REQUIRED_FIELDS,
    canonical_field,
    normalize_header,
    resolve_fields,
)
from leave_ingestion.domain.types import (
    BatchValidation,
    ImportResult,
    RowIssue,
    ValidatedRow,
)
from leave_ingestion.domain.validators import validate_row, validate_rows

__all__ = [
    "BatchValidation",
    "FIELD_ALIASES",
    "ImportResult",
    "REQUIRED_FIELDS",
    "RowIssue",
    "ValidatedRow",
    "canonical_field",
    "normalize_header",
    "resolve_fields",
    "validate_row",
    "validate_rows",
]
