"""
Header alias table for roster imports.

Spreadsheets arrive with every spelling of the same column: ``total_leaves``,
``Total Leaves``, ``TOTAL-LEAVES``. Headers are normalized (trimmed,
lower-cased, runs of ``_``, ``-`` and whitespace collapsed to one space)
and looked up in FIELD_ALIASES, which maps each canonical field to the
normalized spellings it accepts.

Architecture: leave_ingestion/domain. ZERO I/O.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Mapping

REQUIRED_FIELDS: tuple[str, ...] = (
    "name",
    "department",
    "total_leaves",
    "available_leaves",
)

FIELD_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "name": ("name", "employee name", "employee", "full name"),
    "department": ("department", "dept", "department name"),
    "total_leaves": (
        "total leaves",
        "total leave",
        "total",
        "leave entitlement",
        "entitlement",
    ),
    "available_leaves": (
        "available leaves",
        "available leave",
        "available",
        "leave balance",
        "balance",
    ),
})

_SEPARATORS = re.compile(r"[\s_\-]+")

_ALIAS_TO_FIELD: dict[str, str] = {
    alias: canonical
    for canonical, aliases in FIELD_ALIASES.items()
    for alias in aliases
}


def normalize_header(header: Any) -> str:
    """Normalize a header cell for alias lookup."""
    if header is None:
        return ""
    return _SEPARATORS.sub(" ", str(header).strip().lower()).strip()


def canonical_field(header: Any) -> str | None:
    """Canonical field name for a header, or None if it maps to nothing."""
    return _ALIAS_TO_FIELD.get(normalize_header(header))


def resolve_fields(record: Mapping[str, Any]) -> dict[str, Any]:
    """
    Re-key a raw record by canonical field name.

    Unrecognized columns are dropped. When two headers resolve to the same
    field, the first non-blank value in column order wins.
    """
    resolved: dict[str, Any] = {}
    for header, value in record.items():
        field = canonical_field(header)
        if field is None:
            continue
        if field not in resolved or _is_blank(resolved[field]):
            resolved[field] = value
    return resolved


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
