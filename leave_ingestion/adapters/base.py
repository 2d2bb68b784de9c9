"""
Source adapter protocol and probe DTO.

Contract:
    SourceAdapter.read() yields one dict per source record (streaming),
    keyed by the header text exactly as it appears in the file.
    SourceAdapter.probe() returns a quick snapshot: row count, columns, sample rows.

Architecture: leave_ingestion/adapters. File I/O only, no DB or kernel imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Protocol, runtime_checkable


@runtime_checkable
class SourceAdapter(Protocol):
    """Protocol for reading employee roster files into record dicts."""

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """Yield one dict per data row. Blank rows are skipped."""
        ...

    def probe(self, source_path: Path, options: dict[str, Any]) -> "SourceProbe":
        """Quick probe: row count, detected columns, sample rows."""
        ...


@dataclass(frozen=True)
class SourceProbe:
    """Result of probing a source file (row count, columns, first N rows)."""

    row_count: int
    columns: tuple[str, ...]
    sample_rows: tuple[dict[str, Any], ...]  # First 5 rows; do not mutate
    encoding: str | None = None
    detected_delimiter: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "row_count": self.row_count,
            "columns": list(self.columns),
            "sample_rows": [dict(r) for r in self.sample_rows],
            "encoding": self.encoding,
            "detected_delimiter": self.detected_delimiter,
        }
