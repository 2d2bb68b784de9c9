"""
CSV source adapter.

Uses csv.DictReader. Configurable: delimiter, encoding, quoting, skip_rows.
Handles BOM via utf-8-sig when encoding is utf-8 (Excel "CSV UTF-8" exports
start with one). Streams rows.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Iterator

from leave_kernel.exceptions import UnreadableSourceError

from leave_ingestion.adapters.base import SourceProbe


_QUOTING = {
    "minimal": csv.QUOTE_MINIMAL,
    "all": csv.QUOTE_ALL,
    "nonnumeric": csv.QUOTE_NONNUMERIC,
    "none": csv.QUOTE_NONE,
}

_SAMPLE_SIZE = 5


def _get_encoding(options: dict[str, Any]) -> str:
    enc = options.get("encoding", "utf-8")
    if enc.lower() in ("utf-8", "utf8"):
        return "utf-8-sig"  # Strip BOM if present
    return enc


def _get_quoting(options: dict[str, Any]) -> int:
    q = options.get("quoting", "minimal")
    if isinstance(q, int):
        return q
    return _QUOTING.get(str(q).lower(), csv.QUOTE_MINIMAL)


def _clean_row(row: dict[Any, Any]) -> dict[str, Any] | None:
    """Drop overflow cells (None key); None for rows with no content."""
    cleaned = {k: ("" if v is None else v) for k, v in row.items() if k is not None}
    if not any(str(v).strip() for v in cleaned.values()):
        return None
    return cleaned


class CsvSourceAdapter:
    """Read CSV files as one dict per row. Streams; does not load entire file."""

    def _rows(self, f: Any, options: dict[str, Any]) -> tuple[tuple[str, ...], Iterator[dict[str, Any]]]:
        for _ in range(int(options.get("skip_rows", 0))):
            next(f, None)
        reader = csv.DictReader(
            f,
            delimiter=options.get("delimiter", ","),
            quoting=_get_quoting(options),
        )
        columns = tuple(reader.fieldnames or ())

        def _iter() -> Iterator[dict[str, Any]]:
            for row in reader:
                cleaned = _clean_row(row)
                if cleaned is not None:
                    yield cleaned

        return columns, _iter()

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        path = Path(source_path)
        try:
            with path.open("r", encoding=_get_encoding(options), newline="") as f:
                _, rows = self._rows(f, options)
                yield from rows
        except (UnicodeDecodeError, LookupError, csv.Error) as exc:
            raise UnreadableSourceError(path.name, str(exc)) from exc

    def probe(self, source_path: Path, options: dict[str, Any]) -> SourceProbe:
        path = Path(source_path)
        encoding = _get_encoding(options)
        sample: list[dict[str, Any]] = []
        count = 0
        try:
            with path.open("r", encoding=encoding, newline="") as f:
                columns, rows = self._rows(f, options)
                for row in rows:
                    if len(sample) < _SAMPLE_SIZE:
                        sample.append(row)
                    count += 1
        except (UnicodeDecodeError, LookupError, csv.Error) as exc:
            raise UnreadableSourceError(path.name, str(exc)) from exc

        return SourceProbe(
            row_count=count,
            columns=columns,
            sample_rows=tuple(sample),
            encoding=encoding,
            detected_delimiter=options.get("delimiter", ","),
        )
