"""
XLSX source adapter for employee roster spreadsheets.

The header row supplies the column names, kept verbatim (only surrounding
whitespace is trimmed) so the field alias table can resolve them later.

source_options:
  sheet: 0-based sheet index (int) or sheet name (str). Default: first sheet.
  skip_rows: rows to skip at the top of the sheet before the header. Default: 0.

Cell values are normalized: strings stripped, empty cells become "", and
integral floats (Excel stores every number as a float) become ints.
"""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Any, Iterator

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from leave_kernel.exceptions import UnreadableSourceError

from leave_ingestion.adapters.base import SourceProbe

_SAMPLE_SIZE = 5


def _cell_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return value.strip()
    return value


def _headers(header_row: tuple[Any, ...]) -> list[str]:
    headers: list[str] = []
    for c, value in enumerate(header_row):
        key = str(_cell_value(value)) or f"Column_{c + 1}"
        # Dedupe duplicate headers
        base = key
        cnt = 0
        while key in headers:
            cnt += 1
            key = f"{base}_{cnt}"
        headers.append(key)
    # Trailing unnamed columns carry no data we can map.
    while headers and headers[-1].startswith("Column_"):
        headers.pop()
    return headers


def _load_workbook(path: Path) -> Any:
    try:
        return openpyxl.load_workbook(path, read_only=True, data_only=True)
    except (zipfile.BadZipFile, InvalidFileException, KeyError) as exc:
        # KeyError: a zip archive without the workbook parts.
        raise UnreadableSourceError(path.name, f"not a valid .xlsx workbook ({exc})") from exc


class XlsxSourceAdapter:
    """Read .xlsx files as one dict per non-blank row below the header."""

    def _get_sheet(self, wb: Any, path: Path, options: dict[str, Any]) -> Any:
        sheet_ref = options.get("sheet")
        try:
            if sheet_ref is None:
                return wb.worksheets[0]
            if isinstance(sheet_ref, int):
                return wb.worksheets[sheet_ref]
            return wb[sheet_ref]
        except (IndexError, KeyError) as exc:
            raise UnreadableSourceError(
                path.name,
                f"worksheet {sheet_ref!r} not found; available: {', '.join(wb.sheetnames)}",
            ) from exc

    def _iter_records(self, sheet: Any, options: dict[str, Any]) -> tuple[list[str], Iterator[dict[str, Any]]]:
        skip_rows = int(options.get("skip_rows", 0))
        rows = sheet.iter_rows(min_row=1 + skip_rows, values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            return [], iter(())
        headers = _headers(header_row)

        def _records() -> Iterator[dict[str, Any]]:
            for row in rows:
                vals = [_cell_value(v) for v in row[: len(headers)]]
                vals += [""] * (len(headers) - len(vals))
                if not any(v != "" for v in vals):
                    continue
                yield dict(zip(headers, vals))

        return headers, _records()

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        path = Path(source_path)
        wb = _load_workbook(path)
        try:
            _, records = self._iter_records(self._get_sheet(wb, path, options), options)
            yield from records
        finally:
            wb.close()

    def probe(self, source_path: Path, options: dict[str, Any]) -> SourceProbe:
        path = Path(source_path)
        wb = _load_workbook(path)
        try:
            headers, records = self._iter_records(self._get_sheet(wb, path, options), options)
            sample: list[dict[str, Any]] = []
            count = 0
            for record in records:
                if len(sample) < _SAMPLE_SIZE:
                    sample.append(record)
                count += 1
            return SourceProbe(
                row_count=count,
                columns=tuple(headers),
                sample_rows=tuple(sample),
                encoding=None,
                detected_delimiter=None,
            )
        finally:
            wb.close()
