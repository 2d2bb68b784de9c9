"""
Extension-based adapter lookup.

Only .csv and .xlsx files are importable. Legacy .xls workbooks are
rejected: openpyxl cannot read them.
"""

from __future__ import annotations

from pathlib import Path

from leave_kernel.exceptions import UnsupportedSourceError

from leave_ingestion.adapters.base import SourceAdapter
from leave_ingestion.adapters.csv_adapter import CsvSourceAdapter
from leave_ingestion.adapters.xlsx_adapter import XlsxSourceAdapter

_ADAPTERS: dict[str, type] = {
    ".csv": CsvSourceAdapter,
    ".xlsx": XlsxSourceAdapter,
}

SUPPORTED_EXTENSIONS: tuple[str, ...] = tuple(_ADAPTERS)


def adapter_for(source_path: str | Path) -> SourceAdapter:
    """
    Return the adapter for a file, chosen by its extension.

    Raises:
        UnsupportedSourceError: For any extension other than .csv or .xlsx.
    """
    path = Path(source_path)
    adapter_cls = _ADAPTERS.get(path.suffix.lower())
    if adapter_cls is None:
        raise UnsupportedSourceError(path.name, SUPPORTED_EXTENSIONS)
    return adapter_cls()
