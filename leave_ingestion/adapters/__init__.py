"""Source adapters for roster imports (file I/O only, no DB)."""

from leave_ingestion.adapters.base import SourceAdapter, SourceProbe
from leave_ingestion.adapters.csv_adapter import CsvSourceAdapter
from leave_ingestion.adapters.registry import SUPPORTED_EXTENSIONS, adapter_for
from leave_ingestion.adapters.xlsx_adapter import XlsxSourceAdapter

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "SourceAdapter",
    "SourceProbe",
    "CsvSourceAdapter",
    "XlsxSourceAdapter",
    "adapter_for",
]
