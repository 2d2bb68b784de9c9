"""Import services (DB-backed)."""

from leave_ingestion.services.import_service import EmployeeImportService

__all__ = ["EmployeeImportService"]
