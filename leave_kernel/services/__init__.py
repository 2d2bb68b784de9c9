"""Write services for the leave kernel."""

from leave_kernel.services.base import BaseService
from leave_kernel.services.employee_service import EmployeeService
from leave_kernel.services.leave_ledger_service import LeaveLedgerService
from leave_kernel.services.seed import SeedResult, seed_sample_data

__all__ = [
    "BaseService",
    "EmployeeService",
    "LeaveLedgerService",
    "SeedResult",
    "seed_sample_data",
]
