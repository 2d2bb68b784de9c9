"""
Typed exception hierarchy for the leave kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (an HTTP layer, the CLI scripts, tests) must be able to tell a bad
request from a missing record from a storage failure without parsing
message text. Every exception therefore has:

  1. a TYPED class (catch by type, not message)
  2. a CODE class attribute (machine-readable, API-safe)
  3. an HTTP_STATUS class attribute (how the HTTP layer should surface it)
  4. structured attributes carrying the data behind the message

Example:
    try:
        ledger.add_leave(employee_id, start, end, "Vacation")
    except InsufficientBalanceError as e:
        return {"error": e.code, "available": e.available, "requested": e.requested}, e.http_status

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LeaveKernelError (base)
    |
    +-- ValidationError                     400
    |   +-- InvalidDateRangeError
    |   +-- EntitlementBelowUsageError
    |   +-- SourceFileError
    |       +-- UnsupportedSourceError
    |       +-- EmptySourceError
    |       +-- UnreadableSourceError
    |
    +-- NotFoundError                       404
    |   +-- EmployeeNotFoundError
    |   +-- LeaveNotFoundError
    |
    +-- InsufficientBalanceError            400
    |
    +-- StorageError                        500
        +-- BalanceInvariantError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                        | When Raised
----------------------------|------------------------------------------------
VALIDATION_ERROR            | Missing/malformed input (empty name, bad number)
INVALID_DATE_RANGE          | Leave end date before start date
ENTITLEMENT_BELOW_USAGE     | Entitlement edit below days already used
UNSUPPORTED_SOURCE          | Import file extension has no adapter
EMPTY_SOURCE                | Import file contains no data rows
UNREADABLE_SOURCE           | Import file cannot be decoded, or sheet missing
EMPLOYEE_NOT_FOUND          | Employee id does not exist
LEAVE_NOT_FOUND             | Leave id does not exist
INSUFFICIENT_BALANCE        | Requested days exceed available balance
STORAGE_ERROR               | Persistence layer failed (flush/constraint)
BALANCE_INVARIANT_VIOLATED  | Balance disagrees with the ledger after a write
"""


class LeaveKernelError(Exception):
    """
    Base exception for all leave kernel errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    identification and an ``http_status`` for the HTTP layer.
    """

    code: str = "LEAVE_KERNEL_ERROR"
    http_status: int = 500


# Validation


class ValidationError(LeaveKernelError):
    """Malformed or missing required input. Never retried automatically."""

    code: str = "VALIDATION_ERROR"
    http_status: int = 400

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class InvalidDateRangeError(ValidationError):
    """Leave end date falls before its start date."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, start_date: str, end_date: str):
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"Invalid date range: end date {end_date} is before start date {start_date}",
            field="end_date",
        )


class EntitlementBelowUsageError(ValidationError):
    """
    Entitlement edit would drop below the days already used.

    Raised instead of letting ``available_leaves`` go negative.
    """

    code: str = "ENTITLEMENT_BELOW_USAGE"

    def __init__(self, employee_id: int, total_leaves: int, used_leaves: int):
        self.employee_id = employee_id
        self.total_leaves = total_leaves
        self.used_leaves = used_leaves
        super().__init__(
            f"Total leaves ({total_leaves}) cannot be less than leaves already "
            f"used ({used_leaves}) for employee {employee_id}",
            field="total_leaves",
        )


class SourceFileError(ValidationError):
    """Base exception for import source files that cannot be processed."""

    code: str = "SOURCE_FILE_ERROR"

    def __init__(self, message: str, source_filename: str):
        self.source_filename = source_filename
        super().__init__(message)


class UnsupportedSourceError(SourceFileError):
    """Import file type has no source adapter."""

    code: str = "UNSUPPORTED_SOURCE"

    def __init__(self, source_filename: str, supported: tuple[str, ...]):
        self.supported = supported
        super().__init__(
            f"Unsupported file type for {source_filename}; "
            f"only {', '.join(supported)} files are allowed",
            source_filename,
        )


class EmptySourceError(SourceFileError):
    """Import file has a header but no data rows."""

    code: str = "EMPTY_SOURCE"

    def __init__(self, source_filename: str):
        super().__init__(
            f"No employee data found in {source_filename}", source_filename
        )


class UnreadableSourceError(SourceFileError):
    """
    Import file cannot be decoded (wrong text encoding, damaged workbook)
    or names a sheet the workbook does not have.
    """

    code: str = "UNREADABLE_SOURCE"

    def __init__(self, source_filename: str, reason: str):
        self.reason = reason
        super().__init__(f"Could not read {source_filename}: {reason}", source_filename)


# Not found


class NotFoundError(LeaveKernelError):
    """Base exception for references to records that do not exist."""

    code: str = "NOT_FOUND"
    http_status: int = 404


class EmployeeNotFoundError(NotFoundError):
    """Employee with given ID was not found."""

    code: str = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f"Employee not found: {employee_id}")


class LeaveNotFoundError(NotFoundError):
    """Leave with given ID was not found."""

    code: str = "LEAVE_NOT_FOUND"

    def __init__(self, leave_id: int):
        self.leave_id = leave_id
        super().__init__(f"Leave not found: {leave_id}")


# Balance


class InsufficientBalanceError(LeaveKernelError):
    """Requested leave days exceed the employee's available balance."""

    code: str = "INSUFFICIENT_BALANCE"
    http_status: int = 400

    def __init__(self, employee_id: int, available: int, requested: int):
        self.employee_id = employee_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient leave balance. Available: {available}, Requested: {requested}"
        )


# Storage


class StorageError(LeaveKernelError):
    """The persistence layer failed (connectivity, constraint violation)."""

    code: str = "STORAGE_ERROR"
    http_status: int = 500

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Storage failure during {operation}: {reason}")


class BalanceInvariantError(StorageError):
    """
    Stored balance disagrees with the ledger.

    available_leaves must equal total_leaves - prior_used_leaves - sum(days).
    Raised inside the write's savepoint, so the offending write is rolled back.
    """

    code: str = "BALANCE_INVARIANT_VIOLATED"

    def __init__(self, employee_id: int, expected: int, actual: int):
        self.employee_id = employee_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            "balance check",
            f"employee {employee_id} has available_leaves={actual}, "
            f"ledger implies {expected}",
        )
