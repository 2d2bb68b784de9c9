"""
Kernel Invariants Contract.

These invariants are structural law for the leave kernel. This module only
declares them; enforcement is distributed across the services, the
BalanceSelector check run inside every balance-changing savepoint, and the
database check/foreign-key constraints.
"""

from enum import Enum, unique


@unique
class LeaveInvariant(str, Enum):
    """Non-configurable invariants enforced by the kernel."""

    BALANCE_MATCHES_LEDGER = "balance_matches_ledger"
    """available_leaves == total_leaves - prior_used_leaves - sum(days).
    Checked by LeaveLedgerService and EmployeeService before each
    balance-changing savepoint is released."""

    BALANCE_NON_NEGATIVE = "balance_non_negative"
    """available_leaves never drops below zero. Enforced by the
    insufficient-balance check, the entitlement-edit policy and a DB
    check constraint."""

    DAYS_FROM_RANGE = "days_from_range"
    """A leave's days is the inclusive day count of its date range and is
    never supplied by callers. Enforced by LeaveLedgerService."""

    ATOMIC_DEBIT = "atomic_debit"
    """Inserting a leave and debiting the balance happen in one savepoint;
    neither is visible without the other."""

    CASCADE_DELETE = "cascade_delete"
    """Deleting an employee deletes all of its leaves. Enforced by the ORM
    cascade and ON DELETE CASCADE."""


ALL_LEAVE_INVARIANTS: frozenset[LeaveInvariant] = frozenset(LeaveInvariant)


FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = ("leave_ingestion", "scripts")
"""Packages leave_kernel must never import; the kernel does not depend upward."""
