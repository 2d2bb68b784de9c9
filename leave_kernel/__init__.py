"""
Leave Kernel

The balance-bookkeeping core of the HR leave system:
- Employee store with entitlement and balance counters
- Leave ledger (each leave is a debit against its employee's balance)
- Balance invariant enforced at every mutation site
- Read-only dashboard aggregates
"""

__version__ = "0.1.0"
