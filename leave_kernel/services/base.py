"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every write service in the kernel.  Concrete services receive a
    SQLAlchemy ``Session`` and persist via ``session.flush()`` -- never
    ``session.commit()``.

Architecture position:
    Kernel > Services.  Every service in ``leave_kernel/services/`` that
    performs write operations extends this class.

Invariants enforced:
    - Transaction boundaries: services flush within the caller's
      transaction (or a savepoint nested in it) and never commit.  The
      caller (``session_scope()``, a script, or a test) owns commit and
      rollback.
    - Driver and constraint failures surface as ``StorageError`` with the
      original exception chained.  pysqlite raises a bare ``OverflowError``
      for integers wider than 64 bits instead of a DBAPI error, so it is
      treated as a storage failure too.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leave_kernel.db.base import Base
from leave_kernel.domain.clock import Clock, SystemClock
from leave_kernel.exceptions import StorageError

ModelType = TypeVar("ModelType", bound=Base)

STORAGE_FAILURES: tuple[type[Exception], ...] = (SQLAlchemyError, OverflowError)


def storage_error(operation: str, exc: Exception) -> StorageError:
    """StorageError for a failed write, with the driver message as reason."""
    return StorageError(operation, str(getattr(exc, "orig", None) or exc))


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for all kernel services.

    Contract:
        Accepts a SQLAlchemy ``Session`` from the caller and uses
        ``session.flush()`` to persist changes within the active
        transaction.  An optional ``Clock`` supplies record timestamps.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
        - Does NOT provide query-only methods -- those belong in
          ``leave_kernel/selectors/``.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        """
        Initialize the service.

        Args:
            session: SQLAlchemy session for database operations.
            clock: Time source for created_at stamps. Defaults to
                SystemClock.
        """
        self.session = session
        self._clock = clock or SystemClock()

    def _flush(self, operation: str) -> None:
        """Flush pending changes, wrapping driver failures as StorageError."""
        try:
            self.session.flush()
        except STORAGE_FAILURES as exc:
            raise storage_error(operation, exc) from exc
