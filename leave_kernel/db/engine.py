"""
Module: leave_kernel.db.engine
Responsibility: SQLAlchemy engine initialization, session factory management,
    and transactional scope utilities.  Single point of database connection
    configuration for the kernel, the import pipeline and the scripts.
Architecture position: Kernel > DB.  May import from db/base.py and the
    logging config.  create_tables/drop_tables import the models package so
    Base.metadata knows every table.

Invariants enforced:
    - SQLite connections run with PRAGMA foreign_keys=ON, so Leave rows can
      never outlive their Employee.
    - SQLite connections use SQLAlchemy's pysqlite recipe (driver autocommit
      off, explicit BEGIN) so SAVEPOINTs behave; the leave ledger relies on
      them for its insert-then-debit unit of work.
    - PostgreSQL engines use a QueuePool with pre-ping and READ COMMITTED.

Failure modes:
    - RuntimeError if get_engine or get_session is called
      before init_engine_from_url().
"""

import atexit
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from leave_kernel.logging_config import configure_logging, get_logger

logger = get_logger("db.engine")

# Module-level engine and session factory
_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def _install_sqlite_listeners(engine: Engine) -> None:
    """Enable FK enforcement and working SAVEPOINTs on pysqlite connections."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy, not pysqlite, decide when transactions begin.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Create an engine for ``database_url`` without touching module state.

    SQLite URLs (file or in-memory) get the SQLite listeners and the
    dialect's default pool; everything else gets a QueuePool.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        engine = create_engine(url, echo=echo)
        _install_sqlite_listeners(engine)
        return engine

    kwargs: dict[str, Any] = {
        "echo": echo,
        "poolclass": QueuePool,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "pool_timeout": pool_timeout,
        "pool_recycle": pool_recycle,
    }
    if url.get_backend_name() == "postgresql":
        kwargs["isolation_level"] = "READ COMMITTED"
    return create_engine(url, **kwargs)


def init_engine_from_url(database_url: str, echo: bool = False, **pool_options: int) -> Engine:
    """
    Initialize the module-level engine and session factory.

    A second call replaces the first.  All subsequent get_engine/get_session
    calls use this engine.

    Args:
        database_url: SQLAlchemy URL (sqlite:///hr_system.db, postgresql://...).
        echo: If True, log all SQL statements.
        pool_options: pool_size, max_overflow, pool_timeout, pool_recycle
            (ignored for SQLite).

    Returns:
        SQLAlchemy Engine instance.
    """
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()

    _engine = build_engine(database_url, echo=echo, **pool_options)
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    configure_logging()
    logger.info(
        "engine_initialized",
        extra={"dialect": _engine.dialect.name, "echo": echo},
    )
    return _engine


def get_engine() -> Engine:
    """
    Get the current engine instance.

    Raises:
        RuntimeError: If engine has not been initialized.
    """
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _engine


def get_session() -> Session:
    """
    Get a new session instance.

    Raises:
        RuntimeError: If engine has not been initialized.
    """
    if _SessionFactory is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _SessionFactory()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Provide a transactional scope around a series of operations.

    On normal exit the session is committed and closed.  On exception it is
    rolled back and closed, and the exception is re-raised.

    Usage:
        with session_scope() as session:
            LeaveLedgerService(session).add_leave(...)
    """
    session = get_session()
    logger.debug("transaction_started")
    try:
        yield session
        session.commit()
        logger.debug("transaction_committed")
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables(engine: Engine | None = None) -> None:
    """Create all kernel tables (idempotent)."""
    from leave_kernel.db.base import Base
    import leave_kernel.models  # noqa: F401  (registers tables on Base.metadata)

    Base.metadata.create_all(engine or get_engine())


def drop_tables(engine: Engine | None = None) -> None:
    """Drop all tables. Use with caution - primarily for testing."""
    from leave_kernel.db.base import Base
    import leave_kernel.models  # noqa: F401

    Base.metadata.drop_all(engine or get_engine())


def reset_engine() -> None:
    """
    Reset the engine and session factory.

    Useful for test cleanup.
    """
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
        _engine = None

    _SessionFactory = None


def _atexit_dispose():
    """Dispose the engine on process exit to release all pooled connections."""
    if _engine is not None:
        _engine.dispose()


atexit.register(_atexit_dispose)
