"""Tests for engine plumbing: SQLite listeners, global engine, session_scope."""

from datetime import date

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from leave_kernel.db.engine import (
    build_engine,
    create_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from leave_kernel.models.employee import Employee
from leave_kernel.models.leave import Leave


@pytest.fixture
def file_url(tmp_path):
    return f"sqlite:///{tmp_path / 'engine.db'}"


class TestSqliteEngine:

    def test_foreign_keys_enabled(self):
        engine = build_engine("sqlite://")
        with engine.connect() as conn:
            assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
        engine.dispose()

    def test_orphan_leave_rejected(self, session):
        session.add(
            Leave(
                employee_id=999,
                start_date=date(2024, 1, 1),
                end_date=date(2024, 1, 1),
                days=1,
                reason="orphan",
            )
        )
        with pytest.raises(IntegrityError):
            session.flush()

    def test_savepoint_rolls_back_only_inner_work(self, session):
        session.add(Employee(name="Outer", department="IT", total_leaves=5, available_leaves=5))
        session.flush()
        with pytest.raises(RuntimeError):
            with session.begin_nested():
                session.add(Employee(name="Inner", department="IT", total_leaves=5, available_leaves=5))
                session.flush()
                raise RuntimeError("abort")

        names = session.scalars(text("SELECT name FROM employees")).all()
        assert names == ["Outer"]


class TestGlobalEngine:

    def test_uninitialized(self):
        reset_engine()
        with pytest.raises(RuntimeError, match="not initialized"):
            get_engine()
        with pytest.raises(RuntimeError, match="not initialized"):
            get_session()

    def test_session_scope_commits(self, file_url):
        init_engine_from_url(file_url)
        create_tables()
        with session_scope() as s:
            s.add(Employee(name="Ann", department="Ops", total_leaves=10, available_leaves=10))

        with Session(get_engine()) as check:
            assert check.query(Employee).count() == 1

    def test_session_scope_rolls_back_on_error(self, file_url):
        init_engine_from_url(file_url)
        create_tables()
        with pytest.raises(ValueError):
            with session_scope() as s:
                s.add(Employee(name="Ann", department="Ops", total_leaves=10, available_leaves=10))
                s.flush()
                raise ValueError("boom")

        with Session(get_engine()) as check:
            assert check.query(Employee).count() == 0

    def test_reinit_replaces_engine(self, file_url, tmp_path):
        first = init_engine_from_url(file_url)
        second = init_engine_from_url(f"sqlite:///{tmp_path / 'other.db'}")
        assert get_engine() is second
        assert first is not second
