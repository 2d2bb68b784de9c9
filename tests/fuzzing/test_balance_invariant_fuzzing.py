"""
Hypothesis-based fuzzing of the leave ledger.

Property-based testing drives random sequences of employee and leave
operations through the services and verifies after every step that

    available_leaves == total_leaves - prior_used_leaves - sum(days)

for every employee, and that rejected operations change nothing.

Each example builds its own in-memory database; function-scoped fixtures
are not shared across Hypothesis examples.
"""

from datetime import date, timedelta

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from hypothesis.stateful import (
    Bundle,
    RuleBasedStateMachine,
    consumes,
    invariant,
    multiple,
    rule,
)
from sqlalchemy.orm import Session

from leave_ingestion.domain.validators import validate_rows
from leave_kernel.db.engine import build_engine, create_tables
from leave_kernel.domain.clock import DeterministicClock
from leave_kernel.exceptions import (
    EntitlementBelowUsageError,
    InsufficientBalanceError,
)
from leave_kernel.selectors.balance_selector import BalanceSelector
from leave_kernel.services.employee_service import EmployeeService
from leave_kernel.services.leave_ledger_service import LeaveLedgerService

BASE_DATE = date(2024, 1, 1)


def _fresh_session() -> Session:
    engine = build_engine("sqlite://")
    create_tables(engine)
    return Session(engine, expire_on_commit=False)


class LeaveLedgerMachine(RuleBasedStateMachine):
    """Random add/delete/edit sequences never break the balance invariant."""

    employee_ids = Bundle("employee_ids")
    leave_ids = Bundle("leave_ids")

    def __init__(self):
        super().__init__()
        self.session = _fresh_session()
        clock = DeterministicClock()
        self.employees = EmployeeService(self.session, clock=clock)
        self.ledger = LeaveLedgerService(self.session, clock=clock)
        self.clock = clock

    def teardown(self):
        engine = self.session.get_bind()
        self.session.close()
        engine.dispose()

    @rule(target=employee_ids, total=st.integers(min_value=0, max_value=40))
    def create_employee(self, total):
        return self.employees.create_employee(f"Emp {total}", total, department="QA").id

    @rule(
        target=leave_ids,
        employee_id=employee_ids,
        offset=st.integers(min_value=0, max_value=300),
        length=st.integers(min_value=1, max_value=12),
    )
    def add_leave(self, employee_id, offset, length):
        before = self.employees.get_employee(employee_id).employee.available_leaves
        start = BASE_DATE + timedelta(days=offset)
        self.clock.tick()
        try:
            leave = self.ledger.add_leave(
                employee_id, start, start + timedelta(days=length - 1), "fuzz"
            )
        except InsufficientBalanceError:
            assert length > before
            assert self.employees.get_employee(employee_id).employee.available_leaves == before
            return multiple()
        assert leave.days == length
        return leave.id

    @rule(leave_id=consumes(leave_ids))
    def delete_leave(self, leave_id):
        info = self.ledger.get_leave(leave_id)
        before = self.employees.get_employee(info.employee_id).employee.available_leaves
        self.ledger.delete_leave(leave_id)
        after = self.employees.get_employee(info.employee_id).employee.available_leaves
        assert after == before + info.days

    @rule(employee_id=employee_ids, total=st.integers(min_value=0, max_value=40))
    def edit_entitlement(self, employee_id, total):
        current = self.employees.get_employee(employee_id).employee
        try:
            updated = self.employees.update_employee(employee_id, current.name, None, total)
        except EntitlementBelowUsageError:
            assert total < current.used_leaves
            return
        assert updated.used_leaves == current.used_leaves

    @invariant()
    def balances_match_ledger(self):
        assert BalanceSelector(self.session).find_violations() == []

    @invariant()
    def balances_never_negative(self):
        for info in self.employees.list_employees():
            assert 0 <= info.available_leaves <= info.total_leaves


LeaveLedgerMachine.TestCase.settings = settings(
    max_examples=25,
    stateful_step_count=30,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
TestLeaveLedgerStateMachine = LeaveLedgerMachine.TestCase


class TestLedgerProperties:

    @settings(max_examples=50, deadline=None)
    @given(
        total=st.integers(min_value=0, max_value=60),
        length=st.integers(min_value=1, max_value=60),
    )
    def test_add_succeeds_iff_days_within_balance(self, total, length):
        session = _fresh_session()
        try:
            employees = EmployeeService(session, clock=DeterministicClock())
            ledger = LeaveLedgerService(session, clock=DeterministicClock())
            emp = employees.create_employee("Prop", total, department="QA")
            end = BASE_DATE + timedelta(days=length - 1)
            try:
                ledger.add_leave(emp.id, BASE_DATE, end, "prop")
                accepted = True
            except InsufficientBalanceError:
                accepted = False
            assert accepted == (length <= total)
            expected = total - length if accepted else total
            assert employees.get_employee(emp.id).employee.available_leaves == expected
        finally:
            session.close()

    @settings(max_examples=50, deadline=None)
    @given(
        names=st.lists(
            st.sampled_from(["Ann", "ann", " ANN ", "Bob", "bob"]),
            min_size=1,
            max_size=10,
        )
    )
    def test_import_accepts_one_row_per_identity(self, names):
        rows = [
            {"name": n, "department": "IT", "total_leaves": 10, "available_leaves": 10}
            for n in names
        ]
        result = validate_rows(rows)

        identities = {n.strip().casefold() for n in names}
        assert len(result.accepted) == len(identities)
        assert len(result.accepted) + len(result.duplicates) == len(names)
