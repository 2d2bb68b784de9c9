"""
Tests for EmployeeService.

Covers:
- Creation defaults (full balance, default department)
- Input validation
- Entitlement edits that preserve used days
- Rejection of edits below usage
- Delete with cascade to leaves
- Listing order and usage annotations
"""

from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from leave_kernel.exceptions import (
    EmployeeNotFoundError,
    EntitlementBelowUsageError,
    LeaveNotFoundError,
    StorageError,
    ValidationError,
)
from leave_kernel.models.employee import DEFAULT_DEPARTMENT, Employee
from leave_kernel.models.leave import Leave
from leave_kernel.selectors.employee_selector import EmployeeDetail, EmployeeInfo


class TestCreateEmployee:
    """create_employee()"""

    def test_new_employee_has_full_balance(self, employees):
        info = employees.create_employee("John Doe", 25, department="IT")

        assert isinstance(info, EmployeeInfo)
        assert info.id is not None
        assert info.total_leaves == 25
        assert info.available_leaves == 25
        assert info.used_leaves == 0
        assert info.department == "IT"

    def test_missing_department_defaults(self, employees):
        assert employees.create_employee("Ann", 10).department == DEFAULT_DEPARTMENT
        assert employees.create_employee("Bob", 10, department="   ").department == DEFAULT_DEPARTMENT

    def test_configured_default_department(self, session, clock):
        from leave_kernel.services.employee_service import EmployeeService

        service = EmployeeService(session, clock=clock, default_department="Unassigned")
        assert service.create_employee("Ann", 10).department == "Unassigned"

    def test_name_and_department_are_trimmed(self, employees):
        info = employees.create_employee("  Jane Smith ", 30, department=" HR ")
        assert info.name == "Jane Smith"
        assert info.department == "HR"

    def test_numeric_string_total_accepted(self, employees):
        assert employees.create_employee("Ann", "12").total_leaves == 12

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, employees, name):
        with pytest.raises(ValidationError) as exc_info:
            employees.create_employee(name, 25)
        assert exc_info.value.field == "name"

    @pytest.mark.parametrize("total", [None, "", "abc", "2.5", -1])
    def test_invalid_total_rejected(self, employees, total):
        with pytest.raises(ValidationError) as exc_info:
            employees.create_employee("Ann", total)
        assert exc_info.value.field == "total_leaves"

    def test_explicit_available_records_prior_usage(self, employees, session):
        info = employees.create_employee("Ann", 25, department="IT", available_leaves=20)

        assert info.available_leaves == 20
        assert info.used_leaves == 5
        assert session.get(Employee, info.id).prior_used_leaves == 5

    def test_oversized_total_rejected(self, employees):
        with pytest.raises(ValidationError) as exc_info:
            employees.create_employee("Ann", 10**30)
        assert exc_info.value.field == "total_leaves"

    def test_driver_overflow_surfaces_as_storage_error(self, employees, session, monkeypatch):
        monkeypatch.setattr("leave_kernel.domain.counts.MAX_LEAVE_COUNT", 10**40)

        with pytest.raises(StorageError) as exc_info:
            employees.create_employee("Big", 10**30)
        monkeypatch.undo()

        assert exc_info.value.operation == "create employee"
        assert session.query(Employee).count() == 0
        assert employees.create_employee("Ann", 25).available_leaves == 25

    def test_available_above_total_rejected(self, employees):
        with pytest.raises(ValidationError, match="cannot exceed total"):
            employees.create_employee("Ann", 25, available_leaves=30)

    def test_created_at_comes_from_clock(self, employees, clock):
        info = employees.create_employee("Ann", 25)
        assert info.created_at.replace(tzinfo=None) == clock.now().replace(tzinfo=None)

    def test_creation_is_logged(self, employees, captured_logs):
        info = employees.create_employee("Ann", 25, department="IT")

        records = [r for r in captured_logs() if r["message"] == "employee_created"]
        assert len(records) == 1
        assert records[0]["employee_id"] == info.id
        assert records[0]["employee_name"] == "Ann"


class TestUpdateEmployee:
    """update_employee()"""

    def test_raising_total_keeps_used_days(self, employees, ledger, make_employee):
        emp = make_employee(total_leaves=25)
        ledger.add_leave(emp.id, date(2024, 1, 15), date(2024, 1, 17), "Personal")

        updated = employees.update_employee(emp.id, "John Doe", "IT", 30)

        assert updated.total_leaves == 30
        assert updated.available_leaves == 27
        assert updated.used_leaves == 3

    def test_lowering_total_to_usage_leaves_zero(self, employees, ledger, make_employee):
        emp = make_employee(total_leaves=25)
        ledger.add_leave(emp.id, date(2024, 1, 1), date(2024, 1, 5), "Vacation")

        updated = employees.update_employee(emp.id, "John Doe", "IT", 5)

        assert updated.available_leaves == 0

    def test_lowering_total_below_usage_rejected(self, employees, ledger, make_employee, session):
        emp = make_employee(total_leaves=25)
        ledger.add_leave(emp.id, date(2024, 1, 1), date(2024, 1, 5), "Vacation")

        with pytest.raises(EntitlementBelowUsageError) as exc_info:
            employees.update_employee(emp.id, "John Doe", "IT", 4)

        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.used_leaves == 5
        stored = session.get(Employee, emp.id)
        assert (stored.total_leaves, stored.available_leaves) == (25, 20)

    def test_name_and_department_change(self, employees, make_employee):
        emp = make_employee()
        updated = employees.update_employee(emp.id, "Johnny Doe", "Platform", 25)
        assert (updated.name, updated.department) == ("Johnny Doe", "Platform")

    def test_none_department_keeps_current(self, employees, make_employee):
        emp = make_employee(department="IT")
        assert employees.update_employee(emp.id, "John Doe", None, 25).department == "IT"

    def test_unknown_employee(self, employees):
        with pytest.raises(EmployeeNotFoundError):
            employees.update_employee(9999, "Ghost", "IT", 10)

    def test_unknown_employee_reported_before_bad_input(self, employees):
        with pytest.raises(EmployeeNotFoundError):
            employees.update_employee(9999, "  ", "IT", "abc")

    def test_prior_usage_survives_edit(self, employees, balances):
        emp = employees.create_employee("Ann", 25, department="IT", available_leaves=20)

        updated = employees.update_employee(emp.id, "Ann", "IT", 28)

        assert updated.available_leaves == 23
        assert balances.check(emp.id).is_consistent


class TestDeleteEmployee:
    """delete_employee()"""

    def test_delete_cascades_to_leaves(self, employees, ledger, make_employee, session):
        emp = make_employee()
        first = ledger.add_leave(emp.id, "2024-01-15", "2024-01-17", "Personal")
        second = ledger.add_leave(emp.id, "2024-02-20", "2024-02-21", "Medical")

        removed = employees.delete_employee(emp.id)

        assert removed == 2
        assert session.get(Employee, emp.id) is None
        assert session.query(Leave).count() == 0
        for leave in (first, second):
            with pytest.raises(LeaveNotFoundError):
                ledger.get_leave(leave.id)

    def test_delete_leaves_other_employees_alone(self, employees, ledger, make_employee):
        keep = make_employee(name="Keep")
        drop = make_employee(name="Drop")
        kept_leave = ledger.add_leave(keep.id, "2024-01-01", "2024-01-01", "Errand")

        employees.delete_employee(drop.id)

        assert ledger.get_leave(kept_leave.id).employee_id == keep.id

    def test_unknown_employee(self, employees):
        with pytest.raises(EmployeeNotFoundError):
            employees.delete_employee(9999)

    def test_failed_delete_keeps_earlier_work(self, employees, make_employee, session, monkeypatch):
        make_employee(name="Keep")
        drop = make_employee(name="Drop")
        real_flush = session.flush

        def _broken_flush(*args, **kwargs):
            if any(isinstance(obj, Employee) for obj in session.deleted):
                raise OperationalError("DELETE FROM employees", {}, Exception("database is locked"))
            return real_flush(*args, **kwargs)

        monkeypatch.setattr(session, "flush", _broken_flush)
        with pytest.raises(StorageError) as exc_info:
            employees.delete_employee(drop.id)
        monkeypatch.setattr(session, "flush", real_flush)

        assert exc_info.value.operation == "delete employee"
        assert "database is locked" in exc_info.value.reason
        assert sorted(e.name for e in session.query(Employee)) == ["Drop", "Keep"]


class TestQueries:
    """get_employee(), list_employees(), existing_identities()"""

    def test_detail_includes_history_newest_first(self, employees, ledger, make_employee, clock):
        emp = make_employee()
        older = ledger.add_leave(emp.id, "2024-01-15", "2024-01-17", "Personal")
        clock.advance(60)
        newer = ledger.add_leave(emp.id, "2024-02-20", "2024-02-21", "Medical")

        detail = employees.get_employee(emp.id)

        assert isinstance(detail, EmployeeDetail)
        assert [leave.id for leave in detail.leaves] == [newer.id, older.id]
        assert detail.used_leaves == 5
        assert detail.to_dict()["leaves"][0]["reason"] == "Medical"

    def test_get_unknown(self, employees):
        with pytest.raises(EmployeeNotFoundError):
            employees.get_employee(9999)

    def test_list_ordered_by_name_with_usage(self, employees, ledger, make_employee):
        make_employee(name="Sarah Wilson", total_leaves=28)
        john = make_employee(name="John Doe", total_leaves=25)
        make_employee(name="Mike Johnson", total_leaves=25)
        ledger.add_leave(john.id, "2024-01-15", "2024-01-17", "Personal")

        listing = employees.list_employees()

        assert [e.name for e in listing] == ["John Doe", "Mike Johnson", "Sarah Wilson"]
        assert listing[0].used_leaves == 3
        assert listing[0].leave_count == 1
        assert listing[1].leave_count == 0

    def test_existing_identities_are_case_folded(self, employees, make_employee):
        make_employee(name="John Doe", department="IT")
        assert employees.existing_identities() == {("john doe", "it")}
