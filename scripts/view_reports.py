#!/usr/bin/env python3
"""
View the leave dashboard and employee roster from persisted data.

Prints one JSON document with the dashboard figures (headcount, leaves and
days taken this year, per-department totals) and every employee with its
balance, plus the leave reason picklist. Add --employee to include one
employee's leave history, and --export to also write the roster as a CSV
that opens in Excel.

Usage:
    python3 scripts/view_reports.py [--year 2024] [--employee 3] [--export employees_export.csv]
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scripts.common import add_common_arguments, bootstrap  # noqa: E402


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print dashboard figures and the employee roster as JSON.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--year", type=int, default=None, help="Dashboard year (default: current).")
    parser.add_argument("--employee", type=int, default=None, help="Include this employee's detail.")
    parser.add_argument(
        "--export",
        type=Path,
        default=None,
        help="Also write the employee roster CSV to this path.",
    )
    add_common_arguments(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    from leave_ingestion.export import write_employee_export
    from leave_kernel.db.engine import session_scope
    from leave_kernel.exceptions import NotFoundError
    from leave_kernel.selectors import DashboardSelector, LeaveSelector
    from leave_kernel.services import EmployeeService

    try:
        bootstrap(args)
    except Exception as e:
        print(f"ERROR: Could not connect: {e}", file=sys.stderr)
        return 1

    with session_scope() as session:
        employees = EmployeeService(session)
        roster = employees.list_employees()
        report = {
            "dashboard": DashboardSelector(session).stats(args.year).to_dict(),
            "employees": [e.to_dict() for e in roster],
            "leave_reasons": LeaveSelector(session).reasons(),
        }
        if args.employee is not None:
            try:
                report["employee"] = employees.get_employee(args.employee).to_dict()
            except NotFoundError as e:
                print(f"ERROR: {e}", file=sys.stderr)
                return 1
        if args.export is not None:
            report["export"] = str(write_employee_export(roster, args.export))

    print(json.dumps(report, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
