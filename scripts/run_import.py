#!/usr/bin/env python3
"""
Import an employee roster (CSV or XLSX) into the leave store.

Rows are validated (required fields, whole-number leave counts, available
not above total, no duplicate name/department) and accepted rows are
written in batches. The summary is printed as JSON.

Usage:
    python3 scripts/run_import.py --file <path> [options]

Examples:
    # Import a roster
    python3 scripts/run_import.py --file employees.xlsx

    # Probe source file (row count, columns, sample) without importing
    python3 scripts/run_import.py --file employees.csv --probe-only

    # Write the downloadable template and exit
    python3 scripts/run_import.py --template employee_template.xlsx
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
        description="Import employees from a CSV or XLSX roster.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--file", type=Path, help="Path to the roster (.csv or .xlsx).")
    target.add_argument(
        "--template",
        type=Path,
        help="Write the import template (.xlsx or .csv) to this path and exit.",
    )
    parser.add_argument(
        "--probe-only",
        action="store_true",
        help="Print row count, columns and sample rows; no DB writes.",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Rows per write batch (default: import_batch_size setting).",
    )
    parser.add_argument("--sheet", default=None, help="XLSX sheet name or 0-based index.")
    parser.add_argument("--delimiter", default=None, help="CSV delimiter (default: ',').")
    add_common_arguments(parser)
    return parser.parse_args(argv)


def _source_options(args: argparse.Namespace) -> dict:
    options: dict = {}
    if args.sheet is not None:
        options["sheet"] = int(args.sheet) if args.sheet.isdigit() else args.sheet
    if args.delimiter is not None:
        options["delimiter"] = args.delimiter
    return options


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    # Lazy imports so we fail fast on args first
    from leave_ingestion.adapters import adapter_for
    from leave_ingestion.services import EmployeeImportService
    from leave_ingestion.template import write_template
    from leave_kernel.db.engine import session_scope
    from leave_kernel.exceptions import LeaveKernelError

    if args.template is not None:
        try:
            path = write_template(args.template)
        except LeaveKernelError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1
        print(f"Template written to {path}")
        return 0

    source_path = args.file.resolve()
    if not source_path.is_file():
        print(f"ERROR: File not found: {source_path}", file=sys.stderr)
        return 1
    options = _source_options(args)

    if args.probe_only:
        try:
            probe = adapter_for(source_path).probe(source_path, options)
        except LeaveKernelError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1
        print(json.dumps(probe.to_dict(), indent=2, default=str))
        return 0

    try:
        settings = bootstrap(args)
    except Exception as e:
        print(f"ERROR: Database init failed: {e}", file=sys.stderr)
        return 1

    try:
        with session_scope() as session:
            service = EmployeeImportService(
                session,
                batch_size=args.batch_size or settings.import_batch_size,
                default_department=settings.default_department,
            )
            result = service.import_file(source_path, options)
    except LeaveKernelError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
