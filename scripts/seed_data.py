#!/usr/bin/env python3
"""
Seed the database with the sample employees and leaves.

Creates the tables if needed and inserts four employees and six leaves
through the kernel services. Does nothing if any employee already exists.

Usage:
    python3 scripts/seed_data.py [--db-url sqlite:///leave.db] [--config settings.yaml]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scripts.common import add_common_arguments, bootstrap  # noqa: E402


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Seed sample employees and leaves into an empty store.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    add_common_arguments(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    from leave_kernel.db.engine import session_scope
    from leave_kernel.services.seed import seed_sample_data

    try:
        bootstrap(args)
    except Exception as e:
        print(f"ERROR: Database init failed: {e}", file=sys.stderr)
        return 1

    with session_scope() as session:
        result = seed_sample_data(session)

    if not result.seeded:
        print("Store already has employees; nothing seeded.")
        return 0
    print(
        f"Seeded {result.employees_created} employees "
        f"and {result.leaves_created} leaves."
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
