"""Shared bootstrap for the command-line scripts: settings, logging, engine."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Project root (parent of scripts/)
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from leave_kernel.config import LeaveSettings, load_settings  # noqa: E402
from leave_kernel.db.engine import create_tables, init_engine_from_url  # noqa: E402
from leave_kernel.logging_config import configure_logging  # noqa: E402


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML settings file (default: $LEAVE_CONFIG, then built-in defaults).",
    )
    parser.add_argument(
        "--db-url",
        default=None,
        help="Database URL; overrides the settings file and environment.",
    )


def bootstrap(args: argparse.Namespace) -> LeaveSettings:
    """Resolve settings, configure logging, initialize the engine and tables."""
    settings = load_settings(args.config)
    database_url = args.db_url or settings.database_url
    configure_logging(level=settings.log_level_number)
    init_engine_from_url(database_url, echo=settings.echo_sql)
    create_tables()
    return settings
