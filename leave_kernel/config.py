"""
Runtime settings (``leave_kernel.config``).

Responsibility
--------------
Resolves the settings every entry point needs (database URL, import batch
size, log level, default department) from three layers, later layers
winning:

1. built-in defaults;
2. a YAML file, given explicitly or named by ``LEAVE_CONFIG``;
3. environment variables.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys or invalid values  -> ``ValueError``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from leave_kernel.models.employee import DEFAULT_DEPARTMENT

DEFAULT_DATABASE_URL = "sqlite:///leave.db"
DEFAULT_IMPORT_BATCH_SIZE = 50

CONFIG_PATH_ENV = "LEAVE_CONFIG"

# env var -> settings field; first match wins for database_url
_ENV_OVERRIDES: tuple[tuple[str, str], ...] = (
    ("LEAVE_DATABASE_URL", "database_url"),
    ("DATABASE_URL", "database_url"),
    ("LEAVE_IMPORT_BATCH_SIZE", "import_batch_size"),
    ("LEAVE_LOG_LEVEL", "log_level"),
    ("LEAVE_DEFAULT_DEPARTMENT", "default_department"),
)


@dataclass(frozen=True)
class LeaveSettings:
    """Resolved runtime settings."""

    database_url: str = DEFAULT_DATABASE_URL
    import_batch_size: int = DEFAULT_IMPORT_BATCH_SIZE
    log_level: str = "INFO"
    default_department: str = DEFAULT_DEPARTMENT
    echo_sql: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.database_url, str) or not self.database_url.strip():
            raise ValueError("database_url must be a non-empty string")
        if (
            isinstance(self.import_batch_size, bool)
            or not isinstance(self.import_batch_size, int)
            or self.import_batch_size < 1
        ):
            raise ValueError(
                f"import_batch_size must be a positive integer, got {self.import_batch_size!r}"
            )
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ValueError(f"Unknown log_level: {self.log_level!r}")
        if not isinstance(self.default_department, str) or not self.default_department.strip():
            raise ValueError("default_department must be a non-empty string")
        if not isinstance(self.echo_sql, bool):
            raise ValueError(f"echo_sql must be a boolean, got {self.echo_sql!r}")

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level.upper())


_FIELD_NAMES = frozenset(f.name for f in fields(LeaveSettings))


def _load_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    # Allow an optional top-level "leave:" section.
    if set(data) == {"leave"} and isinstance(data["leave"], dict):
        data = data["leave"]
    unknown = sorted(set(data) - _FIELD_NAMES)
    if unknown:
        raise ValueError(f"{path}: unknown settings: {', '.join(unknown)}")
    return data


def _env_value(field_name: str, raw: str) -> Any:
    if field_name == "import_batch_size":
        try:
            return int(raw)
        except ValueError:
            raise ValueError(
                f"import_batch_size must be a positive integer, got {raw!r}"
            ) from None
    return raw


def load_settings(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> LeaveSettings:
    """
    Resolve settings from defaults, an optional YAML file and the environment.

    Args:
        path: YAML settings file. Falls back to ``$LEAVE_CONFIG`` when None.
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        A validated LeaveSettings.
    """
    env = os.environ if environ is None else environ
    settings = LeaveSettings()

    config_path = path or env.get(CONFIG_PATH_ENV)
    if config_path:
        settings = replace(settings, **_load_yaml(Path(config_path)))

    overrides: dict[str, Any] = {}
    for env_name, field_name in _ENV_OVERRIDES:
        raw = env.get(env_name)
        if raw and field_name not in overrides:
            overrides[field_name] = _env_value(field_name, raw)
    if overrides:
        settings = replace(settings, **overrides)
    return settings
