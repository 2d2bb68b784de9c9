"""Employee identity for duplicate detection. Pure functions, zero I/O."""

from __future__ import annotations


def identity_key(name: str, department: str | None) -> tuple[str, str]:
    """Case-insensitive (name, department) identity used for duplicate checks."""
    return (name.strip().casefold(), (department or "").strip().casefold())
