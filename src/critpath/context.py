"""Process-wide CLI state shared between the callback and commands."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass
class CliContext:
    """Options set by the top-level callback."""

    config_path: Path | None = None
    as_of: datetime | None = None  # Overrides "now" for date-sensitive warnings


_context = CliContext()


def get_context() -> CliContext:
    return _context


def get_config_path() -> Path | None:
    """Get the global config path."""
    return _context.config_path


def set_config_path(path: Path | None) -> None:
    """Set the global config path."""
    _context.config_path = path


def set_as_of(value: datetime | None) -> None:
    _context.as_of = value


def reset() -> None:
    """Restore defaults (used between CLI invocations in tests)."""
    _context.config_path = None
    _context.as_of = None
