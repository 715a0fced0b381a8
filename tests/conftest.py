"""Pytest configuration and fixtures for critpath tests."""

from __future__ import annotations

from collections.abc import Callable, Generator, Iterable
from datetime import datetime, timedelta
from typing import Any

import pytest

from critpath import context
from critpath.logger import reset_logger
from critpath.models import Task

# Every scheduling test counts days from this date
BASE_DATE = datetime(2025, 1, 6)


def _day(n: float) -> datetime:
    return BASE_DATE + timedelta(days=n)


@pytest.fixture
def day() -> Callable[[float], datetime]:
    """Build a datetime ``n`` days after the shared base date."""
    return _day


@pytest.fixture
def make_task() -> Callable[..., Task]:
    """Factory for tasks given as day offsets from the base date."""

    def _make(
        task_id: str,
        start: float,
        end: float,
        deps: Iterable[str] = (),
        **kwargs: Any,
    ) -> Task:
        kwargs.setdefault("label", task_id.upper())
        return Task(
            id=task_id,
            start=_day(start),
            end=_day(end),
            dependencies=tuple(deps),
            **kwargs,
        )

    return _make


@pytest.fixture(autouse=True)
def _clean_state() -> Generator[None, None, None]:
    """Reset process-wide CLI context and logger between tests."""
    context.reset()
    reset_logger()
    yield
    context.reset()
    reset_logger()
