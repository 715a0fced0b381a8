"""Core dataclasses for the scheduling engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from critpath.models import DependencyType

if TYPE_CHECKING:
    from critpath.models import Task


@dataclass(frozen=True)
class Edge:
    """One side of a dependency edge, stored in an adjacency list.

    In ``ScheduleGraph.predecessors[x]`` the ``task_id`` is the predecessor;
    in ``ScheduleGraph.successors[x]`` it is the successor.
    """

    task_id: str
    type: DependencyType
    lag: timedelta


@dataclass(frozen=True)
class TaskSchedule:
    """CPM result for a single task."""

    task_id: str
    early_start: datetime
    early_finish: datetime
    late_start: datetime
    late_finish: datetime
    total_float: int  # Days the task can slip without delaying the project
    free_float: int  # Days the task can slip without moving any successor
    is_critical: bool
    is_infeasible: bool = False  # late_start < early_start: constraints conflict
    used_fallback: bool = False  # Never reached by propagation; declared dates used


def _default_schedules() -> dict[str, TaskSchedule]:
    return {}


def _default_ids() -> list[str]:
    return []


@dataclass(frozen=True)
class ScheduleResult:
    """Complete result of a CPM run.

    Created fresh for every scheduling call and never mutated afterwards.
    """

    schedules: dict[str, TaskSchedule] = field(default_factory=_default_schedules)
    critical_path: list[str] = field(default_factory=_default_ids)
    project_start: datetime | None = None
    project_end: datetime | None = None
    project_duration: int = 0

    def get_schedule(self, task_id: str) -> TaskSchedule | None:
        return self.schedules.get(task_id)

    def is_task_critical(self, task_id: str) -> bool:
        schedule = self.schedules.get(task_id)
        return schedule.is_critical if schedule else False

    def get_float(self, task_id: str) -> int | None:
        """Total float for a task, or None if the task is unknown."""
        schedule = self.schedules.get(task_id)
        return schedule.total_float if schedule else None

    @property
    def infeasible_task_ids(self) -> list[str]:
        """Tasks whose late start precedes their early start (negative float)."""
        return [s.task_id for s in self.schedules.values() if s.is_infeasible]

    @property
    def is_feasible(self) -> bool:
        return not self.infeasible_task_ids

    @property
    def fallback_task_ids(self) -> list[str]:
        """Tasks the passes could not reach (usually because of a cycle)."""
        return [s.task_id for s in self.schedules.values() if s.used_fallback]


def task_order(tasks: list[Task]) -> dict[str, int]:
    """Map each task id to the index of its first occurrence."""
    order: dict[str, int] = {}
    for index, task in enumerate(tasks):
        order.setdefault(task.id, index)
    return order


def unique_tasks(tasks: list[Task]) -> dict[str, Task]:
    """Index tasks by id, keeping the first occurrence of a duplicated id."""
    result: dict[str, Task] = {}
    for task in tasks:
        result.setdefault(task.id, task)
    return result
