"""Data models for critpath."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

# Duration conversion constants
DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30

_ONE_DAY = timedelta(days=1)


def whole_days(delta: timedelta) -> int:
    """Convert a timedelta to whole days, truncating toward zero.

    ``timedelta.days`` floors, so -12h would read as -1 day. Float and
    variance figures must not round a sub-day lead into a full day.
    """
    return int(delta / _ONE_DAY)


class DependencyType(str, Enum):
    """Relationship between a predecessor and a successor task.

    - FS (Finish-to-Start): successor starts when predecessor finishes
    - SS (Start-to-Start): successor starts when predecessor starts
    - FF (Finish-to-Finish): successor finishes when predecessor finishes
    - SF (Start-to-Finish): successor finishes when predecessor starts
    """

    FINISH_TO_START = "FS"
    START_TO_START = "SS"
    FINISH_TO_FINISH = "FF"
    START_TO_FINISH = "SF"

    @property
    def code(self) -> str:
        """Short code (FS, SS, FF, SF)."""
        return self.value

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        first, _, second = self.name.partition("_TO_")
        return f"{first.title()} to {second.title()}"

    @classmethod
    def from_code(cls, code: str) -> DependencyType:
        """Look up a dependency type from its short code (case-insensitive)."""
        try:
            return cls(code.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown dependency type code: {code}") from None


class TaskType(str, Enum):
    """Kind of task."""

    TASK = "task"
    MILESTONE = "milestone"
    SUMMARY = "summary"


class TaskConstraint(str, Enum):
    """Date constraint attached to a task."""

    ASAP = "asap"
    ALAP = "alap"
    MUST_START_ON = "must_start_on"
    MUST_FINISH_ON = "must_finish_on"
    START_NO_EARLIER_THAN = "start_no_earlier_than"
    START_NO_LATER_THAN = "start_no_later_than"
    FINISH_NO_EARLIER_THAN = "finish_no_earlier_than"
    FINISH_NO_LATER_THAN = "finish_no_later_than"


def _default_id_tuple() -> tuple[str, ...]:
    return ()


@dataclass(frozen=True)
class Task:
    """A task on the timeline.

    ``dependencies`` is the simple predecessor list: ids of tasks that must
    finish before this one starts (Finish-to-Start, no lag). Typed
    relationships live in separate :class:`Dependency` records.
    """

    id: str
    label: str
    start: datetime
    end: datetime
    progress: float = 0.0
    dependencies: tuple[str, ...] = field(default_factory=_default_id_tuple)
    type: TaskType = TaskType.TASK
    resource_id: str | None = None
    baseline_start: datetime | None = None
    baseline_end: datetime | None = None
    parent_id: str | None = None
    level: int = 0
    constraint: TaskConstraint = TaskConstraint.ASAP
    constraint_date: datetime | None = None
    priority: int | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.id is None:
            raise TypeError("Task id is required")
        if self.start is None or self.end is None:
            raise TypeError(f"Task '{self.id}' requires both start and end")
        # Accept any iterable of ids but store an immutable tuple
        if not isinstance(self.dependencies, tuple):
            object.__setattr__(self, "dependencies", tuple(self.dependencies))

    @property
    def duration(self) -> timedelta:
        """Declared duration (end - start)."""
        return self.end - self.start

    @property
    def is_milestone(self) -> bool:
        return self.type == TaskType.MILESTONE

    @property
    def is_summary(self) -> bool:
        return self.type == TaskType.SUMMARY

    @property
    def has_baseline(self) -> bool:
        """Whether baseline dates are available for variance reporting."""
        return self.baseline_start is not None and self.baseline_end is not None

    @property
    def baseline_duration(self) -> timedelta | None:
        if self.baseline_start is None or self.baseline_end is None:
            return None
        return self.baseline_end - self.baseline_start

    @property
    def start_variance_days(self) -> int | None:
        """Start variance in days (positive = delayed, negative = ahead)."""
        if not self.has_baseline:
            return None
        assert self.baseline_start is not None
        return whole_days(self.start - self.baseline_start)

    @property
    def end_variance_days(self) -> int | None:
        """End variance in days (positive = delayed, negative = ahead)."""
        if not self.has_baseline:
            return None
        assert self.baseline_end is not None
        return whole_days(self.end - self.baseline_end)


_DEPENDENCY_RE = re.compile(
    r"^(?P<src>.+?)\s*->\s*(?P<dst>[^\s]+)"
    r"(?:\s+(?P<kind>FS|SS|FF|SF))?"
    r"(?:\s*(?P<sign>[+-])\s*(?P<value>[\d.]+)(?P<unit>[dwm]))?$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Dependency:
    """A typed dependency edge from a predecessor to a successor.

    The lag is signed: positive values delay the successor, negative values
    (leads) let it overlap the predecessor.
    """

    from_task_id: str
    to_task_id: str
    type: DependencyType = DependencyType.FINISH_TO_START
    lag_days: float = 0.0

    def __post_init__(self) -> None:
        if self.from_task_id is None or self.to_task_id is None:
            raise TypeError("Dependency requires both from_task_id and to_task_id")

    @property
    def lag(self) -> timedelta:
        return timedelta(days=self.lag_days)

    @property
    def has_lag(self) -> bool:
        return self.lag_days > 0

    @property
    def has_lead(self) -> bool:
        return self.lag_days < 0

    @property
    def key(self) -> tuple[str, str]:
        """The (from, to) pair used for deduplication."""
        return (self.from_task_id, self.to_task_id)

    @classmethod
    def finish_to_start(
        cls, from_task_id: str, to_task_id: str, lag_days: float = 0.0
    ) -> Dependency:
        return cls(from_task_id, to_task_id, DependencyType.FINISH_TO_START, lag_days)

    @classmethod
    def start_to_start(
        cls, from_task_id: str, to_task_id: str, lag_days: float = 0.0
    ) -> Dependency:
        return cls(from_task_id, to_task_id, DependencyType.START_TO_START, lag_days)

    @classmethod
    def finish_to_finish(
        cls, from_task_id: str, to_task_id: str, lag_days: float = 0.0
    ) -> Dependency:
        return cls(from_task_id, to_task_id, DependencyType.FINISH_TO_FINISH, lag_days)

    @classmethod
    def start_to_finish(
        cls, from_task_id: str, to_task_id: str, lag_days: float = 0.0
    ) -> Dependency:
        return cls(from_task_id, to_task_id, DependencyType.START_TO_FINISH, lag_days)

    @classmethod
    def parse(cls, dep_str: str) -> Dependency:
        """Parse a dependency string into a Dependency object.

        Supported formats:
        - "a -> b" - Finish-to-Start, no lag
        - "a -> b SS" - Start-to-Start, no lag
        - "a -> b FS + 2d" - 2 day lag
        - "a -> b FF - 1w" - 1 week lead (7 days)
        - "a -> b + 1.5m" - Finish-to-Start with 1.5 months (45 days) lag
        """
        match = _DEPENDENCY_RE.match(dep_str.strip())
        if not match:
            raise ValueError(f"Invalid dependency: '{dep_str}'")

        kind = match.group("kind")
        dep_type = DependencyType.from_code(kind) if kind else DependencyType.FINISH_TO_START

        lag_days = 0.0
        if match.group("value"):
            num = float(match.group("value"))
            unit = match.group("unit").lower()
            if unit == "w":
                num *= DAYS_PER_WEEK
            elif unit == "m":
                num *= DAYS_PER_MONTH
            lag_days = -num if match.group("sign") == "-" else num

        return cls(
            from_task_id=match.group("src").strip(),
            to_task_id=match.group("dst").strip(),
            type=dep_type,
            lag_days=lag_days,
        )

    def __str__(self) -> str:
        """Return the compact form accepted by :meth:`parse`."""
        text = f"{self.from_task_id} -> {self.to_task_id} {self.type.code}"
        if self.lag_days == 0.0:
            return text
        sign = "-" if self.lag_days < 0 else "+"
        magnitude = abs(self.lag_days)
        if magnitude == int(magnitude):
            return f"{text} {sign} {int(magnitude)}d"
        return f"{text} {sign} {magnitude}d"


@dataclass(frozen=True)
class Resource:
    """A resource tasks can be assigned to."""

    id: str
    name: str
    capacity: float = 1.0  # 1.0 = full-time, 0.5 = half-time


def _default_tasks() -> list[Task]:
    return []


def _default_dependencies() -> list[Dependency]:
    return []


def _default_resources() -> list[Resource]:
    return []


@dataclass
class Project:
    """A complete task set: tasks, typed dependencies and resources."""

    tasks: list[Task] = field(default_factory=_default_tasks)
    dependencies: list[Dependency] = field(default_factory=_default_dependencies)
    resources: list[Resource] = field(default_factory=_default_resources)
    name: str | None = None

    def get_all_ids(self) -> set[str]:
        """Get all task IDs in the project."""
        return {task.id for task in self.tasks}

    def get_task(self, task_id: str) -> Task | None:
        """Get a task by its ID (first occurrence wins)."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def tasks_by_resource(self) -> dict[str | None, list[Task]]:
        """Group tasks by resource id; unassigned tasks are keyed by None."""
        result: dict[str | None, list[Task]] = {}
        for task in self.tasks:
            result.setdefault(task.resource_id, []).append(task)
        return result

    def children_of(self, parent_id: str) -> list[Task]:
        """Direct children of a summary task."""
        return [task for task in self.tasks if task.parent_id == parent_id]

    @property
    def computed_start(self) -> datetime | None:
        """Earliest task or baseline start."""
        starts = [task.start for task in self.tasks]
        starts.extend(t.baseline_start for t in self.tasks if t.baseline_start is not None)
        return min(starts) if starts else None

    @property
    def computed_end(self) -> datetime | None:
        """Latest task or baseline end."""
        ends = [task.end for task in self.tasks]
        ends.extend(t.baseline_end for t in self.tasks if t.baseline_end is not None)
        return max(ends) if ends else None


def group_by_successor(dependencies: Iterable[Dependency]) -> dict[str, list[Dependency]]:
    """Group dependencies by their successor task id."""
    result: dict[str, list[Dependency]] = {}
    for dep in dependencies:
        result.setdefault(dep.to_task_id, []).append(dep)
    return result


def group_by_predecessor(dependencies: Iterable[Dependency]) -> dict[str, list[Dependency]]:
    """Group dependencies by their predecessor task id."""
    result: dict[str, list[Dependency]] = {}
    for dep in dependencies:
        result.setdefault(dep.from_task_id, []).append(dep)
    return result


def get_predecessors(task_id: str, dependencies: Iterable[Dependency]) -> list[str]:
    return [dep.from_task_id for dep in dependencies if dep.to_task_id == task_id]


def get_successors(task_id: str, dependencies: Iterable[Dependency]) -> list[str]:
    return [dep.to_task_id for dep in dependencies if dep.from_task_id == task_id]


def dependency_exists(
    from_task_id: str, to_task_id: str, dependencies: Iterable[Dependency]
) -> bool:
    """Check whether an edge already links the two tasks (in that direction)."""
    return any(d.from_task_id == from_task_id and d.to_task_id == to_task_id for d in dependencies)
