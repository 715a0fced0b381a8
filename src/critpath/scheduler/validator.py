"""Structural validation of task sets.

The validator is independent of the CPM engine and never raises on bad
data: every problem comes back as an error or warning in the result.
Errors should block presenting a critical path; warnings are advisory.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from critpath.exceptions import CircularDependencyError, MissingReferenceError, ValidationError
from critpath.logger import get_logger
from critpath.models import Dependency, Task

from .config import ValidationConfig
from .cpm import forward_candidate
from .core import unique_tasks
from .graph import build_schedule_graph
from .ordering import detect_cycles

logger = get_logger()


class ErrorCode(str, Enum):
    """Error codes for structural validation."""

    INVALID_DATE_RANGE = "invalidDateRange"  # End before start (non-milestone)
    INVALID_PROGRESS = "invalidProgress"  # Progress outside [0, 1]
    CIRCULAR_DEPENDENCY = "circularDependency"
    MISSING_DEPENDENCY = "missingDependency"  # Dependency names an unknown task
    DUPLICATE_TASK_ID = "duplicateTaskId"
    EMPTY_TASK_ID = "emptyTaskId"


class WarningCode(str, Enum):
    """Warning codes for structural validation."""

    ZERO_DURATION = "zeroDuration"  # start == end but not a milestone
    COMPLETED_FUTURE_TASK = "completedFutureTask"  # 100% done, end still ahead
    DEPENDENCY_CONFLICT = "dependencyConflict"  # Declared dates break a dependency
    EMPTY_LABEL = "emptyLabel"


@dataclass(frozen=True)
class StructuralError:
    """A validation error."""

    code: ErrorCode
    message: str
    task_id: str | None = None

    def __str__(self) -> str:
        if self.task_id is not None:
            return f'Error[{self.code.value}] Task "{self.task_id}": {self.message}'
        return f"Error[{self.code.value}]: {self.message}"


@dataclass(frozen=True)
class StructuralWarning:
    """A validation warning."""

    code: WarningCode
    message: str
    task_id: str | None = None

    def __str__(self) -> str:
        if self.task_id is not None:
            return f'Warning[{self.code.value}] Task "{self.task_id}": {self.message}'
        return f"Warning[{self.code.value}]: {self.message}"


def _default_errors() -> tuple[StructuralError, ...]:
    return ()


def _default_warnings() -> tuple[StructuralWarning, ...]:
    return ()


@dataclass(frozen=True)
class ValidationResult:
    """Errors and warnings from one validation call."""

    errors: tuple[StructuralError, ...] = field(default_factory=_default_errors)
    warnings: tuple[StructuralWarning, ...] = field(default_factory=_default_warnings)

    @property
    def is_valid(self) -> bool:
        """Valid iff there are no errors; warnings never affect validity."""
        return not self.errors

    @property
    def has_issues(self) -> bool:
        return bool(self.errors or self.warnings)

    def errors_with_code(self, code: ErrorCode) -> list[StructuralError]:
        return [e for e in self.errors if e.code == code]

    def warnings_with_code(self, code: WarningCode) -> list[StructuralWarning]:
        return [w for w in self.warnings if w.code == code]

    def raise_for_errors(self) -> None:
        """Raise the first error as an exception; warnings never raise.

        Raises:
            CircularDependencyError: For a circular dependency
            MissingReferenceError: For a dependency on an unknown task
            ValidationError: For any other error
        """
        if not self.errors:
            return
        error = self.errors[0]
        if error.code == ErrorCode.CIRCULAR_DEPENDENCY:
            raise CircularDependencyError(str(error))
        if error.code == ErrorCode.MISSING_DEPENDENCY:
            raise MissingReferenceError(str(error))
        raise ValidationError(str(error))


def _now_for(task: Task, current_time: datetime | None) -> datetime:
    """Current time in the same naive or aware form as the task's end date."""
    tzinfo = task.end.tzinfo
    if current_time is None:
        return datetime.now(tz=tzinfo)
    if current_time.tzinfo is None and tzinfo is not None:
        return current_time.replace(tzinfo=tzinfo)
    if current_time.tzinfo is not None and tzinfo is None:
        return current_time.astimezone(timezone.utc).replace(tzinfo=None)
    return current_time


def validate(  # noqa: PLR0912 - one pass over every per-task rule
    tasks: Sequence[Task],
    dependencies: Iterable[Dependency] = (),
    *,
    current_time: datetime | None = None,
    config: ValidationConfig | None = None,
) -> ValidationResult:
    """Validate a task set and its explicit dependencies.

    Args:
        tasks: Ordered task list
        dependencies: Explicit typed dependencies
        current_time: "Now" for the completed-future-task warning
            (defaults to the wall clock)
        config: Optional validation options

    Returns:
        ValidationResult with errors and warnings in discovery order
    """
    config = config or ValidationConfig()
    dependencies = list(dependencies)
    errors: list[StructuralError] = []
    warnings: list[StructuralWarning] = []

    all_ids = {task.id for task in tasks}
    seen_ids: set[str] = set()

    for task in tasks:
        if not task.id:
            errors.append(StructuralError(ErrorCode.EMPTY_TASK_ID, "Task ID cannot be empty"))
            continue

        if task.id in seen_ids:
            errors.append(
                StructuralError(ErrorCode.DUPLICATE_TASK_ID, "Duplicate task ID found", task.id)
            )
        else:
            seen_ids.add(task.id)

        if not task.is_milestone and task.end < task.start:
            errors.append(
                StructuralError(
                    ErrorCode.INVALID_DATE_RANGE,
                    f"End date ({task.end}) is before start date ({task.start})",
                    task.id,
                )
            )

        if not task.is_milestone and task.start == task.end:
            warnings.append(
                StructuralWarning(
                    WarningCode.ZERO_DURATION,
                    "Task has zero duration but is not marked as milestone",
                    task.id,
                )
            )

        if not 0.0 <= task.progress <= 1.0:
            errors.append(
                StructuralError(
                    ErrorCode.INVALID_PROGRESS,
                    f"Progress ({task.progress}) must be between 0.0 and 1.0",
                    task.id,
                )
            )

        if task.progress >= 1.0 and task.end > _now_for(task, current_time):
            warnings.append(
                StructuralWarning(
                    WarningCode.COMPLETED_FUTURE_TASK,
                    "Task is marked as complete but end date is in the future",
                    task.id,
                )
            )

        if not task.label:
            warnings.append(
                StructuralWarning(WarningCode.EMPTY_LABEL, "Task has no label", task.id)
            )

        for dep_id in task.dependencies:
            if dep_id not in all_ids:
                errors.append(
                    StructuralError(
                        ErrorCode.MISSING_DEPENDENCY,
                        f'Dependency "{dep_id}" does not exist',
                        task.id,
                    )
                )

    for dep in dependencies:
        for endpoint in (dep.from_task_id, dep.to_task_id):
            if endpoint not in all_ids:
                owner = dep.to_task_id if endpoint == dep.from_task_id else dep.from_task_id
                errors.append(
                    StructuralError(
                        ErrorCode.MISSING_DEPENDENCY,
                        f'Dependency {dep} references unknown task "{endpoint}"',
                        owner,
                    )
                )

    for cycle in detect_cycles(
        tasks, dependencies, include_explicit=config.cycle_check_explicit_dependencies
    ):
        errors.append(
            StructuralError(
                ErrorCode.CIRCULAR_DEPENDENCY,
                f"Circular dependency detected: {' → '.join(cycle)}",
                cycle[0],
            )
        )

    if config.check_dependency_conflicts:
        warnings.extend(_dependency_conflicts(tasks, dependencies))

    logger.checks(f"Validated {len(tasks)} tasks: {len(errors)} errors, {len(warnings)} warnings")
    return ValidationResult(errors=tuple(errors), warnings=tuple(warnings))


def _dependency_conflicts(
    tasks: Sequence[Task], dependencies: list[Dependency]
) -> list[StructuralWarning]:
    """Warn where a task's declared start already violates an incoming edge."""
    task_map = unique_tasks(list(tasks))
    graph = build_schedule_graph(tasks, dependencies)
    warnings: list[StructuralWarning] = []

    for task_id, preds in graph.predecessors.items():
        succ = task_map[task_id]
        for edge in preds:
            pred = task_map[edge.task_id]
            required = forward_candidate(edge.type, pred.start, pred.end, edge.lag, succ.duration)
            if succ.start < required:
                warnings.append(
                    StructuralWarning(
                        WarningCode.DEPENDENCY_CONFLICT,
                        f"{edge.type.code} dependency on \"{pred.id}\" requires a start "
                        f"no earlier than {required}",
                        task_id,
                    )
                )

    return warnings


def validate_task(task: Task) -> list[StructuralError]:
    """Check a single task in isolation (id, date range, progress)."""
    errors: list[StructuralError] = []

    if not task.id:
        errors.append(StructuralError(ErrorCode.EMPTY_TASK_ID, "Task ID cannot be empty"))

    if not task.is_milestone and task.end < task.start:
        errors.append(
            StructuralError(
                ErrorCode.INVALID_DATE_RANGE, "End date must be after start date", task.id
            )
        )

    if not 0.0 <= task.progress <= 1.0:
        errors.append(
            StructuralError(
                ErrorCode.INVALID_PROGRESS, "Progress must be between 0.0 and 1.0", task.id
            )
        )

    return errors
