"""Float computation and critical path extraction."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from critpath.models import DependencyType, Task, whole_days

from .core import ScheduleResult, TaskSchedule, task_order

if TYPE_CHECKING:
    from .cpm import PassResult
    from .graph import ScheduleGraph


def edge_slack(
    dep_type: DependencyType,
    pred_start: datetime,
    pred_finish: datetime,
    succ_start: datetime,
    succ_finish: datetime,
    lag: timedelta,
) -> timedelta:
    """How far the predecessor can slip before the successor's early dates move.

    Slipping a task shifts its start and finish together, so the slack of an
    edge is the gap between the successor's governing early date and the
    value the edge requires of it.
    """
    if dep_type == DependencyType.FINISH_TO_START:
        return succ_start - (pred_finish + lag)
    if dep_type == DependencyType.START_TO_START:
        return succ_start - (pred_start + lag)
    if dep_type == DependencyType.FINISH_TO_FINISH:
        return succ_finish - (pred_finish + lag)
    if dep_type == DependencyType.START_TO_FINISH:
        return succ_finish - (pred_start + lag)
    raise ValueError(f"Unknown dependency type: {dep_type}")


def extract_schedule(  # noqa: PLR0913 - needs both passes and the graph
    tasks: Sequence[Task],
    task_map: dict[str, Task],
    graph: ScheduleGraph,
    forward: PassResult,
    backward: PassResult,
    project_end: datetime,
) -> ScheduleResult:
    """Combine pass results into per-task schedules and the critical path.

    Args:
        tasks: Original task list (for ordering and project start)
        task_map: Tasks by id (first occurrence of each id)
        graph: Typed dependency graph the passes ran on
        forward: Early dates
        backward: Late dates
        project_end: Latest early finish

    Returns:
        Immutable ScheduleResult
    """
    schedules: dict[str, TaskSchedule] = {}

    for task_id in task_map:
        es = forward.start[task_id]
        ef = forward.finish[task_id]
        ls = backward.start[task_id]
        lf = backward.finish[task_id]

        float_delta = ls - es
        total_float = whole_days(float_delta)

        # Free float can never exceed total float
        free_delta = float_delta
        for edge in graph.successors[task_id]:
            slack = edge_slack(
                edge.type,
                es,
                ef,
                forward.start[edge.task_id],
                forward.finish[edge.task_id],
                edge.lag,
            )
            free_delta = min(free_delta, slack)
        free_float = max(whole_days(free_delta), 0)

        schedules[task_id] = TaskSchedule(
            task_id=task_id,
            early_start=es,
            early_finish=ef,
            late_start=ls,
            late_finish=lf,
            total_float=total_float,
            free_float=free_float,
            is_critical=total_float == 0,
            is_infeasible=float_delta < timedelta(0),
            used_fallback=task_id in forward.fallback or task_id in backward.fallback,
        )

    order = task_order(list(tasks))
    critical_path = sorted(
        (task_id for task_id, schedule in schedules.items() if schedule.is_critical),
        key=lambda task_id: (schedules[task_id].early_start, order[task_id]),
    )

    starts = [task.start for task in tasks]
    starts.extend(task.baseline_start for task in tasks if task.baseline_start is not None)
    project_start = min(starts)

    return ScheduleResult(
        schedules=schedules,
        critical_path=critical_path,
        project_start=project_start,
        project_end=project_end,
        project_duration=whole_days(project_end - project_start),
    )
