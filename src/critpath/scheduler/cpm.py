"""Critical Path Method forward and backward passes."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from critpath.exceptions import InfeasibleScheduleError
from critpath.logger import debug_enabled, get_logger
from critpath.models import Dependency, DependencyType, Task, TaskConstraint

from .config import SchedulingConfig
from .core import ScheduleResult, unique_tasks
from .floats import extract_schedule
from .graph import ScheduleGraph, build_schedule_graph

logger = get_logger()


def forward_candidate(
    dep_type: DependencyType,
    pred_start: datetime,
    pred_finish: datetime,
    lag: timedelta,
    succ_duration: timedelta,
) -> datetime:
    """Earliest start a single edge allows for its successor.

    Args:
        dep_type: Relationship kind of the edge
        pred_start: Predecessor early start
        pred_finish: Predecessor early finish
        lag: Signed lag (negative = lead)
        succ_duration: Successor duration

    Returns:
        Candidate early start for the successor
    """
    if dep_type == DependencyType.FINISH_TO_START:
        return pred_finish + lag
    if dep_type == DependencyType.START_TO_START:
        return pred_start + lag
    if dep_type == DependencyType.FINISH_TO_FINISH:
        return pred_finish + lag - succ_duration
    if dep_type == DependencyType.START_TO_FINISH:
        return pred_start + lag - succ_duration
    raise ValueError(f"Unknown dependency type: {dep_type}")


def backward_candidate(
    dep_type: DependencyType,
    succ_start: datetime,
    succ_finish: datetime,
    lag: timedelta,
    pred_duration: timedelta,
) -> datetime:
    """Latest finish a single edge allows for its predecessor.

    Inverse of :func:`forward_candidate`, solved for the predecessor given
    the successor's late dates.
    """
    if dep_type == DependencyType.FINISH_TO_START:
        return succ_start - lag
    if dep_type == DependencyType.START_TO_START:
        return succ_start - lag + pred_duration
    if dep_type == DependencyType.FINISH_TO_FINISH:
        return succ_finish - lag
    if dep_type == DependencyType.START_TO_FINISH:
        return succ_finish - lag + pred_duration
    raise ValueError(f"Unknown dependency type: {dep_type}")


def _default_dates() -> dict[str, datetime]:
    return {}


def _default_id_set() -> set[str]:
    return set()


@dataclass
class PassResult:
    """Dates produced by one CPM pass."""

    start: dict[str, datetime] = field(default_factory=_default_dates)
    finish: dict[str, datetime] = field(default_factory=_default_dates)
    fallback: set[str] = field(default_factory=_default_id_set)


class CriticalPathScheduler:
    """Computes early/late dates, float and the critical path for a task set.

    The scheduler is a pure function of its inputs: every call to
    :meth:`schedule` rebuilds the graph and returns a fresh result. It does
    not check for cycles; run the validator (or ``topological_sort``) first
    and treat the numbers as meaningless if the graph is cyclic.
    """

    def __init__(
        self,
        tasks: Sequence[Task],
        dependencies: Iterable[Dependency] = (),
        config: SchedulingConfig | None = None,
    ):
        """Initialize the scheduler.

        Args:
            tasks: Ordered task list (duplicated ids: first occurrence wins)
            dependencies: Explicit typed dependencies
            config: Optional scheduling configuration
        """
        self.tasks = list(tasks)
        self.dependencies = list(dependencies)
        self.config = config or SchedulingConfig()

    def schedule(self) -> ScheduleResult:
        """Run both passes and extract floats and the critical path.

        Raises:
            InfeasibleScheduleError: Only with ``fail_on_negative_float`` set,
                when some task ends up with negative float
        """
        if not self.tasks:
            return ScheduleResult()

        task_map = unique_tasks(self.tasks)
        graph = build_schedule_graph(self.tasks, self.dependencies)

        forward = self._forward_pass(task_map, graph)
        project_end = max(forward.finish.values())
        backward = self._backward_pass(task_map, graph, project_end)

        result = extract_schedule(self.tasks, task_map, graph, forward, backward, project_end)

        logger.changes(
            f"Scheduled {len(task_map)} tasks over {result.project_duration} days; "
            f"critical path: {' → '.join(result.critical_path) or '(none)'}"
        )
        if result.fallback_task_ids:
            fallback = ", ".join(result.fallback_task_ids)
            logger.changes(f"Unreachable tasks kept their declared dates: {fallback}")

        infeasible = result.infeasible_task_ids
        if infeasible:
            message = f"Negative float on {len(infeasible)} task(s): {', '.join(infeasible)}"
            if self.config.fail_on_negative_float:
                raise InfeasibleScheduleError(message, infeasible)
            logger.warning(message)

        return result

    def _constrain_early_start(self, task: Task, early_start: datetime) -> datetime:
        """Raise an early start to satisfy SNET/FNET/MSO/MFO constraints."""
        if not self.config.apply_constraints or task.constraint_date is None:
            return early_start

        constraint_date = task.constraint_date
        if task.constraint in (TaskConstraint.START_NO_EARLIER_THAN, TaskConstraint.MUST_START_ON):
            return max(early_start, constraint_date)
        if task.constraint in (
            TaskConstraint.FINISH_NO_EARLIER_THAN,
            TaskConstraint.MUST_FINISH_ON,
        ):
            return max(early_start, constraint_date - task.duration)
        return early_start

    def _constrain_late_finish(self, task: Task, late_finish: datetime) -> datetime:
        """Lower a late finish to satisfy SNLT/FNLT/MSO/MFO constraints."""
        if not self.config.apply_constraints or task.constraint_date is None:
            return late_finish

        constraint_date = task.constraint_date
        if task.constraint in (TaskConstraint.START_NO_LATER_THAN, TaskConstraint.MUST_START_ON):
            return min(late_finish, constraint_date + task.duration)
        if task.constraint in (TaskConstraint.FINISH_NO_LATER_THAN, TaskConstraint.MUST_FINISH_ON):
            return min(late_finish, constraint_date)
        return late_finish

    def _forward_pass(self, task_map: dict[str, Task], graph: ScheduleGraph) -> PassResult:
        """Propagate early dates from tasks without predecessors.

        A task is finalized once every predecessor has been finalized; its
        early start is the latest candidate any incoming edge produced.
        """
        result = PassResult()
        remaining = {task_id: len(preds) for task_id, preds in graph.predecessors.items()}
        queue: deque[str] = deque()

        for task_id, task in task_map.items():
            if remaining[task_id] == 0:
                early_start = self._constrain_early_start(task, task.start)
                result.start[task_id] = early_start
                result.finish[task_id] = early_start + task.duration
                queue.append(task_id)

        while queue:
            current_id = queue.popleft()
            current_es = result.start[current_id]
            current_ef = result.finish[current_id]

            for edge in graph.successors[current_id]:
                succ = task_map[edge.task_id]
                candidate = forward_candidate(
                    edge.type, current_es, current_ef, edge.lag, succ.duration
                )
                existing = result.start.get(succ.id)
                if existing is None or candidate > existing:
                    result.start[succ.id] = candidate
                    result.finish[succ.id] = candidate + succ.duration
                if debug_enabled():
                    logger.debug(
                        f"  {current_id} -{edge.type.code}-> {succ.id}: "
                        f"candidate ES {candidate.isoformat()}"
                    )

                remaining[succ.id] -= 1
                if remaining[succ.id] == 0:
                    early_start = result.start[succ.id]
                    if self.config.declared_start_as_floor:
                        early_start = max(early_start, succ.start)
                    early_start = self._constrain_early_start(succ, early_start)
                    result.start[succ.id] = early_start
                    result.finish[succ.id] = early_start + succ.duration
                    queue.append(succ.id)

        # Tasks never finalized sit on or behind a cycle; use declared dates
        for task_id, task in task_map.items():
            if remaining[task_id] > 0:
                logger.checks(f"Forward pass never reached '{task_id}'; using declared dates")
                result.start[task_id] = task.start
                result.finish[task_id] = task.end
                result.fallback.add(task_id)

        return result

    def _backward_pass(
        self, task_map: dict[str, Task], graph: ScheduleGraph, project_end: datetime
    ) -> PassResult:
        """Propagate late dates back from tasks without successors.

        Mirror of the forward pass: a task's late finish is the earliest
        candidate any outgoing edge produced.
        """
        result = PassResult()
        remaining = {task_id: len(succs) for task_id, succs in graph.successors.items()}
        queue: deque[str] = deque()

        for task_id, task in task_map.items():
            if remaining[task_id] == 0:
                late_finish = self._constrain_late_finish(task, project_end)
                result.finish[task_id] = late_finish
                result.start[task_id] = late_finish - task.duration
                queue.append(task_id)

        while queue:
            current_id = queue.popleft()
            current_ls = result.start[current_id]
            current_lf = result.finish[current_id]

            for edge in graph.predecessors[current_id]:
                pred = task_map[edge.task_id]
                candidate = backward_candidate(
                    edge.type, current_ls, current_lf, edge.lag, pred.duration
                )
                existing = result.finish.get(pred.id)
                if existing is None or candidate < existing:
                    result.finish[pred.id] = candidate
                    result.start[pred.id] = candidate - pred.duration
                if debug_enabled():
                    logger.debug(
                        f"  {pred.id} -{edge.type.code}-> {current_id}: "
                        f"candidate LF {candidate.isoformat()}"
                    )

                remaining[pred.id] -= 1
                if remaining[pred.id] == 0:
                    late_finish = result.finish[pred.id]
                    if self.config.cap_late_finish_at_project_end:
                        late_finish = min(late_finish, project_end)
                    late_finish = self._constrain_late_finish(pred, late_finish)
                    result.finish[pred.id] = late_finish
                    result.start[pred.id] = late_finish - pred.duration
                    queue.append(pred.id)

        for task_id, task in task_map.items():
            if remaining[task_id] > 0:
                logger.checks(f"Backward pass never reached '{task_id}'; using project end")
                result.finish[task_id] = project_end
                result.start[task_id] = project_end - task.duration
                result.fallback.add(task_id)

        return result


def calculate_schedule(
    tasks: Sequence[Task],
    dependencies: Iterable[Dependency] = (),
    config: SchedulingConfig | None = None,
) -> ScheduleResult:
    """Run the Critical Path Method over a task set.

    Convenience wrapper around :class:`CriticalPathScheduler`.
    """
    return CriticalPathScheduler(tasks, dependencies, config).schedule()
