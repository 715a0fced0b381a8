"""Dependency graph construction.

Two graphs are built from a task set and kept deliberately separate:

- ``ScheduleGraph`` carries typed, lagged edges and drives the CPM passes.
  It merges explicit ``Dependency`` records with each task's simple
  predecessor ids.
- ``SimpleDependencyGraph`` maps each task to its predecessor ids only and
  drives cycle detection and topological sorting.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import timedelta

from critpath.logger import get_logger
from critpath.models import Dependency, DependencyType, Task

from .core import Edge, unique_tasks

logger = get_logger()


@dataclass
class ScheduleGraph:
    """Typed predecessor/successor adjacency for every task id."""

    predecessors: dict[str, list[Edge]]
    successors: dict[str, list[Edge]]

    @property
    def task_ids(self) -> list[str]:
        return list(self.predecessors)

    @property
    def edge_count(self) -> int:
        return sum(len(edges) for edges in self.successors.values())

    def has_edge(self, from_id: str, to_id: str) -> bool:
        return any(edge.task_id == from_id for edge in self.predecessors.get(to_id, []))

    def roots(self) -> list[str]:
        """Task ids without predecessors, in task order."""
        return [task_id for task_id, preds in self.predecessors.items() if not preds]

    def sinks(self) -> list[str]:
        """Task ids without successors, in task order."""
        return [task_id for task_id, succs in self.successors.items() if not succs]

    def _add(self, from_id: str, to_id: str, dep_type: DependencyType, lag: timedelta) -> None:
        self.predecessors[to_id].append(Edge(from_id, dep_type, lag))
        self.successors[from_id].append(Edge(to_id, dep_type, lag))


def build_schedule_graph(
    tasks: Sequence[Task], dependencies: Iterable[Dependency] = ()
) -> ScheduleGraph:
    """Merge explicit dependencies and simple predecessor lists into one graph.

    Explicit dependencies are inserted first; a simple predecessor id only
    adds a Finish-to-Start edge (no lag) when no edge exists yet for the same
    (from, to) pair. Edges naming an unknown task are dropped here; reporting
    them is the validator's job.
    """
    task_map = unique_tasks(list(tasks))
    graph = ScheduleGraph(
        predecessors={task_id: [] for task_id in task_map},
        successors={task_id: [] for task_id in task_map},
    )
    seen: set[tuple[str, str]] = set()

    for dep in dependencies:
        if dep.from_task_id not in task_map or dep.to_task_id not in task_map:
            logger.checks(f"Dropping dependency {dep}: unknown task")
            continue
        if dep.key in seen:
            logger.checks(f"Dropping dependency {dep}: pair already linked")
            continue
        seen.add(dep.key)
        graph._add(dep.from_task_id, dep.to_task_id, dep.type, dep.lag)

    for task in task_map.values():
        for dep_id in task.dependencies:
            if dep_id not in task_map:
                logger.checks(f"Dropping predecessor '{dep_id}' of '{task.id}': unknown task")
                continue
            if (dep_id, task.id) in seen:
                continue
            seen.add((dep_id, task.id))
            graph._add(dep_id, task.id, DependencyType.FINISH_TO_START, timedelta(0))

    logger.debug(f"Schedule graph: {len(task_map)} tasks, {graph.edge_count} edges")
    return graph


@dataclass
class SimpleDependencyGraph:
    """Predecessor ids per task, in declaration order.

    Ids that do not name a task in the set are kept out of the adjacency.
    """

    predecessors: dict[str, list[str]]

    def successors(self) -> dict[str, list[str]]:
        """Invert the adjacency: task id -> ids that depend on it."""
        result: dict[str, list[str]] = {task_id: [] for task_id in self.predecessors}
        for task_id, preds in self.predecessors.items():
            for pred_id in preds:
                result[pred_id].append(task_id)
        return result


def build_simple_graph(
    tasks: Sequence[Task],
    dependencies: Iterable[Dependency] = (),
    *,
    include_explicit: bool = False,
) -> SimpleDependencyGraph:
    """Build the predecessor-id graph used for cycle checks and ordering.

    Args:
        tasks: Task list; the first occurrence of a duplicated id is used
        dependencies: Explicit typed dependencies
        include_explicit: Also fold explicit dependencies into the adjacency
    """
    task_map = unique_tasks(list(tasks))
    predecessors: dict[str, list[str]] = {}
    for task_id, task in task_map.items():
        preds: list[str] = []
        for dep_id in task.dependencies:
            if dep_id in task_map and dep_id not in preds:
                preds.append(dep_id)
        predecessors[task_id] = preds

    if include_explicit:
        for dep in dependencies:
            if dep.from_task_id not in task_map or dep.to_task_id not in task_map:
                continue
            preds = predecessors[dep.to_task_id]
            if dep.from_task_id not in preds:
                preds.append(dep.from_task_id)

    return SimpleDependencyGraph(predecessors=predecessors)
