"""Cycle detection and topological ordering over simple predecessor ids.

Both utilities report rather than raise: a cycle comes back as data
(a list of cycles, or ``None`` instead of an ordering).
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator, Sequence

from critpath.models import Dependency, Task

from .graph import SimpleDependencyGraph, build_simple_graph

_DONE = object()


def find_cycles(graph: SimpleDependencyGraph) -> list[list[str]]:
    """Detect circular dependencies using depth-first search.

    Every unvisited task is used once as a DFS root. When the search reaches
    a task that is still on the recursion stack, the path from that task's
    first occurrence through the current task is reported as one cycle, in
    dependency order ("a" depends on "b" depends on "c" gives [a, b, c]).
    Equivalent cycles reached from different entry points are not merged.
    """
    cycles: list[list[str]] = []
    visited: set[str] = set()
    on_stack: set[str] = set()
    path: list[str] = []

    for root in graph.predecessors:
        if root in visited:
            continue

        # Iterative DFS so long dependency chains don't hit the recursion limit
        visited.add(root)
        on_stack.add(root)
        path.append(root)
        stack: list[tuple[str, Iterator[str]]] = [(root, iter(graph.predecessors[root]))]

        while stack:
            node, neighbours = stack[-1]
            dep_id = next(neighbours, _DONE)
            if dep_id is _DONE:
                stack.pop()
                path.pop()
                on_stack.discard(node)
                continue
            assert isinstance(dep_id, str)

            if dep_id in on_stack:
                cycles.append(path[path.index(dep_id) :])
                continue
            if dep_id in visited:
                continue

            visited.add(dep_id)
            on_stack.add(dep_id)
            path.append(dep_id)
            stack.append((dep_id, iter(graph.predecessors[dep_id])))

    return cycles


def detect_cycles(
    tasks: Sequence[Task],
    dependencies: Iterable[Dependency] = (),
    *,
    include_explicit: bool = False,
) -> list[list[str]]:
    """Detect cycles in a task set.

    Only the tasks' simple predecessor ids are followed unless
    ``include_explicit`` is set, in which case explicit typed dependencies
    are followed too.
    """
    graph = build_simple_graph(tasks, dependencies, include_explicit=include_explicit)
    return find_cycles(graph)


def topological_order(graph: SimpleDependencyGraph) -> list[str] | None:
    """Kahn's algorithm: every task appears after all of its predecessors.

    Returns None when the graph contains a cycle; no partial ordering is
    ever returned.
    """
    in_degree = {task_id: len(preds) for task_id, preds in graph.predecessors.items()}
    successors = graph.successors()

    queue = deque(task_id for task_id, degree in in_degree.items() if degree == 0)
    result: list[str] = []

    while queue:
        current = queue.popleft()
        result.append(current)
        for dependent in successors[current]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    if len(result) != len(in_degree):
        return None
    return result


def topological_sort(
    tasks: Sequence[Task],
    dependencies: Iterable[Dependency] = (),
    *,
    include_explicit: bool = False,
) -> list[str] | None:
    """Return task ids in dependency order, or None if there is a cycle.

    A duplicated task id also yields None: the ordering could not list every
    task.
    """
    graph = build_simple_graph(tasks, dependencies, include_explicit=include_explicit)
    ordered = topological_order(graph)
    if ordered is None or len(ordered) != len(tasks):
        return None
    return ordered


def would_create_cycle(tasks: Sequence[Task], from_task_id: str, to_task_id: str) -> bool:
    """Check whether making ``to_task_id`` depend on ``from_task_id`` closes a cycle.

    That happens when ``from_task_id`` already depends, directly or
    transitively, on ``to_task_id`` (or when both ids are the same).
    """
    if from_task_id == to_task_id:
        return True

    graph = build_simple_graph(tasks)
    visited: set[str] = set()
    to_visit = [from_task_id]

    while to_visit:
        current = to_visit.pop()
        if current == to_task_id:
            return True
        if current in visited:
            continue
        visited.add(current)
        to_visit.extend(graph.predecessors.get(current, []))

    return False
