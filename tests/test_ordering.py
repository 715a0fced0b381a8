"""Tests for cycle detection and topological ordering."""

from collections.abc import Callable

from critpath.models import Dependency, Task
from critpath.scheduler.ordering import (
    detect_cycles,
    topological_sort,
    would_create_cycle,
)


class TestDetectCycles:
    def test_no_cycles(self, make_task: Callable[..., Task]) -> None:
        tasks = [make_task("a", 0, 1), make_task("b", 1, 2, deps=["a"])]
        assert detect_cycles(tasks) == []

    def test_three_task_cycle(self, make_task: Callable[..., Task]) -> None:
        tasks = [
            make_task("a", 0, 1, deps=["b"]),
            make_task("b", 0, 1, deps=["c"]),
            make_task("c", 0, 1, deps=["a"]),
        ]
        assert detect_cycles(tasks) == [["a", "b", "c"]]

    def test_self_dependency(self, make_task: Callable[..., Task]) -> None:
        tasks = [make_task("a", 0, 1, deps=["a"]), make_task("b", 0, 1)]
        assert detect_cycles(tasks) == [["a"]]

    def test_cycle_reached_from_outside(self, make_task: Callable[..., Task]) -> None:
        tasks = [
            make_task("entry", 0, 1, deps=["x"]),
            make_task("x", 0, 1, deps=["y"]),
            make_task("y", 0, 1, deps=["x"]),
        ]
        # The closing id is not repeated and the entry task is not part of the cycle
        assert detect_cycles(tasks) == [["x", "y"]]

    def test_explicit_dependencies_are_opt_in(self, make_task: Callable[..., Task]) -> None:
        tasks = [make_task("a", 0, 1, deps=["b"]), make_task("b", 0, 1)]
        deps = [Dependency.start_to_start("a", "b")]

        assert detect_cycles(tasks, deps) == []
        assert detect_cycles(tasks, deps, include_explicit=True) == [["a", "b"]]

    def test_long_chain_does_not_recurse(self, make_task: Callable[..., Task]) -> None:
        tasks = [make_task("t0", 0, 1)]
        tasks.extend(make_task(f"t{i}", 0, 1, deps=[f"t{i - 1}"]) for i in range(1, 5000))
        assert detect_cycles(tasks) == []


class TestTopologicalSort:
    def test_predecessors_come_first(self, make_task: Callable[..., Task]) -> None:
        tasks = [
            make_task("c", 0, 1, deps=["b"]),
            make_task("b", 0, 1, deps=["a"]),
            make_task("a", 0, 1),
        ]
        assert topological_sort(tasks) == ["a", "b", "c"]

    def test_diamond(self, make_task: Callable[..., Task]) -> None:
        tasks = [
            make_task("a", 0, 1),
            make_task("b", 0, 1, deps=["a"]),
            make_task("c", 0, 1, deps=["a"]),
            make_task("d", 0, 1, deps=["b", "c"]),
        ]
        assert topological_sort(tasks) == ["a", "b", "c", "d"]

    def test_cycle_returns_none(self, make_task: Callable[..., Task]) -> None:
        tasks = [
            make_task("free", 0, 1),
            make_task("a", 0, 1, deps=["b"]),
            make_task("b", 0, 1, deps=["a"]),
        ]
        assert topological_sort(tasks) is None

    def test_explicit_dependencies_are_opt_in(self, make_task: Callable[..., Task]) -> None:
        tasks = [make_task("b", 0, 1), make_task("a", 0, 1)]
        deps = [Dependency.finish_to_start("a", "b")]

        assert topological_sort(tasks, deps) == ["b", "a"]
        assert topological_sort(tasks, deps, include_explicit=True) == ["a", "b"]

    def test_duplicate_id_returns_none(self, make_task: Callable[..., Task]) -> None:
        tasks = [make_task("a", 0, 1), make_task("a", 1, 2), make_task("b", 0, 1, deps=["a"])]
        assert topological_sort(tasks) is None
        assert topological_sort(tasks[1:]) == ["a", "b"]

    def test_empty(self) -> None:
        assert topological_sort([]) == []


class TestWouldCreateCycle:
    def test_reverse_edge_closes_cycle(self, make_task: Callable[..., Task]) -> None:
        tasks = [make_task("a", 0, 1), make_task("b", 1, 2, deps=["a"])]
        # Making "a" depend on "b" closes a -> b -> a
        assert would_create_cycle(tasks, "b", "a")

    def test_forward_edge_is_safe(self, make_task: Callable[..., Task]) -> None:
        tasks = [make_task("a", 0, 1), make_task("b", 1, 2)]
        assert not would_create_cycle(tasks, "a", "b")

    def test_transitive(self, make_task: Callable[..., Task]) -> None:
        tasks = [
            make_task("a", 0, 1),
            make_task("b", 0, 1, deps=["a"]),
            make_task("c", 0, 1, deps=["b"]),
        ]
        assert would_create_cycle(tasks, "c", "a")
        assert not would_create_cycle(tasks, "a", "c")

    def test_self_edge(self, make_task: Callable[..., Task]) -> None:
        tasks = [make_task("a", 0, 1)]
        assert would_create_cycle(tasks, "a", "a")
