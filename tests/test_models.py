"""Tests for the task and dependency data model."""

from datetime import datetime, timedelta

import pytest

from critpath.models import (
    Dependency,
    DependencyType,
    Project,
    Resource,
    Task,
    TaskType,
    dependency_exists,
    get_predecessors,
    get_successors,
    group_by_predecessor,
    group_by_successor,
    whole_days,
)


class TestWholeDays:
    def test_truncates_toward_zero(self) -> None:
        assert whole_days(timedelta(days=2, hours=20)) == 2
        assert whole_days(timedelta(hours=-12)) == 0
        assert whole_days(timedelta(days=-3, hours=-1)) == -3

    def test_exact_days(self) -> None:
        assert whole_days(timedelta(days=5)) == 5
        assert whole_days(timedelta(0)) == 0


class TestDependencyType:
    def test_codes(self) -> None:
        assert DependencyType.FINISH_TO_START.code == "FS"
        assert DependencyType.START_TO_FINISH.code == "SF"

    def test_display_name(self) -> None:
        assert DependencyType.FINISH_TO_START.display_name == "Finish to Start"
        assert DependencyType.START_TO_START.display_name == "Start to Start"

    def test_from_code_is_case_insensitive(self) -> None:
        assert DependencyType.from_code("ff") == DependencyType.FINISH_TO_FINISH
        assert DependencyType.from_code(" SS ") == DependencyType.START_TO_START

    def test_from_code_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown dependency type code"):
            DependencyType.from_code("XX")


class TestTask:
    def test_duration_and_flags(self) -> None:
        task = Task(
            id="a",
            label="A",
            start=datetime(2025, 1, 1),
            end=datetime(2025, 1, 4),
            type=TaskType.MILESTONE,
        )
        assert task.duration == timedelta(days=3)
        assert task.is_milestone
        assert not task.is_summary

    def test_dependencies_stored_as_tuple(self) -> None:
        task = Task(
            id="b",
            label="B",
            start=datetime(2025, 1, 1),
            end=datetime(2025, 1, 2),
            dependencies=["a", "c"],  # type: ignore[arg-type]
        )
        assert task.dependencies == ("a", "c")

    def test_missing_dates_rejected(self) -> None:
        with pytest.raises(TypeError, match="requires both start and end"):
            Task(id="a", label="A", start=None, end=datetime(2025, 1, 1))  # type: ignore[arg-type]

    def test_baseline_variance(self) -> None:
        task = Task(
            id="a",
            label="A",
            start=datetime(2025, 1, 3),
            end=datetime(2025, 1, 8),
            baseline_start=datetime(2025, 1, 1),
            baseline_end=datetime(2025, 1, 10),
        )
        assert task.has_baseline
        assert task.start_variance_days == 2
        assert task.end_variance_days == -2
        assert task.baseline_duration == timedelta(days=9)

    def test_variance_without_baseline(self) -> None:
        task = Task(id="a", label="A", start=datetime(2025, 1, 3), end=datetime(2025, 1, 8))
        assert task.start_variance_days is None
        assert task.end_variance_days is None


class TestDependencyParsing:
    def test_plain_arrow_is_finish_to_start(self) -> None:
        dep = Dependency.parse("design -> build")
        assert dep.from_task_id == "design"
        assert dep.to_task_id == "build"
        assert dep.type == DependencyType.FINISH_TO_START
        assert dep.lag_days == 0.0

    def test_kind_and_lag(self) -> None:
        dep = Dependency.parse("a -> b SS + 2d")
        assert dep.type == DependencyType.START_TO_START
        assert dep.lag_days == 2.0
        assert dep.has_lag
        assert dep.lag == timedelta(days=2)

    def test_lead_in_weeks(self) -> None:
        dep = Dependency.parse("a -> b FF - 1w")
        assert dep.lag_days == -7.0
        assert dep.has_lead

    def test_months_without_kind(self) -> None:
        dep = Dependency.parse("a -> b + 1.5m")
        assert dep.type == DependencyType.FINISH_TO_START
        assert dep.lag_days == 45.0

    def test_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid dependency"):
            Dependency.parse("just one task")

    def test_str_uses_parse_format(self) -> None:
        assert str(Dependency.start_to_finish("a", "b", -1.5)) == "a -> b SF - 1.5d"
        assert str(Dependency.finish_to_start("a", "b")) == "a -> b FS"
        assert Dependency.parse(str(Dependency.finish_to_finish("x", "y", 3))) == (
            Dependency.finish_to_finish("x", "y", 3.0)
        )


class TestDependencyHelpers:
    def test_grouping_and_lookup(self) -> None:
        deps = [
            Dependency.finish_to_start("a", "c"),
            Dependency.start_to_start("b", "c"),
            Dependency.finish_to_start("c", "d"),
        ]
        assert [d.from_task_id for d in group_by_successor(deps)["c"]] == ["a", "b"]
        assert [d.to_task_id for d in group_by_predecessor(deps)["c"]] == ["d"]
        assert "d" not in group_by_predecessor(deps)
        assert get_predecessors("c", deps) == ["a", "b"]
        assert get_successors("c", deps) == ["d"]
        assert dependency_exists("a", "c", deps)
        assert not dependency_exists("c", "a", deps)


class TestProject:
    def test_lookup_and_grouping(self) -> None:
        tasks = [
            Task(
                id="a",
                label="A",
                start=datetime(2025, 1, 1),
                end=datetime(2025, 1, 3),
                resource_id="alice",
            ),
            Task(
                id="b",
                label="B",
                start=datetime(2025, 1, 2),
                end=datetime(2025, 1, 9),
                parent_id="a",
                baseline_start=datetime(2024, 12, 30),
            ),
        ]
        project = Project(tasks=tasks, resources=[Resource("alice", "Alice")])

        assert project.get_all_ids() == {"a", "b"}
        assert project.get_task("b") is tasks[1]
        assert project.get_task("missing") is None
        assert project.tasks_by_resource() == {"alice": [tasks[0]], None: [tasks[1]]}
        assert project.children_of("a") == [tasks[1]]
        assert project.computed_start == datetime(2024, 12, 30)
        assert project.computed_end == datetime(2025, 1, 9)

    def test_empty_project_dates(self) -> None:
        assert Project().computed_start is None
        assert Project().computed_end is None
