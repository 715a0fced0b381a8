"""Tests for resource utilization reporting."""

from collections.abc import Callable
from datetime import datetime

from critpath.models import Resource, Task
from critpath.scheduler.resources import calculate_resource_utilization, overallocated_days


class TestResourceUtilization:
    def test_overlapping_tasks_overallocate(
        self, make_task: Callable[..., Task], day: Callable[[float], datetime]
    ) -> None:
        tasks = [
            make_task("a", 0, 3, resource_id="r1"),
            make_task("b", 1, 2, resource_id="r1"),
            make_task("c", 0, 5, resource_id="r2"),
            make_task("unassigned", 0, 5),
        ]
        resources = [Resource("r1", "Alice"), Resource("r2", "Bob")]

        usage = calculate_resource_utilization(tasks, resources, day(0), day(4))

        assert [u.allocated for u in usage["r1"]] == [1.0, 2.0, 1.0, 0.0]
        assert [u.date for u in usage["r1"]] == [day(0), day(1), day(2), day(3)]
        assert usage["r1"][1].overallocated
        assert usage["r1"][1].load == 2.0
        assert not any(u.overallocated for u in usage["r2"])
        assert overallocated_days(usage) == {"r1": [day(1)]}

    def test_capacity_above_one(
        self, make_task: Callable[..., Task], day: Callable[[float], datetime]
    ) -> None:
        tasks = [
            make_task("a", 0, 2, resource_id="team"),
            make_task("b", 0, 2, resource_id="team"),
        ]
        team = Resource("team", "Team", 2.0)
        usage = calculate_resource_utilization(tasks, [team], day(0), day(2))

        assert [u.allocated for u in usage["team"]] == [2.0, 2.0]
        assert overallocated_days(usage) == {}

    def test_zero_capacity_load(self, day: Callable[[float], datetime]) -> None:
        usage = calculate_resource_utilization([], [Resource("r", "R", 0.0)], day(0), day(1))
        (only,) = usage["r"]
        assert only.load == 0.0
        assert not only.overallocated

    def test_empty_window(self, day: Callable[[float], datetime]) -> None:
        usage = calculate_resource_utilization([], [Resource("r", "R")], day(3), day(3))
        assert usage == {"r": []}
