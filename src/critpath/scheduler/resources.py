"""Resource utilization reporting.

Reporting only: overallocation is flagged, never resolved by moving tasks.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from critpath.logger import get_logger
from critpath.models import Resource, Task

logger = get_logger()

# Each active task claims a full unit of its resource
TASK_ALLOCATION = 1.0


@dataclass(frozen=True)
class ResourceUtilization:
    """Allocation of one resource on one day."""

    date: datetime
    allocated: float
    capacity: float
    overallocated: bool

    @property
    def load(self) -> float:
        """Allocation as a fraction of capacity (inf for zero capacity with work)."""
        if self.capacity <= 0:
            return float("inf") if self.allocated > 0 else 0.0
        return self.allocated / self.capacity


def calculate_resource_utilization(
    tasks: Sequence[Task],
    resources: Sequence[Resource],
    start: datetime,
    end: datetime,
) -> dict[str, list[ResourceUtilization]]:
    """Compute daily allocation per resource between ``start`` and ``end``.

    A task counts on a day when it has started by that day and has not yet
    ended (``task.start <= day < task.end``). Days run from ``start`` in
    one-day steps while before ``end``.

    Args:
        tasks: Tasks with ``resource_id`` assignments
        resources: Resources to report on
        start: First day of the window
        end: End of the window (exclusive)

    Returns:
        Mapping resource id -> one ResourceUtilization per day
    """
    by_resource: dict[str, list[Task]] = {}
    for task in tasks:
        if task.resource_id is not None:
            by_resource.setdefault(task.resource_id, []).append(task)

    result: dict[str, list[ResourceUtilization]] = {}
    for resource in resources:
        assigned = by_resource.get(resource.id, [])
        utilizations: list[ResourceUtilization] = []
        current = start

        while current < end:
            allocated = TASK_ALLOCATION * sum(
                1 for task in assigned if task.start <= current < task.end
            )
            utilizations.append(
                ResourceUtilization(
                    date=current,
                    allocated=allocated,
                    capacity=resource.capacity,
                    overallocated=allocated > resource.capacity,
                )
            )
            current += timedelta(days=1)

        overloaded = sum(1 for u in utilizations if u.overallocated)
        if overloaded:
            logger.checks(f"Resource '{resource.id}' overallocated on {overloaded} day(s)")
        result[resource.id] = utilizations

    return result


def overallocated_days(
    utilization: dict[str, list[ResourceUtilization]],
) -> dict[str, list[datetime]]:
    """Days on which each resource is overallocated (resources with none omitted)."""
    result: dict[str, list[datetime]] = {}
    for resource_id, days in utilization.items():
        over = [u.date for u in days if u.overallocated]
        if over:
            result[resource_id] = over
    return result
