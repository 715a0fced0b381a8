"""critpath - Critical Path Method scheduling for task dependency graphs."""

from .models import Dependency, DependencyType, Project, Resource, Task, TaskConstraint, TaskType
from .scheduler import ScheduleResult, TaskSchedule, ValidationResult, calculate_schedule, validate

__version__ = "0.1.0"

__all__ = [
    "Dependency",
    "DependencyType",
    "Project",
    "Resource",
    "ScheduleResult",
    "Task",
    "TaskConstraint",
    "TaskSchedule",
    "TaskType",
    "ValidationResult",
    "calculate_schedule",
    "validate",
]
