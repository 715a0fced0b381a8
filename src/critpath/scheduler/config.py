"""Configuration classes for the scheduling engine."""

from pydantic import BaseModel


class SchedulingConfig(BaseModel):
    """Options that change how the CPM passes treat tasks."""

    # Honor TaskConstraint dates (SNET, FNLT, ...) in the forward/backward passes
    apply_constraints: bool = True

    # Use a task's declared start as a floor even when predecessors constrain it
    declared_start_as_floor: bool = False

    # Cap every late finish at the project end, not only tasks without successors
    cap_late_finish_at_project_end: bool = True

    # Raise InfeasibleScheduleError instead of reporting negative float as data
    fail_on_negative_float: bool = False


class ValidationConfig(BaseModel):
    """Options for the structural validator."""

    # Also follow explicit typed dependencies when looking for cycles
    cycle_check_explicit_dependencies: bool = False

    # Warn when declared dates already violate a dependency relationship
    check_dependency_conflicts: bool = False
