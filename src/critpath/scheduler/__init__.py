"""Scheduler package - Critical Path Method over a task dependency graph.

This package provides:
- Graph building that merges typed dependencies with simple predecessor ids
- Cycle detection and topological ordering (reported, never raised)
- CPM forward/backward passes honoring FS/SS/FF/SF relationships and lags
- Total/free float and critical path extraction
- A structural validator producing error/warning diagnostics
- Resource utilization reporting

Main entry points:
- calculate_schedule / CriticalPathScheduler: run CPM, get a ScheduleResult
- validate: structural diagnostics, get a ValidationResult
- topological_sort / detect_cycles: ordering utilities

Always validate before presenting CPM output: on a cyclic graph the passes
terminate but their numbers are not meaningful.
"""

# Configuration
from .config import SchedulingConfig, ValidationConfig

# Core dataclasses
from .core import Edge, ScheduleResult, TaskSchedule

# CPM engine
from .cpm import CriticalPathScheduler, backward_candidate, calculate_schedule, forward_candidate

# Floats
from .floats import edge_slack

# Graphs
from .graph import ScheduleGraph, SimpleDependencyGraph, build_schedule_graph, build_simple_graph

# Ordering utilities
from .ordering import (
    detect_cycles,
    find_cycles,
    topological_order,
    topological_sort,
    would_create_cycle,
)

# Resource utilization
from .resources import ResourceUtilization, calculate_resource_utilization, overallocated_days

# Structural validation
from .validator import (
    ErrorCode,
    StructuralError,
    StructuralWarning,
    ValidationResult,
    WarningCode,
    validate,
    validate_task,
)

__all__ = [
    # Configuration
    "SchedulingConfig",
    "ValidationConfig",
    # Core dataclasses
    "Edge",
    "ScheduleResult",
    "TaskSchedule",
    # CPM engine
    "CriticalPathScheduler",
    "calculate_schedule",
    "forward_candidate",
    "backward_candidate",
    "edge_slack",
    # Graphs
    "ScheduleGraph",
    "SimpleDependencyGraph",
    "build_schedule_graph",
    "build_simple_graph",
    # Ordering utilities
    "detect_cycles",
    "find_cycles",
    "topological_order",
    "topological_sort",
    "would_create_cycle",
    # Resource utilization
    "ResourceUtilization",
    "calculate_resource_utilization",
    "overallocated_days",
    # Structural validation
    "ErrorCode",
    "WarningCode",
    "StructuralError",
    "StructuralWarning",
    "ValidationResult",
    "validate",
    "validate_task",
]
