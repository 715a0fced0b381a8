"""Project file loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .models import Dependency, Project, Resource, Task
from .schemas import DependencySchema, ProjectSchema


def load_project(path: Path | str) -> Project:
    """Load a project YAML file into domain models.

    Only the file's shape is checked here. Structural problems such as
    duplicate ids or cycles are left for the validator to report.

    Raises:
        ParseError: If the file is missing or is not valid YAML
        ValidationError: If the YAML does not match the project schema
    """
    path = Path(path)
    if not path.exists():
        raise ParseError(f"File not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse YAML: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("YAML must contain a dictionary at the root level")

    return parse_project_data(data)


def parse_project_data(data: dict[str, Any]) -> Project:
    """Convert already-loaded YAML data into a Project."""
    try:
        schema = ProjectSchema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid project structure: {e}") from e

    tasks = [
        Task(
            id=entry.id,
            label=entry.label,
            start=entry.start,
            end=entry.end,
            progress=entry.progress,
            dependencies=tuple(entry.dependencies),
            type=entry.type,
            resource_id=entry.resource,
            baseline_start=entry.baseline_start,
            baseline_end=entry.baseline_end,
            parent_id=entry.parent,
            level=entry.level,
            constraint=entry.constraint,
            constraint_date=entry.constraint_date,
            priority=entry.priority,
            notes=entry.notes,
        )
        for entry in schema.tasks
    ]

    dependencies: list[Dependency] = []
    for entry in schema.dependencies:
        if isinstance(entry, DependencySchema):
            dependencies.append(
                Dependency(
                    from_task_id=entry.from_task,
                    to_task_id=entry.to_task,
                    type=entry.type,
                    lag_days=entry.lag_days,
                )
            )
            continue
        try:
            dependencies.append(Dependency.parse(entry))
        except ValueError as e:
            raise ValidationError(str(e)) from e

    resources = [
        Resource(id=entry.id, name=entry.name or entry.id, capacity=entry.capacity)
        for entry in schema.resources
    ]

    return Project(tasks=tasks, dependencies=dependencies, resources=resources, name=schema.name)
