"""Pydantic schemas for project YAML data validation."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import DependencyType, TaskConstraint, TaskType


def _coerce_datetime(value: Any) -> Any:
    """YAML gives bare dates as ``date``; widen them to midnight datetimes."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time())
    return value


def _naive_utc(value: datetime | None) -> datetime | None:
    """Offset-aware timestamps become naive UTC so they compare with bare dates."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class TaskSchema(BaseModel):
    """Schema for one task entry."""

    model_config = ConfigDict(extra="forbid")

    id: str
    label: str = ""
    start: datetime
    end: datetime
    progress: float = 0.0
    dependencies: list[str] = Field(default_factory=list)
    type: TaskType = TaskType.TASK
    resource: str | None = None
    baseline_start: datetime | None = None
    baseline_end: datetime | None = None
    parent: str | None = None
    level: int = 0
    constraint: TaskConstraint = TaskConstraint.ASAP
    constraint_date: datetime | None = None
    priority: int | None = None
    notes: str | None = None

    @field_validator("id", "label", mode="before")
    @classmethod
    def coerce_to_string(cls, v: Any) -> Any:
        """Allow numeric ids and labels in YAML."""
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator(
        "start", "end", "baseline_start", "baseline_end", "constraint_date", mode="before"
    )
    @classmethod
    def coerce_dates(cls, v: Any) -> Any:
        return _coerce_datetime(v)

    @field_validator("start", "end", "baseline_start", "baseline_end", "constraint_date")
    @classmethod
    def drop_timezone(cls, v: datetime | None) -> datetime | None:
        return _naive_utc(v)

    @field_validator("dependencies", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Ensure value is a list of strings."""
        if v is None:
            return []
        if isinstance(v, list):
            return [str(item) for item in v]  # type: ignore[misc]
        return [str(v)]


class DependencySchema(BaseModel):
    """Schema for a typed dependency written as a mapping."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    from_task: str = Field(alias="from")
    to_task: str = Field(alias="to")
    type: DependencyType = DependencyType.FINISH_TO_START
    lag_days: float = 0.0

    @field_validator("type", mode="before")
    @classmethod
    def normalize_code(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v


class ResourceSchema(BaseModel):
    """Schema for one resource entry."""

    model_config = ConfigDict(extra="forbid")

    id: str
    name: str | None = None
    capacity: float = Field(default=1.0, ge=0)


class ProjectSchema(BaseModel):
    """Schema for the entire project YAML document."""

    name: str | None = None
    tasks: list[TaskSchema] = Field(default_factory=list)
    # Either "a -> b SS + 2d" strings or {from, to, type, lag_days} mappings
    dependencies: list[str | DependencySchema] = Field(default_factory=list)
    resources: list[ResourceSchema] = Field(default_factory=list)
