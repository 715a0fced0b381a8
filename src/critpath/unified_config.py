"""Unified configuration file loading.

A single ``critpath_config.yaml`` holds scheduling and validation options:

    scheduler:
      apply_constraints: true
      fail_on_negative_float: false
    validation:
      cycle_check_explicit_dependencies: true
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from . import context
from .scheduler.config import SchedulingConfig, ValidationConfig

CONFIG_FILENAME = "critpath_config.yaml"


class UnifiedConfig(BaseModel):
    """All configuration sections."""

    model_config = ConfigDict(extra="forbid")

    scheduler: SchedulingConfig = Field(default_factory=SchedulingConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)


def load_unified_config(config_path: Path | str) -> UnifiedConfig:
    """Load unified configuration from a YAML file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid (pydantic's ValidationError included)
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        data: Any = yaml.safe_load(f)

    if data is None:
        return UnifiedConfig()
    if not isinstance(data, dict):
        raise ValueError("Config must contain a dictionary at the root level")

    return UnifiedConfig.model_validate(data)


def discover_config(
    project_path: Path | None = None, config_path: Path | None = None
) -> UnifiedConfig:
    """Find and load configuration, falling back to defaults.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. Project file directory / critpath_config.yaml
    4. Current directory / critpath_config.yaml
    """
    candidates: list[Path | None] = [config_path, context.get_config_path()]
    if project_path is not None:
        candidates.append(Path(project_path).parent / CONFIG_FILENAME)
    candidates.append(Path(CONFIG_FILENAME))

    for candidate in candidates:
        if candidate is not None and candidate.exists():
            return load_unified_config(candidate)

    return UnifiedConfig()
