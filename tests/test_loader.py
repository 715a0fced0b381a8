"""Tests for project YAML loading."""

from datetime import datetime
from pathlib import Path

import pytest

from critpath.exceptions import ParseError, ValidationError
from critpath.loader import load_project, parse_project_data
from critpath.models import DependencyType, TaskConstraint, TaskType

PROJECT_YAML = """
name: Website relaunch
tasks:
  - id: design
    label: Design
    start: 2025-01-06
    end: 2025-01-10
    resource: alice
  - id: build
    label: Build
    start: 2025-01-10
    end: 2025-01-20
    progress: 0.25
    dependencies: [design]
    constraint: start_no_earlier_than
    constraint_date: 2025-01-13
  - id: launch
    label: Launch
    start: 2025-01-20
    end: 2025-01-20
    type: milestone
dependencies:
  - "build -> launch FS + 2d"
  - from: design
    to: launch
    type: ss
    lag_days: -1
resources:
  - id: alice
    name: Alice
    capacity: 0.5
"""


class TestLoadProject:
    def test_load_full_project(self, tmp_path: Path) -> None:
        path = tmp_path / "project.yaml"
        path.write_text(PROJECT_YAML)

        project = load_project(path)

        assert project.name == "Website relaunch"
        assert [t.id for t in project.tasks] == ["design", "build", "launch"]

        design, build, launch = project.tasks
        assert design.start == datetime(2025, 1, 6)
        assert design.resource_id == "alice"
        assert build.dependencies == ("design",)
        assert build.progress == 0.25
        assert build.constraint == TaskConstraint.START_NO_EARLIER_THAN
        assert build.constraint_date == datetime(2025, 1, 13)
        assert launch.type == TaskType.MILESTONE

        first, second = project.dependencies
        assert first.to_task_id == "launch"
        assert first.lag_days == 2.0
        assert second.type == DependencyType.START_TO_START
        assert second.lag_days == -1.0

        (alice,) = project.resources
        assert alice.name == "Alice"
        assert alice.capacity == 0.5

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError, match="File not found"):
            load_project(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("tasks: [unclosed")
        with pytest.raises(ParseError, match="Failed to parse YAML"):
            load_project(path)

    def test_root_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ParseError, match="dictionary"):
            load_project(path)


class TestParseProjectData:
    def test_datetimes_and_numeric_ids(self) -> None:
        task = {"id": 1, "label": "One", "start": "2025-01-06T09:00:00", "end": "2025-01-07"}
        project = parse_project_data({"tasks": [task]})
        (task,) = project.tasks
        assert task.id == "1"
        assert task.start == datetime(2025, 1, 6, 9)
        assert task.end == datetime(2025, 1, 7)

    def test_offset_timestamps_become_naive_utc(self) -> None:
        task = {
            "id": "a",
            "start": "2025-01-05T00:00:00Z",
            "end": "2025-01-07T02:00:00+02:00",
            "constraint_date": "2025-01-06T12:00:00-01:00",
        }
        (task,) = parse_project_data({"tasks": [task]}).tasks
        assert task.start == datetime(2025, 1, 5)
        assert task.end == datetime(2025, 1, 7)
        assert task.constraint_date == datetime(2025, 1, 6, 13)
        assert task.start.tzinfo is None

    def test_resource_name_defaults_to_id(self) -> None:
        project = parse_project_data({"resources": [{"id": "bob"}]})
        assert project.resources[0].name == "bob"

    def test_duplicate_ids_are_kept_for_validation(self) -> None:
        task = {"id": "t1", "start": "2025-01-06", "end": "2025-01-07"}
        project = parse_project_data({"tasks": [task, dict(task)]})
        assert [t.id for t in project.tasks] == ["t1", "t1"]

    def test_missing_dates_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Invalid project structure"):
            parse_project_data({"tasks": [{"id": "a", "start": "2025-01-06"}]})

    def test_unknown_field_rejected(self) -> None:
        task = {"id": "a", "start": "2025-01-06", "end": "2025-01-07", "colour": "red"}
        with pytest.raises(ValidationError):
            parse_project_data({"tasks": [task]})

    def test_bad_dependency_string(self) -> None:
        with pytest.raises(ValidationError, match="Invalid dependency"):
            parse_project_data({"dependencies": ["not a dependency"]})
