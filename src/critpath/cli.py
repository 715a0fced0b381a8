"""Command-line interface for critpath."""

from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import Annotated

import typer

from . import context
from .exceptions import CritpathError, InfeasibleScheduleError
from .loader import load_project
from .logger import setup_logger
from .models import Project
from .scheduler import (
    ScheduleResult,
    ValidationResult,
    calculate_schedule,
    calculate_resource_utilization,
    detect_cycles,
    overallocated_days,
    topological_sort,
    validate,
)
from .unified_config import UnifiedConfig, discover_config

app = typer.Typer(
    name="critpath",
    help="Critical Path Method scheduling for task dependency graphs",
    add_completion=False,
)

ProjectFile = Annotated[Path, typer.Argument(help="Path to the project YAML file")]


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to unified config file (default: critpath_config.yaml)",
        ),
    ] = None,
    as_of: Annotated[
        str | None,
        typer.Option("--as-of", help="Date to treat as today (YYYY-MM-DD). Defaults to now"),
    ] = None,
) -> None:
    """Global options for critpath commands."""
    setup_logger(verbose)
    context.set_config_path(config)
    context.set_as_of(_parse_date_option(as_of, "as-of"))


def _parse_date_option(date_str: str | None, option_name: str) -> datetime | None:
    """Parse a YYYY-MM-DD option into a midnight datetime."""
    if date_str is None:
        return None

    try:
        return datetime.combine(date.fromisoformat(date_str), time())
    except ValueError:
        typer.echo(
            f"Error: Invalid date format '{date_str}' for --{option_name}. Use YYYY-MM-DD format.",
            err=True,
        )
        raise typer.Exit(1) from None


def _load(file: Path) -> tuple[Project, UnifiedConfig]:
    """Load the project and its config, exiting with a message on failure."""
    try:
        project = load_project(file)
        config = discover_config(project_path=file)
    except (CritpathError, FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    return project, config


def _validate(project: Project, config: UnifiedConfig) -> ValidationResult:
    return validate(
        project.tasks,
        project.dependencies,
        current_time=context.get_context().as_of,
        config=config.validation,
    )


def _display_issues(result: ValidationResult) -> None:
    for error in result.errors:
        typer.echo(str(error), err=True)
    for warning in result.warnings:
        typer.echo(str(warning), err=True)


def _format_date(value: datetime) -> str:
    if value.time() == time():
        return value.date().isoformat()
    return value.isoformat(sep=" ", timespec="minutes")


def _display_schedule_results(project: Project, result: ScheduleResult) -> None:
    """Display the CPM table and critical path to stdout."""
    title = f"Schedule: {project.name}" if project.name else "Schedule"
    typer.echo(title)
    typer.echo("=" * 80)
    typer.echo(
        f"{'Task':<20} {'ES':<12} {'EF':<12} {'LS':<12} {'LF':<12} {'TF':>4} {'FF':>4}"
    )

    seen: set[str] = set()
    for task in project.tasks:
        sched = result.get_schedule(task.id)
        if sched is None or task.id in seen:
            continue
        seen.add(task.id)

        marker = ""
        if sched.is_infeasible:
            marker = "  (infeasible)"
        elif sched.is_critical:
            marker = "  *"
        typer.echo(
            f"{task.id:<20} {_format_date(sched.early_start):<12} "
            f"{_format_date(sched.early_finish):<12} {_format_date(sched.late_start):<12} "
            f"{_format_date(sched.late_finish):<12} {sched.total_float:>4} "
            f"{sched.free_float:>4}{marker}"
        )

    typer.echo("")
    if result.project_start is not None and result.project_end is not None:
        typer.echo(
            f"Project: {_format_date(result.project_start)} to "
            f"{_format_date(result.project_end)} ({result.project_duration} days)"
        )
    typer.echo(f"Critical path: {' → '.join(result.critical_path) or '(none)'}")
    if result.fallback_task_ids:
        typer.echo(f"Declared dates kept for: {', '.join(result.fallback_task_ids)}")


@app.command()
def schedule(
    file: ProjectFile = Path("project.yaml"),
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Fail if any task ends up with negative float"),
    ] = False,
) -> None:
    """Run the Critical Path Method and display early/late dates and float."""
    project, config = _load(file)

    validation = _validate(project, config)
    if not validation.is_valid:
        _display_issues(validation)
        typer.echo("Error: Fix validation errors before scheduling", err=True)
        raise typer.Exit(1)

    scheduler_config = config.scheduler
    if strict:
        scheduler_config = scheduler_config.model_copy(update={"fail_on_negative_float": True})

    try:
        result = calculate_schedule(project.tasks, project.dependencies, scheduler_config)
    except InfeasibleScheduleError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    _display_schedule_results(project, result)

    if validation.warnings:
        typer.echo("\nWarnings:", err=True)
        for warning in validation.warnings:
            typer.echo(f"  - {warning}", err=True)


@app.command(name="validate")
def validate_command(file: ProjectFile = Path("project.yaml")) -> None:
    """Check a project for structural errors and warnings."""
    project, config = _load(file)
    result = _validate(project, config)

    if not result.has_issues:
        typer.echo(f"✓ {len(project.tasks)} tasks, no issues found")
        return

    _display_issues(result)
    typer.echo(f"{len(result.errors)} error(s), {len(result.warnings)} warning(s)")
    if not result.is_valid:
        raise typer.Exit(1)


@app.command()
def order(
    file: ProjectFile = Path("project.yaml"),
    explicit: Annotated[
        bool,
        typer.Option("--explicit", help="Also follow typed dependencies, not only task ids"),
    ] = False,
) -> None:
    """Print task ids so that every task follows its predecessors."""
    project, _config = _load(file)

    ordered = topological_sort(project.tasks, project.dependencies, include_explicit=explicit)
    if ordered is None:
        cycles = detect_cycles(project.tasks, project.dependencies, include_explicit=explicit)
        for cycle in cycles:
            typer.echo(f"Cycle: {' → '.join(cycle)}", err=True)
        if not cycles:
            typer.echo("Error: Duplicate task ids; run validate for details", err=True)
        raise typer.Exit(1)

    for task_id in ordered:
        typer.echo(task_id)


@app.command()
def utilization(
    file: ProjectFile = Path("project.yaml"),
    start: Annotated[
        str | None, typer.Option("--start", help="First day to report (YYYY-MM-DD)")
    ] = None,
    end: Annotated[
        str | None, typer.Option("--end", help="Day after the last reported (YYYY-MM-DD)")
    ] = None,
) -> None:
    """Report days on which a resource has more work than capacity."""
    project, _config = _load(file)

    window_start = _parse_date_option(start, "start") or project.computed_start
    window_end = _parse_date_option(end, "end") or project.computed_end
    if window_start is None or window_end is None or not project.resources:
        typer.echo("Nothing to report")
        return

    usage = calculate_resource_utilization(
        project.tasks, project.resources, window_start, window_end
    )
    overloaded = overallocated_days(usage)
    if not overloaded:
        typer.echo(f"✓ No overallocation across {len(project.resources)} resource(s)")
        return

    for resource in project.resources:
        days = overloaded.get(resource.id)
        if not days:
            continue
        typer.echo(f"{resource.name} ({resource.id}): capacity {resource.capacity:g}")
        peaks = {u.date: u.allocated for u in usage[resource.id]}
        for day in days:
            typer.echo(f"  {_format_date(day)}  allocated {peaks[day]:g}")


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
