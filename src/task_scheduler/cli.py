"""CLI for the task scheduler.

Reads a JSON array of task records and runs the scheduling core over it.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from .config import resolve_config
from .cycle_detector import find_cycle
from .exceptions import SchedulerError
from .graph import find_dangling_references
from .models import CycleCandidate, Schedule, TaskRecord
from .ordering import topological_sort
from .schedule import calculate_schedule
from .task_loader import load_tasks_file

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

_TASK_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """Task Scheduler - dependency ordering and critical path analysis."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _load_or_exit(task_file: Path) -> list[TaskRecord]:
    logger.debug("Loading tasks from %s", task_file)
    try:
        return load_tasks_file(task_file)
    except (FileNotFoundError, SchedulerError) as exc:
        click.echo(f"Error: {exc}", err=True)
        for message in getattr(exc, "errors", []):
            click.echo(f"  - {message}", err=True)
        sys.exit(1)


def _parse_id_list(value: str) -> list[int]:
    ids: list[int] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            raise click.BadParameter(f"'{part}' is not an integer task id") from None
    return ids


@cli.command()
@click.argument("task_file", type=_TASK_FILE)
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Scheduler config TOML (default: nearest .task-scheduler.toml)")
@click.option("--json", "as_json", is_flag=True, help="Print the schedule as JSON")
def schedule(task_file: Path, config_path: str | None, as_json: bool) -> None:
    """Compute earliest starts and the critical path."""
    try:
        config = resolve_config(config_path)
    except (FileNotFoundError, SchedulerError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    tasks = _load_or_exit(task_file)
    cycle = find_cycle(tasks)
    if cycle:
        click.echo(
            "Warning: circular dependency "
            + " -> ".join(str(t) for t in cycle)
            + "; affected tasks are left unscheduled",
            err=True,
        )

    result = calculate_schedule(tasks, config=config)
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_schedule(result)


def _print_schedule(result: Schedule) -> None:
    """Print a schedule to console in execution order."""
    click.echo(f"Reference time: {result.now.isoformat()}")
    click.echo(f"Tasks: {result.total_tasks}  Critical: {result.critical_path_tasks}")
    click.echo("=" * 50)
    for task_id in result.order:
        scheduled = result.get(task_id)
        if scheduled is None:
            continue
        marker = "*" if scheduled.is_on_critical_path else " "
        start = scheduled.earliest_start.isoformat() if scheduled.earliest_start else "-"
        click.echo(f"{marker} [{task_id}] {scheduled.task.title}  start={start}")
    if result.critical_path:
        click.echo("\nCritical path: " + " -> ".join(str(t) for t in result.critical_path))


@cli.command()
@click.argument("task_file", type=_TASK_FILE)
def order(task_file: Path) -> None:
    """Print task ids in dependency order."""
    tasks = _load_or_exit(task_file)
    ordered = topological_sort(tasks)
    for task_id in ordered:
        click.echo(str(task_id))
    if len(ordered) < len(tasks):
        click.echo(
            f"Warning: order truncated ({len(ordered)} of {len(tasks)} tasks), "
            "dependency graph contains a cycle",
            err=True,
        )
        sys.exit(1)


@cli.command("check-cycle")
@click.argument("task_file", type=_TASK_FILE)
@click.option("--task-id", type=int, default=None,
              help="Id of the task being updated (omit for a new task)")
@click.option("--depends-on", default="", help="Comma-separated dependency ids")
def check_cycle(task_file: Path, task_id: int | None, depends_on: str) -> None:
    """Check whether a proposed dependency set would create a cycle."""
    tasks = _load_or_exit(task_file)
    candidate = CycleCandidate(id=task_id, dependencies=_parse_id_list(depends_on))
    cycle = find_cycle(tasks, candidate)
    if cycle:
        click.echo("Circular dependency: " + " -> ".join(str(t) for t in cycle))
        sys.exit(1)
    click.echo("No circular dependency")


@cli.command()
@click.argument("task_file", type=_TASK_FILE)
def validate(task_file: Path) -> None:
    """Report dangling references and circular dependencies."""
    tasks = _load_or_exit(task_file)
    passed = True

    dangling = find_dangling_references(tasks)
    if dangling:
        passed = False
        click.echo("Dangling dependency references:")
        for issue in dangling:
            missing = ", ".join(str(m) for m in issue.missing)
            click.echo(f"  - task {issue.task_id}: {missing}")

    cycle = find_cycle(tasks)
    if cycle:
        passed = False
        click.echo("Circular dependency: " + " -> ".join(str(t) for t in cycle))

    if not passed:
        sys.exit(1)
    click.echo(f"OK: {len(tasks)} tasks, no dangling references, no cycles")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
