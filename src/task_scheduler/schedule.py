"""Schedule calculation and critical path tracing.

Walks tasks in topological order to assign earliest-start and completion
timestamps, then traces the critical path backward from the task that
finishes last.

The reference "now" is sampled once per call from an injected clock, so
every task without dependencies starts at exactly the same instant and
tests can pin time without patching.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timedelta, timezone

from .config import DEFAULT_SCHEDULER_CONFIG, SchedulerConfig
from .graph import build_dependency_graph
from .models import Schedule, ScheduledTask, TaskRecord
from .ordering import topological_sort

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

DEFAULT_TOLERANCE = timedelta(milliseconds=DEFAULT_SCHEDULER_CONFIG.critical_tolerance_ms)


def utc_now() -> datetime:
    """Default clock: timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def _duration_hours(task: TaskRecord, config: SchedulerConfig) -> float:
    if task.duration is None or not math.isfinite(task.duration) or task.duration <= 0:
        return config.default_duration_hours
    return float(task.duration)


def _completion_time(start: datetime, hours: float, task_id: int) -> datetime:
    """Add a duration to a start time, clamping at the largest datetime."""
    try:
        return start + timedelta(hours=hours)
    except OverflowError:
        logger.warning(
            "Completion of task %s overflows the calendar (%s hours); clamping", task_id, hours
        )
        return datetime.max.replace(tzinfo=start.tzinfo)


def calculate_schedule(
    tasks: Sequence[TaskRecord],
    *,
    clock: Clock = utc_now,
    config: SchedulerConfig = DEFAULT_SCHEDULER_CONFIG,
) -> Schedule:
    """Compute earliest starts and the critical path for a task snapshot.

    The caller is responsible for rejecting cyclic input beforehand (see
    ``cycle_detector``). If a cycle slips through, tasks left out of the
    truncated order get no timestamps and are never on the critical path.

    Args:
        tasks: Task snapshot. Not modified.
        clock: Source of the reference "now", called exactly once.
        config: Default duration and critical-path tolerance.

    Returns:
        Schedule with one ScheduledTask per input record, in input order.
    """
    now = clock()
    dependencies = build_dependency_graph(tasks)
    records: dict[int, TaskRecord] = {task.id: task for task in tasks}
    order = topological_sort(tasks)

    earliest_start: dict[int, datetime] = {}
    completion: dict[int, datetime] = {}

    for task_id in order:
        start = now
        for dep in dependencies[task_id]:
            dep_completion = completion.get(dep)
            if dep_completion is not None and dep_completion > start:
                start = dep_completion
        earliest_start[task_id] = start
        completion[task_id] = _completion_time(
            start, _duration_hours(records[task_id], config), task_id
        )

    critical_path = find_critical_path(
        dependencies,
        earliest_start,
        completion,
        tolerance=timedelta(milliseconds=config.critical_tolerance_ms),
    )
    on_path = set(critical_path)

    scheduled = [
        ScheduledTask(
            task=task,
            depends_on=task.depends_on,
            earliest_start=earliest_start.get(task.id),
            completion=completion.get(task.id),
            is_on_critical_path=task.id in on_path,
        )
        for task in tasks
    ]

    logger.debug(
        "Scheduled %d tasks (%d ordered), critical path %s",
        len(scheduled),
        len(order),
        critical_path,
    )
    return Schedule(tasks=scheduled, order=order, critical_path=critical_path, now=now)


def find_critical_path(
    dependencies: Mapping[int, Sequence[int]],
    earliest_start: Mapping[int, datetime],
    completion: Mapping[int, datetime],
    *,
    tolerance: timedelta = DEFAULT_TOLERANCE,
) -> list[int]:
    """Trace the critical path back from the task that finishes last.

    The end task is the one with the latest completion; ties go to the
    lowest task id. From there, each step moves to the dependency whose
    completion is strictly within *tolerance* of the current task's earliest
    start, preferring the latest completion and, on an exact tie, the first
    dependency listed. Tracing stops when no dependency qualifies or a task
    repeats.

    Args:
        dependencies: Adjacency list ``task_id -> [dependency_ids]``.
        earliest_start: Earliest start per scheduled task.
        completion: Completion per scheduled task.
        tolerance: Matching window between a dependency's completion and
            the dependent's start.

    Returns:
        Critical-path task ids from first to last. Empty if nothing was
        scheduled.
    """
    if not completion:
        return []

    latest = max(completion.values())
    end_task = min(task_id for task_id, done in completion.items() if done == latest)

    path: list[int] = []
    visited: set[int] = set()
    current: int | None = end_task

    while current is not None and current not in visited:
        visited.add(current)
        path.append(current)

        start = earliest_start.get(current)
        critical_dep: int | None = None
        latest_dep_completion: datetime | None = None
        if start is not None:
            for dep in dependencies.get(current, ()):
                dep_completion = completion.get(dep)
                if dep_completion is None or abs(dep_completion - start) >= tolerance:
                    continue
                if latest_dep_completion is None or dep_completion > latest_dep_completion:
                    latest_dep_completion = dep_completion
                    critical_dep = dep
        current = critical_dep

    path.reverse()
    return path
