"""Dependency graph construction and reference checks.

Builds the depends-on adjacency list used by the scheduler and reports
dangling references, i.e. dependency ids that match no task in the
collection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .models import DanglingReference, TaskRecord

logger = logging.getLogger(__name__)


def build_dependency_graph(tasks: Iterable[TaskRecord]) -> dict[int, list[int]]:
    """Build an adjacency list of task dependencies.

    Edges point *from* dependent *to* dependency. A task listed twice keeps
    the dependencies of its last record.

    Args:
        tasks: Task records in collection order.

    Returns:
        Adjacency-list mapping ``task_id -> [dependency_ids]``.
    """
    graph: dict[int, list[int]] = {}
    for task in tasks:
        graph[task.id] = task.depends_on
    return graph


def find_dangling_references(tasks: Iterable[TaskRecord]) -> list[DanglingReference]:
    """Detect dependency ids that do not match any task.

    Dangling references are ignored by scheduling; this report exists so a
    caller can surface or clean them up.

    Returns:
        One entry per task with missing dependencies, in collection order.
        Empty when every reference resolves.
    """
    graph = build_dependency_graph(tasks)
    issues: list[DanglingReference] = []
    for task_id, deps in graph.items():
        missing = [d for d in deps if d not in graph]
        if missing:
            issues.append(DanglingReference(task_id=task_id, missing=missing))
    if issues:
        logger.debug("Found %d tasks with dangling dependency references", len(issues))
    return issues
