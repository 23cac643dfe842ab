"""Topological ordering of tasks using Kahn's algorithm.

The order respects every dependency edge whose target exists in the
collection. Ties are resolved FIFO in collection order.

Cycles are not reported here: tasks on (or downstream of) a cycle never
reach in-degree zero, so the returned order is simply shorter than the
collection. Callers are expected to run the cycle check first.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence

from .graph import build_dependency_graph
from .models import TaskRecord

logger = logging.getLogger(__name__)


def topological_sort(tasks: Sequence[TaskRecord]) -> list[int]:
    """Return task ids in a dependency-respecting order.

    Args:
        tasks: Task collection. Iteration order decides ties.

    Returns:
        Each task id at most once, every task after all of its existing
        dependencies. Truncated if the graph contains a cycle.
    """
    graph = build_dependency_graph(tasks)

    # Edge: dep -> task (dep must complete before task)
    adj: dict[int, list[int]] = {task_id: [] for task_id in graph}
    in_degree: dict[int, int] = {task_id: 0 for task_id in graph}

    for task_id, deps in graph.items():
        for dep in deps:
            if dep not in graph:
                continue  # Dangling refs contribute no in-degree
            adj[dep].append(task_id)
            in_degree[task_id] += 1

    queue: deque[int] = deque(k for k, degree in in_degree.items() if degree == 0)

    order: list[int] = []
    while queue:
        node = queue.popleft()
        order.append(node)
        for neighbor in adj[node]:
            in_degree[neighbor] -= 1
            if in_degree[neighbor] == 0:
                queue.append(neighbor)

    if len(order) != len(graph):
        remaining = sorted(k for k, d in in_degree.items() if d > 0)
        logger.warning(
            "Topological order truncated: %d of %d tasks unplaced %s",
            len(remaining),
            len(graph),
            remaining,
        )
    return order
