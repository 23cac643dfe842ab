"""Circular dependency detection for task collections.

Checks whether adding (or updating) a candidate task would create a
circular wait anywhere in the dependency graph. Uses an iterative
depth-first traversal with an on-stack set, so long dependency chains do
not hit the interpreter recursion limit.

Detection is side-effect free. What to do with a positive result (reject
the candidate, strip the offending edge) is the caller's decision;
``ensure_no_cycle`` is provided for callers that want to reject.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from .dependencies import parse_dependencies
from .exceptions import CircularDependencyError
from .graph import build_dependency_graph
from .models import CycleCandidate, TaskRecord

logger = logging.getLogger(__name__)


def _graph_with_candidate(
    tasks: Sequence[TaskRecord], candidate: CycleCandidate | None
) -> dict[int, list[int]]:
    graph = build_dependency_graph(tasks)
    # A candidate without an id has no dependents yet, so it cannot close a cycle.
    if candidate is not None and candidate.id is not None:
        graph[candidate.id] = parse_dependencies(list(candidate.dependencies))
    return graph


def _trace_cycle(graph: dict[int, list[int]]) -> list[int]:
    """Depth-first search from every node, returning the first cycle found.

    Args:
        graph: Adjacency list ``task_id -> [dependency_ids]``. Ids missing
            from the mapping are treated as nodes with no dependencies.

    Returns:
        Cycle path closed on its first node (e.g. ``[1, 2, 1]``), or an
        empty list if the graph is acyclic.
    """
    explored: set[int] = set()

    for start in graph:
        if start in explored:
            continue

        path: list[int] = [start]
        on_stack: set[int] = {start}
        frames: list[Iterator[int]] = [iter(graph.get(start, ()))]

        while frames:
            dep = next(frames[-1], None)
            if dep is None:
                finished = path.pop()
                on_stack.discard(finished)
                explored.add(finished)
                frames.pop()
                continue
            if dep in on_stack:
                cycle = path[path.index(dep):]
                cycle.append(dep)
                return cycle
            if dep in explored:
                continue
            path.append(dep)
            on_stack.add(dep)
            frames.append(iter(graph.get(dep, ())))

    return []


def find_cycle(
    tasks: Sequence[TaskRecord], candidate: CycleCandidate | None = None
) -> list[int]:
    """Find one dependency cycle in the collection plus optional candidate.

    Args:
        tasks: Current task collection.
        candidate: Task to add or update before checking. Its dependencies
            replace any stored ones for the same id.

    Returns:
        Task ids forming the cycle, closed on the first id. Empty if none.
    """
    return _trace_cycle(_graph_with_candidate(tasks, candidate))


def has_circular_dependency(
    tasks: Sequence[TaskRecord], candidate: CycleCandidate
) -> bool:
    """Check whether introducing *candidate* leaves a cycle in the graph.

    Self-dependencies count as cycles, as do multi-node cycles regardless of
    which node the traversal starts from.

    Args:
        tasks: Current task collection. Not modified.
        candidate: Proposed id (``None`` for a new task) and dependency ids.

    Returns:
        ``True`` if the resulting graph contains a cycle.
    """
    cycle = find_cycle(tasks, candidate)
    if cycle:
        logger.debug("Cycle detected for candidate %s: %s", candidate.id, cycle)
    return bool(cycle)


def ensure_no_cycle(tasks: Sequence[TaskRecord], candidate: CycleCandidate) -> None:
    """Reject a candidate whose dependencies would create a cycle.

    Raises:
        CircularDependencyError: With the offending cycle path.
    """
    cycle = find_cycle(tasks, candidate)
    if cycle:
        raise CircularDependencyError(cycle)
