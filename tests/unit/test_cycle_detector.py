"""Tests for circular dependency detection.

Creates TaskRecord objects directly (pure functions, no mocks needed).
"""

from __future__ import annotations

import pytest

from task_scheduler.cycle_detector import (
    ensure_no_cycle,
    find_cycle,
    has_circular_dependency,
)
from task_scheduler.exceptions import CircularDependencyError
from task_scheduler.models import CycleCandidate, TaskRecord


def _make_task(task_id: int, depends_on: list[int] | None = None) -> TaskRecord:
    """Create a minimal TaskRecord for testing."""
    dependencies = None if depends_on is None else str(depends_on)
    return TaskRecord(id=task_id, title=f"Task {task_id}", dependencies=dependencies)


def test_linear_chain_no_cycles() -> None:
    """1 <- 2 <- 3 linear chain has no cycles."""
    tasks = [_make_task(1), _make_task(2, [1]), _make_task(3, [2])]

    assert has_circular_dependency(tasks, CycleCandidate(id=None)) is False


def test_self_reference_detected() -> None:
    """A candidate depending on itself is a cycle."""
    tasks = [_make_task(1)]

    assert has_circular_dependency(tasks, CycleCandidate(id=1, dependencies=[1])) is True


def test_stored_self_reference_detected() -> None:
    """A self-dependency already in the collection is also reported."""
    tasks = [_make_task(1, [1])]

    assert find_cycle(tasks) == [1, 1]


def test_two_node_cycle_from_either_side() -> None:
    """Tasks 1 and 2 depending on each other is a cycle whichever is checked."""
    tasks = [_make_task(1, [2]), _make_task(2, [1])]

    assert has_circular_dependency(tasks, CycleCandidate(id=1, dependencies=[2])) is True
    assert has_circular_dependency(tasks, CycleCandidate(id=2, dependencies=[1])) is True


@pytest.mark.parametrize("order", [[1, 2, 3], [2, 3, 1], [3, 1, 2]])
def test_three_node_cycle_any_start(order: list[int]) -> None:
    """1 -> 2 -> 3 -> 1 is found regardless of traversal start."""
    deps = {1: [2], 2: [3], 3: [1]}
    tasks = [_make_task(i, deps[i]) for i in order]

    cycle = find_cycle(tasks)

    assert cycle[0] == cycle[-1]
    assert set(cycle) == {1, 2, 3}
    assert len(cycle) == 4


def test_candidate_closes_cycle() -> None:
    """Updating task 1 to depend on 3 closes 1 <- 2 <- 3."""
    tasks = [_make_task(1), _make_task(2, [1]), _make_task(3, [2])]

    candidate = CycleCandidate(id=1, dependencies=[3])

    assert has_circular_dependency(tasks, candidate) is True
    assert find_cycle(tasks, candidate) == [1, 3, 2, 1]


def test_candidate_replaces_stored_dependencies() -> None:
    """A candidate's dependencies override its stored ones, removing a cycle."""
    tasks = [_make_task(1, [2]), _make_task(2, [1])]

    assert has_circular_dependency(tasks, CycleCandidate(id=1, dependencies=[])) is False


def test_new_task_without_id_cannot_close_cycle() -> None:
    """A brand-new task has no dependents, so it never creates a cycle."""
    tasks = [_make_task(1), _make_task(2, [1])]

    candidate = CycleCandidate(id=None, dependencies=[1, 2])

    assert has_circular_dependency(tasks, candidate) is False


def test_diamond_no_cycles() -> None:
    """Diamond shape 1 <- {2, 3} <- 4 has no cycles."""
    tasks = [
        _make_task(1),
        _make_task(2, [1]),
        _make_task(3, [1]),
        _make_task(4, [2, 3]),
    ]

    assert find_cycle(tasks) == []


def test_dangling_and_malformed_refs_ignored() -> None:
    """Unknown ids and unparseable fields never produce a cycle."""
    tasks = [
        _make_task(1, [99]),
        TaskRecord(id=2, title="Task 2", dependencies="not-json"),
    ]

    assert has_circular_dependency(tasks, CycleCandidate(id=2, dependencies=[1, 42])) is False


def test_cycle_in_subgraph() -> None:
    """Clean 1 <- 2 chain plus separate 3 <-> 4 cycle; only cycle nodes reported."""
    tasks = [
        _make_task(1),
        _make_task(2, [1]),
        _make_task(3, [4]),
        _make_task(4, [3]),
    ]

    cycle = find_cycle(tasks)

    assert set(cycle) == {3, 4}


def test_empty_collection() -> None:
    """No tasks and an id-less candidate -> no cycle."""
    assert has_circular_dependency([], CycleCandidate(id=None, dependencies=[1])) is False


def test_does_not_mutate_tasks() -> None:
    """The task collection is left untouched."""
    tasks = [_make_task(1), _make_task(2, [1])]
    snapshot = list(tasks)

    has_circular_dependency(tasks, CycleCandidate(id=1, dependencies=[2]))

    assert tasks == snapshot


def test_ensure_no_cycle_raises_with_path() -> None:
    """ensure_no_cycle raises CircularDependencyError carrying the cycle."""
    tasks = [_make_task(1), _make_task(2, [1])]

    with pytest.raises(CircularDependencyError) as exc_info:
        ensure_no_cycle(tasks, CycleCandidate(id=1, dependencies=[2]))

    assert exc_info.value.cycle == [1, 2, 1]
    assert "1 -> 2 -> 1" in str(exc_info.value)


def test_ensure_no_cycle_passes_for_acyclic() -> None:
    """ensure_no_cycle returns None when no cycle is introduced."""
    tasks = [_make_task(1), _make_task(2, [1])]

    assert ensure_no_cycle(tasks, CycleCandidate(id=3, dependencies=[2])) is None


@pytest.mark.slow
def test_long_chain_does_not_recurse() -> None:
    """A 20k-task chain is handled without hitting the recursion limit."""
    size = 20_000
    tasks = [_make_task(1)] + [_make_task(i, [i - 1]) for i in range(2, size + 1)]

    assert has_circular_dependency(tasks, CycleCandidate(id=1, dependencies=[size])) is True


def test_unparseable_large_literal_treated_as_no_dependencies() -> None:
    """A dependency field too large to decode does not break the check."""
    tasks = [TaskRecord(id=1, title="Task 1", dependencies="[" + "9" * 5000 + "]")]

    assert find_cycle(tasks) == []
    assert has_circular_dependency(tasks, CycleCandidate(id=2, dependencies=[1])) is False
