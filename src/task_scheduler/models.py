"""Domain models for the task scheduler.

``TaskRecord`` mirrors the task as the persistence layer stores it. The
scheduler never mutates records; it returns ``ScheduledTask`` wrappers that
carry the computed values alongside the original record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .dependencies import parse_dependencies


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class TaskRecord:
    """A task as supplied by the persistence collaborator.

    Attributes:
        id: Unique, stable task identifier.
        title: Display title.
        dependencies: Serialized JSON array of task ids this task waits on.
            May be ``None`` or malformed.
        duration: Duration in hours. ``None`` or non-positive means the
            configured default applies.
        due_date: Optional due date.
        created_at: Optional creation timestamp.
    """

    id: int
    title: str
    dependencies: str | None = None
    duration: float | None = None
    due_date: datetime | None = None
    created_at: datetime | None = None

    @property
    def depends_on(self) -> list[int]:
        """Parsed dependency ids (empty when absent or malformed)."""
        return parse_dependencies(self.dependencies)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "dependencies": self.dependencies,
            "duration": self.duration,
            "dueDate": _isoformat(self.due_date),
            "createdAt": _isoformat(self.created_at),
        }


@dataclass(frozen=True)
class CycleCandidate:
    """A task about to be created or updated, checked before persisting.

    Attributes:
        id: Task id, or ``None`` for a task not yet assigned one.
        dependencies: Proposed dependency ids.
    """

    id: int | None
    dependencies: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class DanglingReference:
    """A task that references dependency ids missing from the collection."""

    task_id: int
    missing: list[int]


@dataclass(frozen=True)
class ScheduledTask:
    """A task augmented with its computed schedule.

    ``earliest_start`` and ``completion`` are ``None`` only for tasks that a
    cyclic graph kept out of the topological order.
    """

    task: TaskRecord
    depends_on: list[int]
    earliest_start: datetime | None
    completion: datetime | None
    is_on_critical_path: bool = False

    @property
    def id(self) -> int:
        return self.task.id

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON-friendly shape consumed by the application.

        Returns:
            The record's fields plus ``dependsOn``, ``earliestStart`` and
            ``isOnCriticalPath``.
        """
        data = self.task.to_dict()
        data["dependsOn"] = list(self.depends_on)
        data["earliestStart"] = _isoformat(self.earliest_start)
        data["isOnCriticalPath"] = self.is_on_critical_path
        return data


@dataclass(frozen=True)
class Schedule:
    """Result of one schedule computation.

    Attributes:
        tasks: One entry per input record, in input order.
        order: Topological order of task ids. Shorter than ``tasks`` when
            the input graph contains a cycle.
        critical_path: Critical-path task ids from first to last.
        now: Reference timestamp sampled once for the computation.
    """

    tasks: list[ScheduledTask]
    order: list[int]
    critical_path: list[int]
    now: datetime

    @property
    def total_tasks(self) -> int:
        return len(self.tasks)

    @property
    def critical_path_tasks(self) -> int:
        return sum(1 for t in self.tasks if t.is_on_critical_path)

    @property
    def is_complete(self) -> bool:
        """True when every task received a position in the order."""
        return len(self.order) == len({t.id for t in self.tasks})

    def get(self, task_id: int) -> ScheduledTask | None:
        for scheduled in self.tasks:
            if scheduled.id == task_id:
                return scheduled
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "todos": [t.to_dict() for t in self.tasks],
            "order": list(self.order),
            "criticalPath": list(self.critical_path),
            "totalTodos": self.total_tasks,
            "criticalPathTodos": self.critical_path_tasks,
        }
