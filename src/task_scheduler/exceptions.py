"""Exceptions for the task scheduler.

The scheduling core itself never raises for bad dependency data; these
exceptions belong to the loading, configuration and policy helpers that
sit around it.
"""

from __future__ import annotations


class SchedulerError(Exception):
    """Base exception for all scheduler-related errors."""

    pass


class CircularDependencyError(SchedulerError):
    """Raised when a candidate dependency set would introduce a cycle.

    Attributes:
        cycle: Task ids forming the cycle, closed on the first id
            (e.g. ``[1, 2, 1]``).
    """

    def __init__(self, cycle: list[int]) -> None:
        self.cycle = cycle
        path = " -> ".join(str(task_id) for task_id in cycle)
        super().__init__(f"Circular dependency detected: {path}")


class TaskLoadError(SchedulerError):
    """Raised when task records fail validation.

    Attributes:
        errors: One message per invalid field or record.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Validation failed: {len(errors)} errors")


class ConfigError(SchedulerError, ValueError):
    """Raised when scheduler configuration is missing values or malformed."""

    pass
