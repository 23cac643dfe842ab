"""Task Scheduler.

This package provides dependency parsing, circular dependency detection,
topological ordering, and earliest-start / critical path calculation for
collections of dependent tasks.
"""

from __future__ import annotations

from .config import SchedulerConfig, load_scheduler_config
from .cycle_detector import ensure_no_cycle, find_cycle, has_circular_dependency
from .dependencies import encode_dependencies, parse_dependencies
from .exceptions import (
    CircularDependencyError,
    ConfigError,
    SchedulerError,
    TaskLoadError,
)
from .graph import build_dependency_graph, find_dangling_references
from .models import (
    CycleCandidate,
    DanglingReference,
    Schedule,
    ScheduledTask,
    TaskRecord,
)
from .ordering import topological_sort
from .schedule import calculate_schedule, find_critical_path
from .task_loader import load_tasks, load_tasks_file

__all__ = [
    # Models
    "TaskRecord",
    "CycleCandidate",
    "DanglingReference",
    "ScheduledTask",
    "Schedule",
    # Dependency parsing
    "parse_dependencies",
    "encode_dependencies",
    # Graph
    "build_dependency_graph",
    "find_dangling_references",
    # Cycle detection
    "has_circular_dependency",
    "find_cycle",
    "ensure_no_cycle",
    # Ordering and scheduling
    "topological_sort",
    "calculate_schedule",
    "find_critical_path",
    # Loading and config
    "load_tasks",
    "load_tasks_file",
    "SchedulerConfig",
    "load_scheduler_config",
    # Exceptions
    "SchedulerError",
    "CircularDependencyError",
    "TaskLoadError",
    "ConfigError",
]
