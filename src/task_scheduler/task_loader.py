"""Task record loading and validation.

Converts raw task dictionaries (as decoded from JSON) into ``TaskRecord``
objects, validating each with pydantic. All problems across the batch are
collected and raised together so a caller sees every bad record at once.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from .dependencies import encode_dependencies, parse_dependencies
from .exceptions import TaskLoadError
from .models import TaskRecord

logger = logging.getLogger(__name__)

# Roughly a century of work; keeps completion times inside the calendar.
MAX_DURATION_HOURS = 1_000_000.0


class TaskRecordModel(BaseModel):
    """Validation model for one incoming task record.

    ``dependencies`` may arrive either in its stored string form or as a
    decoded list; lists are re-encoded so the record always holds the
    stored form. Malformed strings are kept as-is and degrade to "no
    dependencies" at parse time.
    """

    model_config = {"extra": "ignore", "populate_by_name": True}

    id: int
    title: str
    dependencies: str | list[Any] | None = None
    duration: float | None = Field(
        default=None, gt=0, le=MAX_DURATION_HOURS, allow_inf_nan=False
    )
    due_date: datetime | None = Field(default=None, alias="dueDate")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is not empty or whitespace."""
        if not v or not v.strip():
            raise ValueError("title must not be empty or whitespace")
        return v.strip()

    def to_record(self) -> TaskRecord:
        dependencies = self.dependencies
        if isinstance(dependencies, list):
            dependencies = encode_dependencies(parse_dependencies(dependencies))
        return TaskRecord(
            id=self.id,
            title=self.title,
            dependencies=dependencies,
            duration=self.duration,
            due_date=self.due_date,
            created_at=self.created_at,
        )


def _format_error(index: int, error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "record"
    return f"Task {index}: {location}: {error.get('msg', 'invalid value')}"


def load_tasks(data: Any) -> list[TaskRecord]:
    """Validate decoded task data and build task records.

    Args:
        data: A list of task dictionaries. Each needs at minimum ``id`` and
            ``title``; ``dependencies``, ``duration``, ``dueDate`` and
            ``createdAt`` are optional.

    Returns:
        Task records in input order.

    Raises:
        TaskLoadError: If the data is not a list, any record is invalid, or
            task ids repeat.
    """
    if not isinstance(data, list):
        raise TaskLoadError(["Task data must be a JSON array of task objects"])

    errors: list[str] = []
    records: list[TaskRecord] = []
    seen: set[int] = set()

    for index, item in enumerate(data):
        try:
            model = TaskRecordModel.model_validate(item)
        except ValidationError as exc:
            errors.extend(_format_error(index, err) for err in exc.errors())
            continue
        if model.id in seen:
            errors.append(f"Task {index}: duplicate id {model.id}")
            continue
        seen.add(model.id)
        records.append(model.to_record())

    if errors:
        raise TaskLoadError(errors)

    logger.debug("Loaded %d task records", len(records))
    return records


def load_tasks_file(path: Path) -> list[TaskRecord]:
    """Load task records from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        TaskLoadError: If the file is not valid JSON or records are invalid.
    """
    if not path.exists():
        msg = f"Task file not found: {path}"
        raise FileNotFoundError(msg)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise TaskLoadError([f"Invalid JSON in {path}: {exc}"]) from exc

    return load_tasks(data)
