"""Dependency field parsing for task records.

Task records store their dependencies as an opaque JSON-encoded string.
These helpers convert between that stored form and a list of integer task
ids. Parsing is fail-open: a corrupt field degrades the task to "no
dependencies" rather than blocking a whole schedule computation.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

logger = logging.getLogger(__name__)


def parse_dependencies(raw: Any) -> list[int]:
    """Parse a stored dependencies value into a list of task ids.

    Handles ``None``, empty string, ``"null"``, ``"[]"``, valid JSON arrays
    and already-decoded lists. Elements that are not integers (including
    booleans, floats and numeric strings) are dropped.

    Args:
        raw: The raw value of the task's dependencies field.

    Returns:
        Dependency task ids in their encoded order. Empty for any value that
        does not represent real dependencies.
    """
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        parsed: Any = raw
    else:
        text = str(raw).strip()
        if not text or text in ("null", "[]"):
            return []
        try:
            parsed = json.loads(text)
        except (ValueError, TypeError, RecursionError):
            logger.debug("Ignoring unparseable dependencies field: %r", text[:80])
            return []
    if not isinstance(parsed, (list, tuple)):
        return []
    return [item for item in parsed if isinstance(item, int) and not isinstance(item, bool)]


def encode_dependencies(task_ids: Iterable[int]) -> str | None:
    """Encode dependency ids into the stored string form.

    Returns:
        A JSON array string, or ``None`` when there are no dependencies.
    """
    ids = [int(task_id) for task_id in task_ids]
    if not ids:
        return None
    return json.dumps(ids)
