"""Root conftest.py for pytest configuration.

Provides --run-slow flag to opt in to slow tests (skipped by default) and
a pinned clock for schedule tests.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

import pytest

FIXED_NOW = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="Run tests marked @pytest.mark.slow"
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="needs --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def fixed_now() -> datetime:
    """Reference time used by the pinned clock."""
    return FIXED_NOW


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW

