"""Scheduler configuration.

Settings are read from a ``[scheduler]`` table in a TOML file, normally
``.task-scheduler.toml`` found by walking up from the working directory.
Every setting has a default, so a missing file is not an error for
``resolve_config``.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".task-scheduler.toml"


@dataclass(frozen=True)
class SchedulerConfig:
    """Tunable scheduling policy.

    Attributes:
        default_duration_hours: Duration applied to tasks with no positive
            duration.
        critical_tolerance_ms: Window within which a dependency's completion
            is considered to determine a task's earliest start when tracing
            the critical path.
    """

    default_duration_hours: float = 1.0
    critical_tolerance_ms: int = 1000


DEFAULT_SCHEDULER_CONFIG = SchedulerConfig()


def load_scheduler_config(config_file: Path) -> SchedulerConfig:
    """Load config from a TOML file.

    Args:
        config_file: Path to the TOML file.

    Returns:
        Parsed SchedulerConfig.

    Raises:
        FileNotFoundError: If the file is missing.
        ConfigError: On invalid TOML or out-of-range values.
    """
    if not config_file.exists():
        msg = f"Scheduler config not found: {config_file}"
        raise FileNotFoundError(msg)

    try:
        data = tomllib.loads(config_file.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {config_file}: {exc}"
        raise ConfigError(msg) from exc

    return _parse_config(data)


def _parse_config(data: dict[str, object]) -> SchedulerConfig:
    """Parse raw TOML data into a SchedulerConfig.

    Unknown fields are silently ignored for forward compatibility.
    """
    section = data.get("scheduler", {})
    if not isinstance(section, dict):
        msg = "[scheduler] section must be a table"
        raise ConfigError(msg)

    try:
        config = SchedulerConfig(
            default_duration_hours=float(
                section.get("default_duration_hours", DEFAULT_SCHEDULER_CONFIG.default_duration_hours)
            ),
            critical_tolerance_ms=int(
                section.get("critical_tolerance_ms", DEFAULT_SCHEDULER_CONFIG.critical_tolerance_ms)
            ),
        )
    except (TypeError, ValueError) as exc:
        msg = f"Invalid [scheduler] value: {exc}"
        raise ConfigError(msg) from exc

    _validate_config(config)
    return config


def _validate_config(config: SchedulerConfig) -> None:
    if config.default_duration_hours <= 0:
        msg = f"default_duration_hours must be positive, got {config.default_duration_hours}"
        raise ConfigError(msg)
    if config.critical_tolerance_ms < 0:
        msg = f"critical_tolerance_ms must not be negative, got {config.critical_tolerance_ms}"
        raise ConfigError(msg)


def find_config_file(start: Path | None = None) -> Path | None:
    """Walk up from start to find the nearest config file.

    Args:
        start: Starting directory. Defaults to cwd.

    Returns:
        Path to the config file, or None if not found.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def resolve_config(config_override: str | None = None) -> SchedulerConfig:
    """Resolve config for CLI commands with auto-discovery fallback.

    Args:
        config_override: Explicit --config path. If given, skips discovery.

    Returns:
        The loaded config, or the defaults when no file is found.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigError: If the file is corrupt or invalid.
    """
    if config_override is not None:
        return load_scheduler_config(Path(config_override))

    config_file = find_config_file()
    if config_file is None:
        return DEFAULT_SCHEDULER_CONFIG

    logger.debug("Using scheduler config %s", config_file)
    return load_scheduler_config(config_file)
