"""Runtime configuration — env-driven, with an optional ``config.json``.

Centralized config using pydantic-settings.  Values come from, in
increasing priority: defaults, ``LIVELOGGER_*`` environment variables
(or a ``.env`` file), the JSON config file, explicit overrides.

Examples
--------
Override via environment::

    export LIVELOGGER_DEBUG_MODE=true
    export LIVELOGGER_DATABASE_PATH=/data/events.db

Or persist a value::

    livelogger config set default_days_to_keep 14
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from livelogger.core.channel import OverflowPolicy

logger = logging.getLogger(__name__)

DEFAULT_HOME = Path.home() / ".livelogger"
CONFIG_FILENAME = "config.json"


class ConfigError(ValueError):
    """Raised for unknown configuration keys or invalid values."""


class LoggerSettings(BaseSettings):
    """All tunables of the live logger.

    ``database_path`` and ``log_dir`` default to locations under
    ``home_dir`` when not set explicitly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LIVELOGGER_",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    # Storage paths
    home_dir: Path = DEFAULT_HOME
    database_path: Path | None = None
    log_dir: Path | None = None

    # Logging
    log_level: str = "INFO"
    debug_mode: bool = False

    # Retention
    default_days_to_keep: int = 30

    # Pipeline
    channel_capacity: int = 0
    overflow_policy: OverflowPolicy = OverflowPolicy.GROW

    # Display
    display_max_entries: int | None = None
    refresh_hz: float = 4.0

    @model_validator(mode="after")
    def _check(self) -> LoggerSettings:
        if self.default_days_to_keep < 0:
            raise ValueError("default_days_to_keep must be >= 0")
        if self.channel_capacity < 0:
            raise ValueError("channel_capacity must be >= 0")
        if self.overflow_policy is not OverflowPolicy.GROW and self.channel_capacity == 0:
            raise ValueError(
                f"overflow_policy {self.overflow_policy.value!r} needs channel_capacity > 0"
            )
        if self.display_max_entries is not None and self.display_max_entries <= 0:
            raise ValueError("display_max_entries must be positive")
        if self.refresh_hz <= 0:
            raise ValueError("refresh_hz must be positive")
        return self

    @property
    def resolved_database_path(self) -> Path:
        return self.database_path or self.home_dir / "events.db"

    @property
    def resolved_log_dir(self) -> Path:
        return self.log_dir or self.home_dir / "logs"

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_mode else self.log_level.upper()


# Keys ``livelogger config set`` accepts.
SETTABLE_KEYS: tuple[str, ...] = tuple(LoggerSettings.model_fields)


def default_config_path() -> Path:
    return DEFAULT_HOME / CONFIG_FILENAME


def load_settings(config_path: Path | None = None, **overrides: Any) -> LoggerSettings:
    """Build settings from env, the JSON config file and *overrides*.

    Raises ``ConfigError`` when the file is unreadable or invalid.
    """
    path = config_path or default_config_path()
    values: dict[str, Any] = {}
    if path.exists():
        try:
            values = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"failed to parse config file {path}: {exc}") from exc
        if not isinstance(values, dict):
            raise ConfigError(f"config file {path} must contain a JSON object")

    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return LoggerSettings(**values)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc


def save_settings(settings: LoggerSettings, config_path: Path | None = None) -> Path:
    """Write *settings* to the JSON config file; returns its path."""
    path = config_path or default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(settings.model_dump(mode="json"), indent=2) + "\n", encoding="utf-8"
    )
    logger.debug("Saved configuration to %s", path)
    return path


def set_config_value(settings: LoggerSettings, key: str, value: str) -> LoggerSettings:
    """Return a copy of *settings* with *key* set from its string form."""
    if key not in SETTABLE_KEYS:
        raise ConfigError(f"unknown config key: {key}")
    data = settings.model_dump()
    data[key] = None if value.lower() in ("", "none", "null") else value
    try:
        return LoggerSettings(**data)
    except ValidationError as exc:
        raise ConfigError(f"invalid value for {key}: {value!r}") from exc
