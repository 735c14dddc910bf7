"""Configuration helpers for the move CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from move_cli.tomlfile import read_toml

DEFAULT_CONFIG_PATH = Path.home() / ".move" / "config.toml"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVEL_ENV_VAR = "MOVE_CLI_LOG_LEVEL"
ALLOWED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class CLIConfig:
    config_schema_version: int = 1
    log_level: str = DEFAULT_LOG_LEVEL
    experimental_warning: bool = True


class ConfigError(ValueError):
    """Raised when CLI config is invalid."""


def _to_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "on"}:
            return True
        if lowered in {"false", "0", "no", "off"}:
            return False
    raise ConfigError(f"{field_name} must be a boolean")


def _to_log_level(value: Any, source: str) -> str:
    level = str(value).strip().upper()
    if level not in ALLOWED_LOG_LEVELS:
        raise ConfigError(f"{source} must be one of: {', '.join(ALLOWED_LOG_LEVELS)}")
    return level


def load_cli_config(path: str | Path | None = None) -> CLIConfig:
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if config_path.exists():
        parsed = read_toml(config_path, ConfigError)
    else:
        parsed = {}

    section = parsed.get("cli")
    if isinstance(section, dict):
        source = section
    elif section is None:
        source = parsed
    else:
        raise ConfigError("[cli] must be a table")

    schema_version = source.get("config_schema_version", 1)
    if isinstance(schema_version, bool) or not isinstance(schema_version, int):
        raise ConfigError("config_schema_version must be an integer")
    if schema_version < 1:
        raise ConfigError("config_schema_version must be >= 1")

    env_log_level = os.getenv(LOG_LEVEL_ENV_VAR)
    if env_log_level and env_log_level.strip():
        log_level = _to_log_level(env_log_level, LOG_LEVEL_ENV_VAR)
    else:
        log_level = _to_log_level(source.get("log_level", DEFAULT_LOG_LEVEL), "log_level")

    experimental_warning = _to_bool(
        source.get("experimental_warning", True), "experimental_warning"
    )

    return CLIConfig(
        config_schema_version=schema_version,
        log_level=log_level,
        experimental_warning=experimental_warning,
    )
