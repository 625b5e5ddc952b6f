"""Configuration loading for ticketctl.

Settings are resolved with the precedence: explicit argument, environment
variable, ``.ticketctl.yaml`` config file, built-in default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILE_NAME = ".ticketctl.yaml"
DEFAULT_ROOT_DIR = "tickets"
DEFAULT_LOG_LEVEL = "WARNING"

ENV_ROOT = "TICKET_ROOT"
ENV_USER = "TICKET_USER"
ENV_LOG_DIR = "TICKETCTL_LOG_DIR"
ENV_LOG_LEVEL = "TICKETCTL_LOG_LEVEL"

KNOWN_KEYS = ("root", "reporter", "log_dir", "log_level")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when configuration is invalid."""


@dataclass
class Settings:
    """Resolved configuration for one invocation."""

    root: Path
    reporter: str
    log_dir: Path | None = None
    log_level: str = DEFAULT_LOG_LEVEL


def load_config_file(config_path: Path | str) -> dict[str, Any]:
    """Load a ticketctl YAML config file.

    Args:
        config_path: Path to the config file.

    Returns:
        Mapping of config keys. Relative paths are resolved against the
        file's directory.

    Raises:
        ConfigError: If the file is missing, invalid YAML, not a mapping, or
            has unknown keys.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a YAML mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - set(KNOWN_KEYS))
    if unknown:
        raise ConfigError(f"Unknown configuration keys in {config_path}: {', '.join(unknown)}")

    base = config_path.parent
    for key in ("root", "log_dir"):
        if data.get(key) is not None:
            data[key] = base / str(data[key])
    return data


def find_config(start_path: Path | str | None = None) -> Path | None:
    """Find .ticketctl.yaml by walking up the directory tree.

    Args:
        start_path: Starting directory. Defaults to current directory.

    Returns:
        Path to the config file, or None if there is none.
    """
    current = Path.cwd() if start_path is None else Path(start_path)
    current = current.resolve()

    for directory in (current, *current.parents):
        config_path = directory / CONFIG_FILE_NAME
        if config_path.is_file():
            return config_path
    return None


def load_settings(
    root: Path | str | None = None,
    config_path: Path | str | None = None,
) -> Settings:
    """Resolve settings from arguments, environment, and config file.

    Args:
        root: Explicit ticket root directory (highest precedence).
        config_path: Explicit config file. Auto-detected if not specified.

    Returns:
        Resolved Settings.

    Raises:
        ConfigError: If the config file is invalid or the log level is unknown.
    """
    if config_path is None:
        config_path = find_config()
    file_data = load_config_file(config_path) if config_path is not None else {}

    if root is None:
        root = os.environ.get(ENV_ROOT) or file_data.get("root") or Path.cwd() / DEFAULT_ROOT_DIR

    reporter = (
        os.environ.get(ENV_USER)
        or file_data.get("reporter")
        or os.environ.get("USER")
        or "unknown"
    )

    log_dir = os.environ.get(ENV_LOG_DIR) or file_data.get("log_dir")
    log_level = os.environ.get(ENV_LOG_LEVEL) or file_data.get("log_level") or DEFAULT_LOG_LEVEL
    log_level = str(log_level).upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level '{log_level}'. Must be one of: {', '.join(LOG_LEVELS)}"
        )

    return Settings(
        root=Path(root),
        reporter=str(reporter),
        log_dir=Path(log_dir) if log_dir else None,
        log_level=log_level,
    )
