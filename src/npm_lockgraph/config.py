"""Configuration loader for dependency scans.

Reads settings from a JSON file and validates it against
``schemas/config.schema.json``. Every key is optional:

- ``namePattern``: glob of package names to report (default ``*``)
- ``version``: selector the resolved version must satisfy
- ``onlyDirect``: skip transitive packages (default true)
- ``excludes``: extra directory names to skip during discovery
- ``advisories``: advisory source (directory, JSON file or URL)
- ``logLevel``: logging level name (default ``WARNING``)
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .validators.documents import SchemaValidationError, validate_settings

DEFAULT_CONFIG_NAME = ".npm-lockgraph.json"
CONFIG_PATH_ENV_VAR = "NPM_LOCKGRAPH_CONFIG"
LOG_LEVEL_ENV_VAR = "NPM_LOCKGRAPH_LOG_LEVEL"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be loaded or is invalid."""


@dataclass(slots=True, frozen=True)
class Settings:
    """Top-level settings container."""

    name_pattern: str = "*"
    version: str | None = None
    only_direct: bool = True
    excludes: tuple[str, ...] = ()
    advisories: str | None = None
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create Settings from a parsed config document, validating it first."""
        try:
            validate_settings(data)
        except SchemaValidationError as exc:
            raise ConfigError(f"Invalid configuration:{exc}") from exc

        defaults = cls()
        return cls(
            name_pattern=data.get("namePattern", defaults.name_pattern),
            version=data.get("version"),
            only_direct=data.get("onlyDirect", defaults.only_direct),
            excludes=tuple(data.get("excludes", ())),
            advisories=data.get("advisories"),
            log_level=data.get("logLevel", defaults.log_level),
        )

    def with_overrides(self, **changes: Any) -> Settings:
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _resolve_config_path(path: Path | str | None = None) -> Path | None:
    """Resolve the configuration file path.

    Priority:
    1. Explicit path argument
    2. NPM_LOCKGRAPH_CONFIG environment variable
    3. .npm-lockgraph.json in the working directory, when present
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)

    default = Path.cwd() / DEFAULT_CONFIG_NAME
    return default if default.is_file() else None


def load_settings(path: Path | str | None = None) -> Settings:
    """Load and validate settings, falling back to defaults without a file.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    config_path = _resolve_config_path(path)

    if config_path is None:
        settings = Settings()
    else:
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        try:
            content = config_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Failed to read configuration file: {exc}") from exc

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc

        settings = Settings.from_dict(data)

    env_level = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().upper()
    if env_level:
        if env_level not in LOG_LEVELS:
            raise ConfigError(f"{LOG_LEVEL_ENV_VAR} must be one of {', '.join(LOG_LEVELS)}")
        settings = replace(settings, log_level=env_level)

    return settings
