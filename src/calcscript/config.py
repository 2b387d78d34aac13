"""
Engine configuration for calcscript.

Settings come from three places, later ones winning:

1. Defaults on :class:`EngineConfig`
2. A TOML file (``calcscript.toml`` in the working directory, or an
   explicit path)
3. ``CALCSCRIPT_*`` environment variables

Example ``calcscript.toml``::

    [engine]
    strict_division = true
    max_call_depth = 32

    [logging]
    level = "DEBUG"
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "calcscript.toml"

ENV_STRICT_DIVISION = "CALCSCRIPT_STRICT_DIVISION"
ENV_MAX_CALL_DEPTH = "CALCSCRIPT_MAX_CALL_DEPTH"
ENV_LOG_LEVEL = "CALCSCRIPT_LOG_LEVEL"

_VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


@dataclass(frozen=True)
class EngineConfig:
    """Evaluation settings shared by every scope of one Context."""

    strict_division: bool = False  # raise DivisionByZeroError instead of inf/nan
    max_call_depth: int = 1000  # nesting limit for user-defined function calls
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.max_call_depth < 1:
            raise ConfigError(f"max_call_depth must be at least 1, got {self.max_call_depth}")
        if self.log_level.upper() not in _VALID_LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level!r}")


def load_config(path: Path | None = None) -> EngineConfig:
    """Load configuration from TOML and the environment.

    Args:
        path: Explicit config file. If omitted, ``./calcscript.toml`` is used
            when it exists.

    Returns:
        The merged configuration.

    Raises:
        ConfigError: If a value is invalid or an explicit path is missing.
    """
    config = EngineConfig()

    if path is not None:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        config = _apply_toml(config, path)
    else:
        default_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
        if default_path.exists():
            config = _apply_toml(config, default_path)

    return _apply_env(config)


def _apply_toml(config: EngineConfig, path: Path) -> EngineConfig:
    logger.debug("Loading config from %s", path)
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    engine: dict[str, Any] = data.get("engine", {})
    updates: dict[str, Any] = {}
    if "strict_division" in engine:
        updates["strict_division"] = _as_bool("strict_division", engine["strict_division"])
    if "max_call_depth" in engine:
        updates["max_call_depth"] = _as_int("max_call_depth", engine["max_call_depth"])
    if "log_level" in engine:
        updates["log_level"] = str(engine["log_level"]).upper()
    if "level" in data.get("logging", {}):
        updates["log_level"] = str(data["logging"]["level"]).upper()

    return replace(config, **updates)


def _apply_env(config: EngineConfig) -> EngineConfig:
    updates: dict[str, Any] = {}
    if (value := os.getenv(ENV_STRICT_DIVISION)) is not None:
        updates["strict_division"] = _as_bool(ENV_STRICT_DIVISION, value)
    if (value := os.getenv(ENV_MAX_CALL_DEPTH)) is not None:
        updates["max_call_depth"] = _as_int(ENV_MAX_CALL_DEPTH, value)
    if (value := os.getenv(ENV_LOG_LEVEL)) is not None:
        updates["log_level"] = value.upper()
    if not updates:
        return config
    return replace(config, **updates)


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e
