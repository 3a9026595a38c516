"""Environment configuration helpers for Lambda functions."""

from __future__ import annotations

import logging
import os

from .exceptions import ConfigurationError


def _read(key: str) -> str | None:
    value = os.getenv(key)
    if value is None or not value.strip():
        return None
    return value.strip()


def get_env(key: str, default: str | None = None, *, required: bool = False) -> str | None:
    value = _read(key)
    if value is None:
        if required and default is None:
            raise ConfigurationError(f"Environment variable {key} must be set")
        return default
    return value


def get_int_env(key: str, default: int | None = None, *, required: bool = False) -> int:
    value = _read(key)
    if value is None:
        if required or default is None:
            raise ConfigurationError(f"Environment variable {key} must be set")
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"Environment variable {key} must be an integer") from exc


def get_float_env(key: str, default: float | None = None, *, required: bool = False) -> float:
    value = _read(key)
    if value is None:
        if required or default is None:
            raise ConfigurationError(f"Environment variable {key} must be set")
        return default
    try:
        result = float(value)
    except ValueError as exc:
        raise ConfigurationError(f"Environment variable {key} must be numeric") from exc
    if result <= 0:
        raise ConfigurationError(f"Environment variable {key} must be positive")
    return result


def get_log_level(key: str = "LOG_LEVEL", default: int = logging.INFO) -> int:
    """Translate a level name such as ``DEBUG`` into its ``logging`` constant."""
    value = _read(key)
    if value is None:
        return default
    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Environment variable {key} must be a logging level name")
    return level
