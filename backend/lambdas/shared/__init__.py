"""Shared helpers reused across Lambda handlers."""

from .config import get_env, get_float_env, get_int_env, get_log_level
from .exceptions import AnalysisError, ConfigurationError, ServiceError, ValidationError
from .logging import get_logger

__all__ = [
    "get_env",
    "get_int_env",
    "get_float_env",
    "get_log_level",
    "AnalysisError",
    "ConfigurationError",
    "ServiceError",
    "ValidationError",
    "get_logger",
]
