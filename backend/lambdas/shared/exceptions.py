"""Error taxonomy shared by the text analyzer Lambda."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when required environment settings are missing or invalid."""


class ValidationError(ValueError):
    """Raised when the incoming request body violates an input constraint."""


class ServiceError(RuntimeError):
    """Raised when the completion service call cannot complete."""


class AnalysisError(RuntimeError):
    """Raised when any step of the title/facts/summary analysis fails."""
