"""Logging helper that standardises Lambda logger configuration."""

from __future__ import annotations

import logging

from .config import get_log_level


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else get_log_level())

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Avoid propagating to root to prevent duplicate logs in Lambda
    logger.propagate = False
    return logger
