"""Logging utilities with structured output for the appraisal hub services."""

from __future__ import annotations

import logging
import os
from typing import Optional

_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
_NAMESPACE = "appraisal_hub"


def configure_logging(namespace: str = _NAMESPACE) -> logging.Logger:
    """Return a namespaced logger configured for structured output.

    Records are emitted as single lines of key=value pairs so the batch and
    transformation logs stay greppable next to the provider request logs.
    """

    logger = logging.getLogger(namespace)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.setLevel(_LOG_LEVEL)
    # Records propagate to root handlers; caplog in the tests depends on it.
    return logger


def get_logger(child: Optional[str] = None) -> logging.Logger:
    """Helper to retrieve a child logger."""

    base = configure_logging()
    if child:
        return base.getChild(child)
    return base


__all__ = ["configure_logging", "get_logger"]
