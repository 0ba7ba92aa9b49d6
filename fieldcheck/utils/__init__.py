"""
fieldcheck Utils Package
========================

Logging and small helpers.
"""

from __future__ import annotations

from fieldcheck.utils.logger import (
    JsonFormatter,
    Logger,
    LogLevel,
    MemoryHandler,
    TextFormatter,
    configure_logging,
    get_logger,
)
from fieldcheck.utils.helpers import (
    contains_identity,
    snake_case,
    split_list,
    unique,
)

__all__ = [
    # Logging
    "Logger",
    "LogLevel",
    "JsonFormatter",
    "TextFormatter",
    "MemoryHandler",
    "get_logger",
    "configure_logging",
    # Helpers
    "snake_case",
    "split_list",
    "unique",
    "contains_identity",
]
