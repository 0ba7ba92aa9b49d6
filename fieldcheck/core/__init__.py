"""
fieldcheck Core Module
======================

Configuration and base errors shared by every other package.
"""

from fieldcheck.core.config import (
    Config,
    ConfigSource,
    ConfigurationError,
    FieldcheckError,
)

__all__ = [
    "Config",
    "ConfigSource",
    "ConfigurationError",
    "FieldcheckError",
]
