"""
Shared fixtures for the fieldcheck test suite.
"""

from datetime import date
from typing import Any, Callable, Iterator

import pytest

from fieldcheck.utils.logger import LogLevel, MemoryHandler, get_logger
from fieldcheck.validation.form import FormField
from fieldcheck.validation.settings import ValidatorSettings

TODAY = date(2024, 6, 15)


@pytest.fixture
def make_field() -> Callable[..., FormField]:
    """
    Factory for form fields.

    Keyword arguments become attributes, with underscores turned into
    dashes: ``make_field("5", data_length="3")``.
    """

    def factory(value: Any = "", name: str = "field", **attributes: Any) -> FormField:
        attrs = {key.replace("_", "-"): val for key, val in attributes.items()}
        return FormField(name=name, value=value, attributes=attrs)

    return factory


@pytest.fixture
def settings() -> ValidatorSettings:
    """Default settings with a fixed clock."""
    return ValidatorSettings(today=lambda: TODAY)


@pytest.fixture
def log_records() -> Iterator[MemoryHandler]:
    """Capture records of the package logger at every level."""
    logger = get_logger("fieldcheck")
    previous = logger.level
    handler = MemoryHandler()
    logger.add_handler(handler)
    logger.set_level(LogLevel.DEBUG)
    yield handler
    logger.remove_handler(handler)
    logger.set_level(previous)
