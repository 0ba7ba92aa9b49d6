"""
fieldcheck Validator Settings
=============================

Immutable settings for one validator instance.

Settings are assembled once, at construction, from three layers:

1. built-in defaults
2. an optional ``Config`` (files, FIELDCHECK_* environment)
3. explicit options passed by the host

Option names are accepted in camelCase (``dateFormat``) or snake_case
(``date_format``).
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from fieldcheck.core.config import Config, ConfigurationError
from fieldcheck.utils.helpers import snake_case
from fieldcheck.utils.logger import get_logger
from fieldcheck.validation.compiler import Template, merge_rules
from fieldcheck.validation.dates import DEFAULT_DATE_FORMAT
from fieldcheck.validation.fields import (
    DATE_ATTRIBUTE,
    FORMAT_ATTRIBUTE,
    LENGTH_ATTRIBUTE,
    REQUIRED_ATTRIBUTE,
    VALIDATE_ATTRIBUTE,
)
from fieldcheck.validation.messages import merge_messages
from fieldcheck.validation.rules import ALPHANUMERIC, DATE, LENGTH, NUMERIC, REQUIRED

logger = get_logger("fieldcheck")

# Markers that imply bucket membership, in check order.
# (attribute, type) matches on presence, (attribute, type, value) on value.
ImpliedEntry = Tuple[str, ...]

IMPLIED_TYPES: Tuple[ImpliedEntry, ...] = (
    (REQUIRED_ATTRIBUTE, REQUIRED),
    (LENGTH_ATTRIBUTE, LENGTH),
    (DATE_ATTRIBUTE, DATE),
    (FORMAT_ATTRIBUTE, NUMERIC, NUMERIC),
    (FORMAT_ATTRIBUTE, ALPHANUMERIC, ALPHANUMERIC),
)

DEFAULT_ERROR_CLASS = "error"

ValidationCallback = Callable[..., Any]

_SCALAR_OPTIONS = {
    "date_format": str,
    "date_placeholder_enabled": bool,
    "error_class": str,
    "validate_attribute": str,
    "strict_types": bool,
    "allow_override": bool,
}
_CALLBACK_OPTIONS = ("on_validation", "on_invalidation")
_OTHER_OPTIONS = ("element", "messages", "rules", "today", "implied")


@dataclass(frozen=True)
class ValidatorSettings:
    """
    Resolved validator settings.

    Attributes:
        element: Host container holding the fields
        date_format: Default date template for date fields
        date_placeholder_enabled: Put the date template in empty placeholders
        error_class: Class added to invalid fields
        validate_attribute: Attribute holding the declared type list
        implied: Entries whose marker implies membership
        rules: Merged rule table (built-ins plus custom rules)
        messages: Reason code to hint text
        strict_types: Reject declared types that have no rule
        on_validation: Called with the fields that passed
        on_invalidation: Called with failing fields and the reason type
        today: Clock used by the two-digit-year rule
    """

    element: Any = None
    date_format: str = DEFAULT_DATE_FORMAT
    date_placeholder_enabled: bool = False
    error_class: str = DEFAULT_ERROR_CLASS
    validate_attribute: str = VALIDATE_ATTRIBUTE
    implied: Tuple[ImpliedEntry, ...] = IMPLIED_TYPES
    rules: Mapping[str, Template] = field(default_factory=merge_rules)
    messages: Mapping[str, str] = field(default_factory=merge_messages)
    strict_types: bool = False
    on_validation: Optional[ValidationCallback] = None
    on_invalidation: Optional[ValidationCallback] = None
    today: Callable[[], date] = field(default=date.today, compare=False)

    @classmethod
    def from_options(
        cls,
        options: Optional[Mapping[str, Any]] = None,
        rules: Optional[Mapping[str, Any]] = None,
        config: Optional[Config] = None,
    ) -> "ValidatorSettings":
        """
        Build settings from host options, custom rules and configuration.

        Args:
            options: Host options (camelCase or snake_case keys)
            rules: Custom rule table, merged over ``config``'s ``rules``
            config: Optional layered configuration

        Raises:
            ConfigurationError: For options of the wrong type or bad rules
        """
        resolved: Dict[str, Any] = {}

        if config is not None:
            for name in _SCALAR_OPTIONS:
                if config.has(name):
                    resolved[name] = config.get(name)

        for key, value in (options or {}).items():
            name = snake_case(key)
            if name in _SCALAR_OPTIONS or name in _CALLBACK_OPTIONS or name in _OTHER_OPTIONS:
                resolved[name] = value
            else:
                logger.warning("Unknown option ignored", option=key)

        for name, kind in _SCALAR_OPTIONS.items():
            if name in resolved:
                resolved[name] = _coerce(name, resolved[name], kind)

        for name in _CALLBACK_OPTIONS:
            value = resolved.get(name)
            if value is not None and not callable(value):
                raise ConfigurationError(f"Option {name!r} must be callable")

        if not resolved.get("date_format", DEFAULT_DATE_FORMAT).strip():
            raise ConfigurationError("Option 'date_format' must not be empty")

        custom: Dict[str, Any] = {}
        if config is not None:
            custom.update(config.section("rules"))
        custom.update(resolved.pop("rules", None) or {})
        if rules:
            custom.update(rules)
        allow_override = resolved.pop("allow_override", False)
        resolved["rules"] = merge_rules(custom, allow_override=allow_override)

        message_overrides: Dict[str, str] = {}
        if config is not None:
            message_overrides.update(config.section("messages"))
        message_overrides.update(resolved.pop("messages", None) or {})
        resolved["messages"] = merge_messages(message_overrides)

        if "implied" in resolved:
            resolved["implied"] = _implied_table(resolved["implied"])

        return cls(**resolved)

    def replace(self, **changes: Any) -> "ValidatorSettings":
        """Copy with some settings changed."""
        return dataclasses.replace(self, **changes)

    def as_dict(self) -> Dict[str, Any]:
        """Plain-data view (for logs and the CLI)."""
        return {
            "date_format": self.date_format,
            "date_placeholder_enabled": self.date_placeholder_enabled,
            "error_class": self.error_class,
            "validate_attribute": self.validate_attribute,
            "implied": [list(entry) for entry in self.implied],
            "rules": list(self.rules),
            "messages": dict(self.messages),
            "strict_types": self.strict_types,
        }


def _coerce(name: str, value: Any, kind: type) -> Any:
    if kind is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "yes", "on", "1", "false", "no", "off", "0"):
            return value.lower() in ("true", "yes", "on", "1")
        if isinstance(value, int):
            return bool(value)
        raise ConfigurationError(f"Option {name!r} must be a boolean, got {value!r}")

    if not isinstance(value, str):
        raise ConfigurationError(f"Option {name!r} must be a string, got {value!r}")
    return value


def _implied_table(entries: Any) -> Tuple[ImpliedEntry, ...]:
    table = []
    for entry in entries:
        entry = tuple(str(part) for part in entry)
        if len(entry) not in (2, 3):
            raise ConfigurationError(
                f"Implied entry must be (attribute, type) or (attribute, type, value), got {entry!r}"
            )
        table.append(entry)
    return tuple(table)
