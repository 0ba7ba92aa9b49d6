"""
fieldcheck Validation Rules
===========================

Compiled rules: concrete matchers ready to test a field value.

A rule is one variant of a small closed family:

- RequiredRule: presence of a non-whitespace character
- LengthRule: value length within bounds
- PatternRule: full match of a built-in regular expression
- DateRule: date template shape plus calendar correctness
- CustomRule: user-supplied regular expression or predicate
- MissingRule: a declared type with no rule behind it (always passes)

Every rule reports its ``name`` as the failure reason, and says whether it
applies to empty values (only presence checks do).
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Optional, Pattern, Union

from fieldcheck.core.config import ConfigurationError
from fieldcheck.utils.logger import get_logger
from fieldcheck.validation.dates import DateFormat

logger = get_logger("fieldcheck")

# Built-in type names
REQUIRED = "required"
LENGTH = "length"
NUMERIC = "numeric"
ALPHANUMERIC = "alphanumeric"
EMAIL = "email"
DATE = "date"

NUMERIC_PATTERN = re.compile(r"^[0-9]+$")
ALPHANUMERIC_PATTERN = re.compile(r"^\w+$", re.ASCII)
EMAIL_PATTERN = re.compile(
    r"^[A-Za-z0-9._%+-]+"
    r"@[A-Za-z0-9.-]{3,63}"
    r"\.[A-Za-z]{2,63}$"
)

CustomCheck = Union[str, Pattern[str], Callable[[str], Any]]


class UnknownRuleError(ConfigurationError):
    """A field declares a validation type that has no rule."""

    def __init__(self, name: str, field: Optional[str] = None) -> None:
        where = f" (declared on {field})" if field else ""
        super().__init__(f"No rule for validation type {name!r}{where}")
        self.name = name
        self.field = field


class Rule(ABC):
    """
    Compiled validation rule.

    Implement ``validate`` to create a new variant.

    Example:
        class Even(Rule):
            name = "even"

            def validate(self, value: str) -> bool:
                return value.isdigit() and int(value) % 2 == 0
    """

    name: str
    applies_to_empty: bool = False

    @abstractmethod
    def validate(self, value: str) -> bool:
        """
        Test a non-empty value (or any value if ``applies_to_empty``).

        Returns:
            True if the value passes
        """
        ...

    def compile(self, field: Any, settings: Any) -> Optional["Rule"]:
        """A static rule is its own template."""
        return self

    def __call__(self, value: str) -> bool:
        return self.validate(value)


@dataclass(frozen=True)
class RequiredRule(Rule):
    """Value must contain at least one non-whitespace character."""

    name: str = REQUIRED
    applies_to_empty: bool = True

    def validate(self, value: str) -> bool:
        return bool(value) and not value.isspace()


@dataclass(frozen=True)
class LengthRule(Rule):
    """Value length must lie in [min_length, max_length]; None is unbounded."""

    min_length: int = 0
    max_length: Optional[int] = None
    name: str = LENGTH

    def validate(self, value: str) -> bool:
        length = len(value)
        if length < self.min_length:
            return False
        return self.max_length is None or length <= self.max_length


@dataclass(frozen=True)
class PatternRule(Rule):
    """Value must fully match a regular expression."""

    name: str
    pattern: Pattern[str]

    def validate(self, value: str) -> bool:
        return self.pattern.fullmatch(value) is not None


@dataclass(frozen=True)
class DateRule(Rule):
    """Value must have the template's shape and name a real calendar day."""

    date_format: DateFormat
    today: Callable[[], date] = field(default=date.today, compare=False)
    name: str = DATE

    def validate(self, value: str) -> bool:
        return self.date_format.is_valid(value, self.today())


@dataclass(frozen=True)
class CustomRule(Rule):
    """
    User-supplied rule.

    ``check`` is a compiled pattern (full match) or a predicate. A custom
    rule registered under ``required`` keeps presence semantics and is
    applied to empty values too.
    """

    name: str
    check: Union[Pattern[str], Callable[[str], Any]]

    @property
    def applies_to_empty(self) -> bool:  # type: ignore[override]
        return self.name == REQUIRED

    def validate(self, value: str) -> bool:
        if isinstance(self.check, re.Pattern):
            return self.check.fullmatch(value) is not None
        try:
            return bool(self.check(value))
        except Exception as e:
            logger.error("Custom rule raised", exception=e, rule=self.name)
            return False


@dataclass(frozen=True)
class MissingRule(Rule):
    """Placeholder for a declared type with no rule. Always passes."""

    name: str

    def validate(self, value: str) -> bool:
        return True


def custom_rule(name: str, check: Union[CustomCheck, Rule]) -> Rule:
    """
    Build a rule from a user rule-table entry.

    Accepts a regex string, a compiled pattern, a predicate or a ready Rule.

    Raises:
        ConfigurationError: For an invalid regex or an unsupported entry
    """
    if isinstance(check, Rule):
        return check
    if isinstance(check, str):
        try:
            return CustomRule(name=name, check=re.compile(check))
        except re.error as e:
            raise ConfigurationError(f"Invalid pattern for rule {name!r}: {e}") from e
    if isinstance(check, re.Pattern) or callable(check):
        return CustomRule(name=name, check=check)
    raise ConfigurationError(
        f"Rule {name!r} must be a pattern, a callable or a Rule, "
        f"not {type(check).__name__}"
    )


# Static built-ins
REQUIRED_RULE = RequiredRule()
NUMERIC_RULE = PatternRule(name=NUMERIC, pattern=NUMERIC_PATTERN)
ALPHANUMERIC_RULE = PatternRule(name=ALPHANUMERIC, pattern=ALPHANUMERIC_PATTERN)
EMAIL_RULE = PatternRule(name=EMAIL, pattern=EMAIL_PATTERN)
