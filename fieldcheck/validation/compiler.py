"""
fieldcheck Rule Compiler
========================

Turns a validation type name plus a field's declared parameters into a
compiled rule.

Static types (required, numeric, alphanumeric, email, custom rules) compile
to themselves. ``length`` and ``date`` are templates: their bounds and date
format are read off each field on every compilation, since markup may change
between evaluations.

Compilation never raises. A field whose parameters cannot be understood
(``data-length="abc"``, a date format without delimiter) compiles to None,
meaning the field is exempt from that rule for this pass.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Tuple, Union

from fieldcheck.utils.logger import get_logger
from fieldcheck.validation.dates import DEFAULT_DATE_FORMAT, parse_date_format
from fieldcheck.validation.fields import (
    DATE_ATTRIBUTE,
    FORMAT_ATTRIBUTE,
    LENGTH_ATTRIBUTE,
    FieldDescriptor,
    field_label,
)
from fieldcheck.validation.rules import (
    ALPHANUMERIC,
    ALPHANUMERIC_RULE,
    DATE,
    EMAIL,
    EMAIL_RULE,
    LENGTH,
    NUMERIC,
    NUMERIC_RULE,
    REQUIRED,
    REQUIRED_RULE,
    CustomCheck,
    DateRule,
    LengthRule,
    MissingRule,
    Rule,
    custom_rule,
)

if TYPE_CHECKING:
    from fieldcheck.validation.settings import ValidatorSettings

logger = get_logger("fieldcheck")

LengthBounds = Tuple[int, Optional[int]]

MAX_QUALIFIER = "max"
MIN_QUALIFIER = "min"

_SINGLE = re.compile(r"^([0-9])$")
_RANGE = re.compile(r"^([0-9]),([0-9])$")
_OPEN = re.compile(r"^([0-9]),$")


class RuleTemplate(ABC):
    """A rule that needs per-field parameters before it can be applied."""

    name: str

    @abstractmethod
    def compile(self, field: FieldDescriptor, settings: "ValidatorSettings") -> Optional[Rule]:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


Template = Union[Rule, RuleTemplate]


def length_qualifier(field: FieldDescriptor) -> Optional[str]:
    """The ``data-format`` value when it is a length qualifier (max/min)."""
    value = field.get_attribute(FORMAT_ATTRIBUTE)
    if value is None:
        return None
    value = value.strip().lower()
    return value if value in (MAX_QUALIFIER, MIN_QUALIFIER) else None


def parse_length_bounds(
    specifier: Optional[str],
    qualifier: Optional[str] = None,
) -> Optional[LengthBounds]:
    """
    Derive length bounds from a ``data-length`` specifier.

    With qualifier ``max`` or ``min`` the specifier is a single digit and
    gives ``[0, d]`` or ``[d, unbounded]``. Without qualifier:

        "2,5" -> (2, 5)
        "2,"  -> (2, None)
        "5"   -> (0, 5)

    Any other shape, or a lower bound above the upper bound, returns None.
    """
    if specifier is None:
        return None
    specifier = specifier.strip()

    if qualifier in (MAX_QUALIFIER, MIN_QUALIFIER):
        single = _SINGLE.match(specifier)
        if single is None:
            return None
        digit = int(single.group(1))
        return (0, digit) if qualifier == MAX_QUALIFIER else (digit, None)

    found = _RANGE.match(specifier)
    if found is not None:
        low, high = int(found.group(1)), int(found.group(2))
        return (low, high) if low <= high else None

    found = _OPEN.match(specifier)
    if found is not None:
        return int(found.group(1)), None

    found = _SINGLE.match(specifier)
    if found is not None:
        return 0, int(found.group(1))

    return None


class LengthTemplate(RuleTemplate):
    """Length bounds read from ``data-length`` and ``data-format``."""

    name = LENGTH

    def compile(self, field: FieldDescriptor, settings: "ValidatorSettings") -> Optional[Rule]:
        specifier = field.get_attribute(LENGTH_ATTRIBUTE)
        bounds = parse_length_bounds(specifier, length_qualifier(field))
        if bounds is None:
            logger.debug(
                "Length rule skipped",
                field=field_label(field),
                specifier=specifier,
            )
            return None
        return LengthRule(min_length=bounds[0], max_length=bounds[1])


def effective_date_format(field: FieldDescriptor, default: str = DEFAULT_DATE_FORMAT) -> str:
    """
    The date template that applies to a field.

    ``data-date`` wins, then ``data-format`` unless it is a length
    qualifier or a type keyword, then the configured default.
    """
    declared = field.get_attribute(DATE_ATTRIBUTE)
    if declared:
        return declared

    declared = field.get_attribute(FORMAT_ATTRIBUTE)
    if declared and length_qualifier(field) is None:
        if declared.strip().lower() not in (NUMERIC, ALPHANUMERIC):
            return declared

    return default


class DateTemplate(RuleTemplate):
    """Date shape and calendar check built from the field's date template."""

    name = DATE

    def compile(self, field: FieldDescriptor, settings: "ValidatorSettings") -> Optional[Rule]:
        template = effective_date_format(field, settings.date_format)
        date_format = parse_date_format(template)
        if date_format is None:
            logger.debug(
                "Date rule skipped",
                field=field_label(field),
                format=template,
            )
            return None
        return DateRule(date_format=date_format, today=settings.today)


LENGTH_TEMPLATE = LengthTemplate()
DATE_TEMPLATE = DateTemplate()


def builtin_rules() -> Dict[str, Template]:
    """The built-in rule table, in vocabulary order."""
    return {
        REQUIRED: REQUIRED_RULE,
        LENGTH: LENGTH_TEMPLATE,
        NUMERIC: NUMERIC_RULE,
        ALPHANUMERIC: ALPHANUMERIC_RULE,
        EMAIL: EMAIL_RULE,
        DATE: DATE_TEMPLATE,
    }


BUILTIN_TYPES = tuple(builtin_rules())


def merge_rules(
    custom: Optional[Mapping[str, Union[CustomCheck, Rule, RuleTemplate]]] = None,
    allow_override: bool = False,
) -> Mapping[str, Template]:
    """
    Merge user rules into the built-in table.

    New names extend the vocabulary. A user rule named like a built-in is
    ignored (with a warning) unless ``allow_override`` is set.

    Returns:
        Read-only rule table

    Raises:
        ConfigurationError: For an entry that cannot be turned into a rule
    """
    table = builtin_rules()

    for name, check in (custom or {}).items():
        name = name.strip()
        if not name:
            continue
        if name in table and not allow_override:
            logger.warning("Custom rule ignored: built-in rules cannot be shadowed", type=name)
            continue
        if isinstance(check, RuleTemplate):
            table[name] = check
        else:
            table[name] = custom_rule(name, check)

    return MappingProxyType(table)


def compile_rule(
    type_name: str,
    field: FieldDescriptor,
    settings: "ValidatorSettings",
) -> Optional[Rule]:
    """
    Compile the rule for one type and one field.

    Returns:
        A compiled rule, MissingRule for an unknown type, or None when the
        field's parameters are malformed (skip)
    """
    template = settings.rules.get(type_name)
    if template is None:
        logger.debug("No rule for type, passing", type=type_name, field=field_label(field))
        return MissingRule(name=type_name)
    return template.compile(field, settings)
