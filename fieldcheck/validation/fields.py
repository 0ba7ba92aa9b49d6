"""
fieldcheck Field Descriptors
============================

Read-only view of a form control as seen by the engine.

The engine only ever reads a field: its current text value and a handful of
declared attributes. Anything that owns real controls (a parsed HTML form,
a GUI toolkit, a test double) can be validated by exposing this protocol.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence, runtime_checkable

from fieldcheck.utils.helpers import split_list, unique

# Attribute names
REQUIRED_ATTRIBUTE = "required"
VALIDATE_ATTRIBUTE = "data-validate"
LENGTH_ATTRIBUTE = "data-length"
FORMAT_ATTRIBUTE = "data-format"
DATE_ATTRIBUTE = "data-date"
PLACEHOLDER_ATTRIBUTE = "placeholder"


@runtime_checkable
class FieldDescriptor(Protocol):
    """
    A form control the engine can validate.

    ``get_attribute`` returns None for an absent attribute and "" for a
    present attribute without a value (HTML boolean attributes such as
    ``required``).
    """

    value: Any

    def get_attribute(self, name: str) -> Optional[str]:
        ...


def field_value(field: FieldDescriptor) -> str:
    """Current value as text. A missing value reads as empty."""
    value = field.value
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def declared_types(
    field: FieldDescriptor,
    attribute: str = VALIDATE_ATTRIBUTE,
) -> List[str]:
    """
    Validation types declared on a field, in declaration order.

    Example:
        data-validate=" required, numeric ,required"  ->  ["required", "numeric"]
    """
    return unique(split_list(field.get_attribute(attribute)))


def field_label(field: Any) -> str:
    """Best-effort display name for logs and reports."""
    name = getattr(field, "name", None)
    if name:
        return str(name)
    getter = getattr(field, "get_attribute", None)
    if getter is not None:
        for attribute in ("name", "id"):
            value = getter(attribute)
            if value:
                return value
    return f"<field {id(field):#x}>"


def implies(field: FieldDescriptor, entry: Sequence[str]) -> bool:
    """
    Whether a field carries the marker of an implied-membership entry.

    ``(attribute, type)`` matches when the attribute is present,
    ``(attribute, type, value)`` when its trimmed value equals ``value``
    (case-insensitive).
    """
    attribute, _type_name, *expected = entry
    value = field.get_attribute(attribute)
    if value is None:
        return False
    return not expected or value.strip().lower() == expected[0].lower()
