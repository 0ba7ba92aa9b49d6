"""
Hint messages shown next to invalid fields, keyed by reason code.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

UNKNOWN = "unknown"

DEFAULT_MESSAGES: Mapping[str, str] = MappingProxyType({
    "required": "This field is required.",
    "length": "This field does not have the expected length.",
    "numeric": "Only digits are allowed in this field.",
    "alphanumeric": "Only letters, digits and underscores are allowed in this field.",
    "email": "Enter a valid email address.",
    "date": "Enter a valid date.",
    UNKNOWN: "This field is invalid.",
})


def merge_messages(overrides: Optional[Mapping[str, str]] = None) -> Mapping[str, str]:
    messages = dict(DEFAULT_MESSAGES)
    for reason, text in (overrides or {}).items():
        messages[reason] = str(text)
    return MappingProxyType(messages)


def hint_for(reason: Optional[str], messages: Mapping[str, str] = DEFAULT_MESSAGES) -> str:
    """Hint text for a reason. Reasons without an entry use ``unknown``."""
    if reason is None:
        return ""
    if reason in messages:
        return messages[reason]
    return messages.get(UNKNOWN, DEFAULT_MESSAGES[UNKNOWN])
