"""
fieldcheck Helpers
==================

Small string and collection helpers shared by the engine.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Optional, TypeVar


T = TypeVar("T")


def snake_case(text: str) -> str:
    """
    Convert text to snake_case.

    Used to accept both ``dateFormat`` and ``date_format`` style options.

    Example:
        >>> snake_case("datePlaceholderEnabled")
        'date_placeholder_enabled'
    """
    text = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", text)
    text = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", text)
    text = re.sub(r"[-\s]+", "_", text)
    return text.lower()


def split_list(value: Optional[str], separator: str = ",") -> List[str]:
    """
    Split a separated attribute value into trimmed, non-empty items.

    Example:
        >>> split_list(" required , numeric,,")
        ['required', 'numeric']
    """
    if not value:
        return []
    return [part.strip() for part in value.split(separator) if part.strip()]


def unique(items: Iterable[T]) -> List[T]:
    """
    Get unique items preserving first-occurrence order.

    Example:
        >>> unique(["numeric", "length", "numeric"])
        ['numeric', 'length']
    """
    seen = set()
    result = []

    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)

    return result


def contains_identity(items: Iterable[Any], obj: Any) -> bool:
    """Check membership by identity rather than equality."""
    return any(item is obj for item in items)
