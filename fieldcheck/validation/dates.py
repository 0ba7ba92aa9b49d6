"""
fieldcheck Date Formats
=======================

Date templates such as ``MM/DD/YYYY`` or ``DD.MM.YY``.

A template is split on its delimiter (the first non-word character) into
components. The first letter of each component is its key: ``Y`` (year),
``M`` (month), ``D`` (day); other letters are accepted and matched as plain
digit groups.

Matching happens in two steps:

1. Shape: non-year components accept 1 up to ``len(component)`` digits
   (``MM`` takes ``3`` or ``03``), the year takes exactly ``len(component)``
   digits.
2. Calendar: the parsed year/month/day are normalized with calendar
   arithmetic and read back. Any difference (``02/31`` rolls into March,
   ``13/01`` rolls into next year, day ``0`` rolls back a month) rejects
   the value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Optional, Pattern, Tuple

YEAR = "Y"
MONTH = "M"
DAY = "D"

DEFAULT_DATE_FORMAT = "MM/DD/YYYY"

_DELIMITER = re.compile(r"\W", re.ASCII)


@dataclass(frozen=True)
class DateFormat:
    """
    A decomposed date template.

    Attributes:
        source: Template as written, e.g. "DD-MM-YYYY"
        delimiter: Separator character, e.g. "-"
        components: Template parts, e.g. ("DD", "MM", "YYYY")
        pattern: Anchored digit-group pattern built from the components
    """

    source: str
    delimiter: str
    components: Tuple[str, ...]
    pattern: Pattern[str]

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(component[0].upper() for component in self.components)

    def index_of(self, key: str) -> Optional[int]:
        """Position of the first component with this key."""
        for index, component_key in enumerate(self.keys):
            if component_key == key:
                return index
        return None

    def extract(self, value: str) -> Optional[Dict[str, str]]:
        """
        Split a value into raw component strings keyed by component key.

        Returns None if the value does not have the template's shape.
        """
        match = self.pattern.fullmatch(value)
        if match is None:
            return None

        parts: Dict[str, str] = {}
        for key, text in zip(self.keys, match.groups()):
            parts.setdefault(key, text)
        return parts

    def is_valid(self, value: str, today: date) -> bool:
        """Check both the shape and the calendar correctness of a value."""
        parts = self.extract(value)
        if parts is None:
            return False

        year_text = parts.get(YEAR)
        month_text = parts.get(MONTH)
        day_text = parts.get(DAY)

        year = expand_year(year_text, today) if year_text is not None else today.year
        month = int(_strip_zero(month_text)) if month_text is not None else 1
        day = int(_strip_zero(day_text)) if day_text is not None else 1

        normalized = normalize_date(year, month, day)
        if normalized is None:
            return False

        # Components absent from the template are defaults, not input.
        expected = (
            (year_text, year, normalized[0]),
            (month_text, month, normalized[1]),
            (day_text, day, normalized[2]),
        )
        return all(text is None or given == got for text, given, got in expected)

    def placeholder(self) -> str:
        return self.source


def parse_date_format(template: Optional[str]) -> Optional[DateFormat]:
    """
    Decompose a date template.

    Returns None when the template cannot be decomposed: no delimiter, or an
    empty component (``"MM//YYYY"``, ``"/DD/YYYY"``).

    Example:
        parse_date_format("DD.MM.YYYY") matches "7.3.2024" and "07.03.2024"
        but not "07.03.24" (the year width is exact).
    """
    if not template:
        return None

    found = _DELIMITER.search(template)
    if found is None:
        return None

    delimiter = found.group(0)
    components = tuple(template.split(delimiter))
    if any(not component for component in components):
        return None

    groups = []
    for component in components:
        width = len(component)
        if component[0].upper() == YEAR:
            groups.append(f"([0-9]{{{width}}})")
        else:
            groups.append(f"([0-9]{{1,{width}}})")

    pattern = re.compile("^" + re.escape(delimiter).join(groups) + "$")

    return DateFormat(
        source=template,
        delimiter=delimiter,
        components=components,
        pattern=pattern,
    )


def expand_year(year_text: str, today: date) -> int:
    """
    Turn a year component into a full year.

    Two-digit years get the current century prefix: with today in 2024,
    "24" is 2024 and "95" is 2095. There is no pivot window.
    """
    if len(year_text) == 2:
        return int(str(today.year)[:2] + year_text)
    return int(year_text)


def normalize_date(year: int, month: int, day: int) -> Optional[Tuple[int, int, int]]:
    """
    Normalize a possibly out-of-range date with calendar arithmetic.

    Month overflow carries into the year and day overflow carries into the
    month, in both directions. Returns None when the result falls outside
    the representable calendar (years 1-9999).

    Example:
        >>> normalize_date(2024, 2, 31)
        (2024, 3, 2)
        >>> normalize_date(2024, 13, 1)
        (2025, 1, 1)
    """
    carry, month_index = divmod(month - 1, 12)
    try:
        first = date(year + carry, month_index + 1, 1)
        result = first + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        return None
    return result.year, result.month, result.day


def _strip_zero(text: str) -> str:
    """Drop a single leading zero ("07" -> "7", "00" -> "0")."""
    if len(text) > 1 and text[0] == "0":
        return text[1:]
    return text
