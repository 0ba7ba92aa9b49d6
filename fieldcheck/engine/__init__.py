"""
fieldcheck Engine
=================

Host adapters that turn markup into validatable fields.
"""

from fieldcheck.engine.markup import FieldContainer, FormMarkupParser, parse_form

__all__ = [
    "FieldContainer",
    "FormMarkupParser",
    "parse_form",
]
