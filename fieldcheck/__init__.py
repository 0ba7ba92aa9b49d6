"""
fieldcheck - Attribute-Driven Form Validation
=============================================

Validates form fields from the attributes they carry. A field lists its
validation types in ``data-validate`` and its parameters in ``data-length``,
``data-format`` and ``data-date``; fieldcheck groups fields by type, checks
them on submission or on change, and reports the first failing type of each
field.

Features:
---------
- Built-in types: required, length, numeric, alphanumeric, email, date
- Calendar-aware date templates (MM/DD/YYYY, DD.MM.YY, ...)
- Custom rules as regular expressions or predicates
- Bulk and incremental validation
- HTML form reader and command-line checker
- Layered configuration (files, FIELDCHECK_* environment)

Quick Start:
    from fieldcheck import create_validator, parse_form

    form = parse_form(html)
    form.apply_values({"email": "user@example.com"})
    result = create_validator(form).submit()

    $ fieldcheck check signup.html --values values.json
"""

from __future__ import annotations

__version__ = "1.0.0"
__license__ = "MIT"

from typing import TYPE_CHECKING

# Core imports (always available)
from fieldcheck.core.config import Config, ConfigurationError, FieldcheckError

# Lazy imports for performance
if TYPE_CHECKING:
    from fieldcheck.engine.markup import FieldContainer, parse_form
    from fieldcheck.plugins.hooks import Hook
    from fieldcheck.utils.logger import Logger, configure_logging, get_logger
    from fieldcheck.validation.form import FormField, FormValidator, create_validator, validate_fields
    from fieldcheck.validation.rules import Rule, UnknownRuleError
    from fieldcheck.validation.settings import ValidatorSettings
    from fieldcheck.validation.validator import ValidationError, ValidationResult, Validator


def __getattr__(name: str):
    """Lazy loading of components for faster startup."""
    _imports = {
        # Validation
        "create_validator": "fieldcheck.validation.form",
        "validate_fields": "fieldcheck.validation.form",
        "FormField": "fieldcheck.validation.form",
        "FormValidator": "fieldcheck.validation.form",
        "Validator": "fieldcheck.validation.validator",
        "ValidationResult": "fieldcheck.validation.validator",
        "ValidationError": "fieldcheck.validation.validator",
        "ValidatorSettings": "fieldcheck.validation.settings",
        "Rule": "fieldcheck.validation.rules",
        "UnknownRuleError": "fieldcheck.validation.rules",
        # Markup
        "parse_form": "fieldcheck.engine.markup",
        "FieldContainer": "fieldcheck.engine.markup",
        # Plugins
        "Hook": "fieldcheck.plugins.hooks",
        # Utils
        "Logger": "fieldcheck.utils.logger",
        "get_logger": "fieldcheck.utils.logger",
        "configure_logging": "fieldcheck.utils.logger",
    }

    if name in _imports:
        import importlib
        module = importlib.import_module(_imports[name])
        return getattr(module, name)

    raise AttributeError(f"module 'fieldcheck' has no attribute '{name}'")


__all__ = [
    # Metadata
    "__version__",
    "__license__",
    # Core (always loaded)
    "Config",
    "ConfigurationError",
    "FieldcheckError",
    # Validation (lazy)
    "create_validator",
    "validate_fields",
    "FormField",
    "FormValidator",
    "Validator",
    "ValidationResult",
    "ValidationError",
    "ValidatorSettings",
    "Rule",
    "UnknownRuleError",
    # Markup (lazy)
    "parse_form",
    "FieldContainer",
    # Plugins (lazy)
    "Hook",
    # Utils (lazy)
    "Logger",
    "get_logger",
    "configure_logging",
]
