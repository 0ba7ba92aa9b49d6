"""
fieldcheck Validation
=====================

Attribute-driven validation of form fields.

Features:
- Classification of fields into buckets from ``data-validate``,
  ``data-length`` and ``required``
- Per-field rule compilation (length bounds, date templates)
- Calendar-aware date checks
- Custom rules merged over the built-ins
- Bulk (submit) and incremental (change) evaluation
"""

from fieldcheck.validation.classifier import BucketMap, check_order, classify
from fieldcheck.validation.compiler import (
    BUILTIN_TYPES,
    DateTemplate,
    LengthTemplate,
    RuleTemplate,
    compile_rule,
    effective_date_format,
    merge_rules,
    parse_length_bounds,
)
from fieldcheck.validation.dates import (
    DEFAULT_DATE_FORMAT,
    DateFormat,
    normalize_date,
    parse_date_format,
)
from fieldcheck.validation.evaluator import (
    Verdict,
    check_field,
    evaluate_bucket,
    evaluate_one,
)
from fieldcheck.validation.fields import FieldDescriptor, declared_types
from fieldcheck.validation.form import (
    FormField,
    FormValidator,
    create_validator,
    validate_fields,
)
from fieldcheck.validation.messages import DEFAULT_MESSAGES, hint_for
from fieldcheck.validation.rules import (
    CustomRule,
    DateRule,
    LengthRule,
    MissingRule,
    PatternRule,
    RequiredRule,
    Rule,
    UnknownRuleError,
)
from fieldcheck.validation.settings import ValidatorSettings
from fieldcheck.validation.validator import (
    ValidationError,
    ValidationResult,
    Validator,
)

__all__ = [
    # Classification
    "BucketMap",
    "classify",
    "check_order",
    # Compilation
    "BUILTIN_TYPES",
    "RuleTemplate",
    "LengthTemplate",
    "DateTemplate",
    "compile_rule",
    "merge_rules",
    "parse_length_bounds",
    "effective_date_format",
    # Dates
    "DEFAULT_DATE_FORMAT",
    "DateFormat",
    "parse_date_format",
    "normalize_date",
    # Evaluation
    "Verdict",
    "check_field",
    "evaluate_bucket",
    "evaluate_one",
    # Fields
    "FieldDescriptor",
    "declared_types",
    # Rules
    "Rule",
    "RequiredRule",
    "LengthRule",
    "PatternRule",
    "DateRule",
    "CustomRule",
    "MissingRule",
    "UnknownRuleError",
    # Validator
    "Validator",
    "ValidatorSettings",
    "ValidationError",
    "ValidationResult",
    # Form
    "FormField",
    "FormValidator",
    "create_validator",
    "validate_fields",
    # Messages
    "DEFAULT_MESSAGES",
    "hint_for",
]
