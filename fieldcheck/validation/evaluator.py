"""
fieldcheck Evaluator
====================

Applies compiled rules to field values.

Empty values are exempt from every rule except presence checks: ``length``,
``numeric``, ``email``, ``date`` and custom types only look at fields that
contain something, and only ``required`` complains about an empty field.

Evaluation never raises for bad markup. A rule that cannot be compiled for
a field exempts the field for that pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from fieldcheck.validation.classifier import check_order
from fieldcheck.validation.compiler import compile_rule
from fieldcheck.validation.fields import FieldDescriptor, field_label, field_value

if TYPE_CHECKING:
    from fieldcheck.validation.classifier import BucketMap
    from fieldcheck.validation.settings import ValidatorSettings


@dataclass(frozen=True)
class Verdict:
    """
    Outcome for one field.

    Attributes:
        field: The field that was checked
        valid: Whether every applicable rule passed
        failing_type: Type of the first failing rule, in the field's
            check order (None when valid)
    """

    field: Any
    valid: bool
    failing_type: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": field_label(self.field),
            "valid": self.valid,
            "reason": self.failing_type,
        }


def check_field(
    type_name: str,
    field: FieldDescriptor,
    settings: "ValidatorSettings",
) -> bool:
    """
    Check one field against one type.

    Returns:
        True if the field passes or is exempt
    """
    rule = compile_rule(type_name, field, settings)
    if rule is None:
        return True

    value = field_value(field)
    if not value and not rule.applies_to_empty:
        return True

    return rule.validate(value)


def evaluate_bucket(
    bucket: Iterable[FieldDescriptor],
    type_name: str,
    settings: "ValidatorSettings",
) -> List[FieldDescriptor]:
    """
    Bulk check of a bucket.

    Returns:
        Failing fields, in bucket order
    """
    return [field for field in bucket if not check_field(type_name, field, settings)]


def evaluate_one(
    field: FieldDescriptor,
    settings: "ValidatorSettings",
    buckets: Optional["BucketMap"] = None,
) -> Verdict:
    """
    Incremental check of a single field after an edit.

    The declared types are re-read from the field and checked left to
    right, then the implied types that were not declared. The first
    failure decides the verdict.

    Args:
        field: Field to check
        settings: Validator settings
        buckets: Bucket map whose attribute/implied table to use
            (defaults to the settings)
    """
    if buckets is not None:
        types = buckets.types_for(field)
    else:
        types = check_order(field, settings.validate_attribute, settings.implied)

    for type_name in types:
        if not check_field(type_name, field, settings):
            return Verdict(field=field, valid=False, failing_type=type_name)

    return Verdict(field=field, valid=True)
