"""
fieldcheck Validator
====================

Bulk (submit-time) validation over a bucket map.

Buckets are evaluated in insertion order and members in field order. A
field failing several types is reported once, under the first failing type
in its own check order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set

import orjson

from fieldcheck.core.config import FieldcheckError
from fieldcheck.utils.logger import get_logger
from fieldcheck.validation.classifier import BucketMap, classify
from fieldcheck.validation.evaluator import Verdict, evaluate_bucket, evaluate_one
from fieldcheck.validation.fields import FieldDescriptor, field_label
from fieldcheck.validation.rules import UnknownRuleError
from fieldcheck.validation.settings import ValidatorSettings

logger = get_logger("fieldcheck")


class ValidationError(FieldcheckError):
    """
    Raised by ``ValidationResult.raise_if_invalid``.

    ``errors`` maps field labels to the failing type.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or {}

    def __str__(self) -> str:
        if not self.errors:
            return "Validation failed"
        lines = [f"  - {name}: {reason}" for name, reason in self.errors.items()]
        return "Validation failed:\n" + "\n".join(lines)

    def first(self) -> Optional[str]:
        """Label of the first invalid field."""
        return next(iter(self.errors), None)


@dataclass
class ValidationResult:
    """
    Result of a bulk validation pass.

    Attributes:
        failures: Failing fields per type, in bucket order
        verdicts: One verdict per failing field, in field order
        checked: Every field that took part, in field order
    """

    failures: Dict[str, List[Any]] = field(default_factory=dict)
    verdicts: List[Verdict] = field(default_factory=list)
    checked: List[Any] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.verdicts

    @property
    def blocked(self) -> bool:
        """Whether the submission must be stopped."""
        return not self.valid

    def __bool__(self) -> bool:
        return self.valid

    @property
    def invalid_fields(self) -> List[Any]:
        return [verdict.field for verdict in self.verdicts]

    @property
    def valid_fields(self) -> List[Any]:
        failing = self.invalid_fields
        return [f for f in self.checked if not any(f is bad for bad in failing)]

    def reason_for(self, target: Any) -> Optional[str]:
        for verdict in self.verdicts:
            if verdict.field is target:
                return verdict.failing_type
        return None

    @property
    def errors(self) -> Dict[str, str]:
        return {field_label(v.field): v.failing_type or "unknown" for v in self.verdicts}

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise ValidationError(errors=self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "failures": {
                type_name: [field_label(f) for f in members]
                for type_name, members in self.failures.items()
            },
            "fields": [
                {
                    "field": field_label(f),
                    "valid": self.reason_for(f) is None,
                    "reason": self.reason_for(f),
                }
                for f in self.checked
            ],
        }

    def to_json(self, pretty: bool = False) -> str:
        option = orjson.OPT_INDENT_2 if pretty else 0
        return orjson.dumps(self.to_dict(), option=option).decode("utf-8")


class Validator:
    """
    Validates the fields of a bucket map.

    Example:
        settings = ValidatorSettings.from_options({"dateFormat": "DD.MM.YYYY"})
        validator = Validator.from_fields(fields, settings)

        result = validator.validate()
        if not result:
            for verdict in result.verdicts:
                print(verdict.field.name, verdict.failing_type)
    """

    def __init__(self, settings: ValidatorSettings, buckets: BucketMap) -> None:
        self.settings = settings
        self.buckets = buckets
        self._reported_unknown: Set[str] = set()
        self.check_types(buckets)

    @classmethod
    def from_fields(
        cls,
        fields: Iterable[FieldDescriptor],
        settings: Optional[ValidatorSettings] = None,
    ) -> "Validator":
        settings = settings or ValidatorSettings()
        buckets = classify(fields, settings.validate_attribute, settings.implied)
        return cls(settings, buckets)

    def check_types(self, buckets_or_types: Any, field: Any = None) -> None:
        """
        Report bucket types that have no rule.

        Strict settings raise; otherwise each unknown type is logged once
        and its fields pass that type.

        Raises:
            UnknownRuleError: Under ``strict_types``
        """
        for type_name in list(buckets_or_types):
            if type_name in self.settings.rules:
                continue
            if self.settings.strict_types:
                label = field_label(field) if field is not None else None
                raise UnknownRuleError(type_name, label)
            if type_name not in self._reported_unknown:
                self._reported_unknown.add(type_name)
                logger.warning("Unknown validation type, fields will pass it", type=type_name)

    def register_field(self, field: FieldDescriptor) -> List[str]:
        """
        Add a newly inserted field to its buckets.

        Raises:
            UnknownRuleError: Under ``strict_types``, before anything is added
        """
        self.check_types(self.buckets.types_for(field), field)
        return self.buckets.register_field(field)

    def unregister_field(self, field: FieldDescriptor) -> bool:
        return self.buckets.unregister_field(field)

    def validate(self) -> ValidationResult:
        """Submit-time pass over every bucket."""
        failures: Dict[str, List[Any]] = {}
        for type_name, members in self.buckets.items():
            failing = evaluate_bucket(members, type_name, self.settings)
            if failing:
                failures[type_name] = failing

        verdicts: List[Verdict] = []
        for f in self.buckets.fields:
            failed_types = [t for t, members in failures.items() if any(m is f for m in members)]
            if not failed_types:
                continue
            reason = next(
                (t for t in self.buckets.types_for(f) if t in failed_types),
                failed_types[0],
            )
            verdicts.append(Verdict(field=f, valid=False, failing_type=reason))

        result = ValidationResult(failures=failures, verdicts=verdicts, checked=self.buckets.fields)
        logger.debug(
            "Bulk validation finished",
            valid=result.valid,
            failing=len(verdicts),
            checked=len(result.checked),
        )
        return result

    def validate_field(self, field: FieldDescriptor) -> Verdict:
        """Incremental check of one field."""
        return evaluate_one(field, self.settings, self.buckets)
