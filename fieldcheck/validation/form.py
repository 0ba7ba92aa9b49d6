"""
fieldcheck Form Validation
==========================

Host side of the engine: concrete fields, submit and change handling, and
the presentation of verdicts (error class, hint text, focus).

Example:
    form = parse_form(html)
    validator = create_validator(form, {
        "dateFormat": "DD.MM.YYYY",
        "onInvalidation": lambda fields, reason: print(reason, len(fields)),
    })

    form.apply_values(request_values)
    result = validator.submit()
    if result.blocked:
        print(validator.focused.name, validator.focused.hint)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from fieldcheck.core.config import Config, ConfigurationError
from fieldcheck.plugins.hooks import Hook
from fieldcheck.utils.logger import get_logger
from fieldcheck.validation.classifier import BucketMap, classify
from fieldcheck.validation.compiler import effective_date_format
from fieldcheck.validation.evaluator import Verdict
from fieldcheck.validation.fields import PLACEHOLDER_ATTRIBUTE, field_label
from fieldcheck.validation.messages import hint_for
from fieldcheck.validation.rules import DATE
from fieldcheck.validation.settings import ValidatorSettings
from fieldcheck.validation.validator import ValidationResult, Validator

logger = get_logger("fieldcheck")


@dataclass(eq=False)
class FormField:
    """
    A form control.

    Attributes map names to values; a boolean attribute present without a
    value (``required``) maps to "". The ``class`` attribute is kept in
    ``classes``.

    Example:
        email = FormField(
            name="email",
            attributes={"required": "", "data-validate": "email"},
        )
        email.value = "user@example.com"
    """

    name: str = ""
    value: str = ""
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)
    tag: str = "input"
    classes: List[str] = field(default_factory=list)
    hint: str = ""
    focused: bool = False

    def __post_init__(self) -> None:
        attributes = {k.lower(): ("" if v is None else str(v)) for k, v in self.attributes.items()}
        for name in (attributes.pop("class", None) or "").split():
            self.add_class(name)
        self.attributes = attributes

    def get_attribute(self, name: str) -> Optional[str]:
        if name.lower() == "class":
            return " ".join(self.classes) if self.classes else None
        return self.attributes.get(name.lower())

    def set_attribute(self, name: str, value: Optional[str] = "") -> None:
        self.attributes[name.lower()] = "" if value is None else str(value)

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name.lower(), None)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def add_class(self, name: str) -> None:
        if name not in self.classes:
            self.classes.append(name)

    def remove_class(self, name: str) -> None:
        if name in self.classes:
            self.classes.remove(name)

    @property
    def error(self) -> Optional[str]:
        """Current hint, or None when the field is not marked."""
        return self.hint or None

    def __repr__(self) -> str:
        return f"<FormField {self.name or self.tag!r} value={self.value!r}>"


class FormValidator:
    """
    Validator bound to a form.

    Holds the immutable settings and the bucket map, handles submit and
    change events, and presents verdicts on the fields.

    Use ``create_validator`` to build one.
    """

    def __init__(self, settings: ValidatorSettings, buckets: BucketMap) -> None:
        self.settings = settings
        self.validator = Validator(settings, buckets)
        self.focused: Optional[Any] = None

        self.on_validation = Hook("validation", "Fields passed validation")
        self.on_invalidation = Hook("invalidation", "Fields failed a validation type")
        if settings.on_validation is not None:
            self.on_validation.add(settings.on_validation)
        if settings.on_invalidation is not None:
            self.on_invalidation.add(settings.on_invalidation)

        if settings.date_placeholder_enabled:
            for date_field in buckets.get(DATE):
                self._apply_placeholder(date_field)

    @property
    def buckets(self) -> BucketMap:
        return self.validator.buckets

    @property
    def fields(self) -> List[Any]:
        return self.buckets.fields

    def register_field(self, new_field: Any) -> List[str]:
        """
        Add a field inserted after construction.

        Returns:
            The field's types in check order
        """
        types = self.validator.register_field(new_field)
        if self.settings.date_placeholder_enabled and DATE in types:
            self._apply_placeholder(new_field)
        logger.debug("Field registered", field=field_label(new_field), types=types)
        return types

    def unregister_field(self, old_field: Any) -> bool:
        if self.focused is old_field:
            self.focus(None)
        return self.validator.unregister_field(old_field)

    def submit(self) -> ValidationResult:
        """
        Validate every field as on form submission.

        Invalid fields are marked and the first field that became invalid
        with this submission receives focus. The submission is blocked
        when the result is falsy.
        """
        error_class = self.settings.error_class
        already_invalid = [f for f in self.fields if self._is_marked(f)]

        result = self.validator.validate()

        for checked in result.checked:
            reason = result.reason_for(checked)
            if reason is None:
                self.mark_valid(checked)
            else:
                self.mark_invalid(checked, reason)

        newly_invalid = [
            f for f in result.invalid_fields
            if not any(f is old for old in already_invalid)
        ]
        if newly_invalid:
            self.focus(newly_invalid[0])

        for type_name, failing in result.failures.items():
            self.on_invalidation.trigger(list(failing), type_name)
        if result.valid:
            self.on_validation.trigger(list(result.checked))

        logger.info(
            "Submission validated",
            valid=result.valid,
            invalid=[field_label(f) for f in result.invalid_fields],
            error_class=error_class,
        )
        return result

    def field_changed(self, changed: Any) -> Verdict:
        """
        Re-check one field after its value changed.

        Other fields are left untouched.
        """
        verdict = self.validator.validate_field(changed)
        if verdict.valid:
            self.mark_valid(changed)
            self.on_validation.trigger([changed])
        else:
            self.mark_invalid(changed, verdict.failing_type)
            self.on_invalidation.trigger([changed], verdict.failing_type)
        return verdict

    def mark_invalid(self, target: Any, reason: Optional[str]) -> None:
        if not presentable(target):
            return
        target.add_class(self.settings.error_class)
        target.hint = hint_for(reason, self.settings.messages)

    def mark_valid(self, target: Any) -> None:
        if not presentable(target):
            return
        target.remove_class(self.settings.error_class)
        target.hint = ""

    def focus(self, target: Optional[Any]) -> None:
        if presentable(self.focused):
            self.focused.focused = False
        self.focused = target
        if presentable(target):
            target.focused = True

    def _is_marked(self, target: Any) -> bool:
        return presentable(target) and target.has_class(self.settings.error_class)

    def _apply_placeholder(self, target: Any) -> None:
        if not callable(getattr(target, "set_attribute", None)):
            return
        if target.get_attribute(PLACEHOLDER_ATTRIBUTE) is None:
            template = effective_date_format(target, self.settings.date_format)
            target.set_attribute(PLACEHOLDER_ATTRIBUTE, template)


_PRESENTATION_METHODS = ("has_class", "add_class", "remove_class")


def presentable(target: Any) -> bool:
    """
    Whether verdicts can be shown on a field.

    Plain descriptors that only expose ``value`` and ``get_attribute`` are
    validated but never marked, hinted or focused.
    """
    return target is not None and all(
        callable(getattr(target, method, None)) for method in _PRESENTATION_METHODS
    )


def fields_of(element: Any) -> List[Any]:
    """
    The fields held by a host container.

    Accepts an object with a ``fields`` attribute (such as a parsed form)
    or any iterable of fields.

    Raises:
        ConfigurationError: If the container holds something that is not a field
    """
    if element is None:
        raise ConfigurationError("No element given: pass the form or its fields")

    candidates = getattr(element, "fields", element)
    try:
        found = list(candidates)
    except TypeError as e:
        raise ConfigurationError(
            f"Element of type {type(element).__name__} holds no fields"
        ) from e

    for candidate in found:
        if not callable(getattr(candidate, "get_attribute", None)):
            raise ConfigurationError(
                f"Not a form field: {candidate!r} has no get_attribute()"
            )
    return found


def create_validator(
    element: Any = None,
    options: Optional[Mapping[str, Any]] = None,
    rules: Optional[Mapping[str, Any]] = None,
    config: Optional[Config] = None,
) -> FormValidator:
    """
    Build a validator for a form.

    Args:
        element: Form (or iterable of fields); may also be passed as the
            ``element`` option
        options: Host options such as ``dateFormat``, ``onInvalidation``
        rules: Custom rules, ``{type name: regex | callable | Rule}``
        config: Optional layered configuration

    Raises:
        ConfigurationError: For a missing element or invalid options
        UnknownRuleError: Under ``strictTypes`` when a field declares a type
            with no rule
    """
    merged: Dict[str, Any] = dict(options or {})
    if element is not None:
        merged["element"] = element

    settings = ValidatorSettings.from_options(merged, rules=rules, config=config)
    fields = fields_of(settings.element)
    buckets = classify(fields, settings.validate_attribute, settings.implied)

    return FormValidator(settings, buckets)


def validate_fields(
    fields: Iterable[Any],
    options: Optional[Mapping[str, Any]] = None,
    rules: Optional[Mapping[str, Any]] = None,
) -> ValidationResult:
    """
    One-shot bulk validation without presentation.

    Example:
        result = validate_fields(form.fields, {"dateFormat": "YYYY-MM-DD"})
        result.raise_if_invalid()
    """
    settings = ValidatorSettings.from_options(options, rules=rules)
    return Validator.from_fields(fields, settings).validate()
