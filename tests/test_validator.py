"""
Tests for bulk validation.
"""

import orjson
import pytest

from fieldcheck.validation.rules import UnknownRuleError
from fieldcheck.validation.validator import ValidationError, ValidationResult, Validator


@pytest.fixture
def signup(make_field):
    """A small signup form: name, email, age, birthday."""
    return [
        make_field("Ada", name="name", required=""),
        make_field("ada@example", name="email", data_validate="required,email"),
        make_field("12345678", name="age", data_validate="numeric", data_length="3"),
        make_field("02/30/1990", name="born", data_validate="date"),
    ]


class TestValidate:
    """Submit-time pass."""

    def test_failures_by_bucket(self, signup, settings) -> None:
        name, email, age, born = signup
        result = Validator.from_fields(signup, settings).validate()

        assert list(result.failures) == ["email", "length", "date"]
        assert result.failures["email"] == [email]
        assert result.failures["length"] == [age]
        assert result.failures["date"] == [born]

    def test_one_verdict_per_failing_field(self, signup, settings) -> None:
        name, email, age, born = signup
        result = Validator.from_fields(signup, settings).validate()

        assert result.invalid_fields == [email, age, born]
        assert result.valid_fields == [name]
        assert result.reason_for(name) is None
        assert result.reason_for(born) == "date"

    def test_blocked(self, signup, settings) -> None:
        result = Validator.from_fields(signup, settings).validate()
        assert result.blocked
        assert not result

    def test_reason_follows_field_check_order(self, make_field, settings) -> None:
        first = make_field("x", name="first", data_validate="numeric")
        field = make_field("abcdef!", name="field", data_validate="email,alphanumeric", data_length="3")
        result = Validator.from_fields([first, field], settings).validate()

        assert list(result.failures) == ["numeric", "email", "alphanumeric", "length"]
        assert result.reason_for(field) == "email"

    def test_required_wins_on_empty(self, make_field, settings) -> None:
        field = make_field("", name="code", data_validate="numeric", required="")
        result = Validator.from_fields([field], settings).validate()
        assert result.reason_for(field) == "required"
        assert list(result.failures) == ["required"]

    def test_all_valid(self, make_field, settings) -> None:
        fields = [
            make_field("ada@example.com", name="email", data_validate="email"),
            make_field("", name="optional", data_validate="numeric"),
        ]
        result = Validator.from_fields(fields, settings).validate()

        assert result.valid
        assert result.failures == {}
        assert result.checked == fields

    def test_no_fields(self, settings) -> None:
        result = Validator.from_fields([], settings).validate()
        assert result.valid
        assert result.checked == []


class TestUnknownTypes:
    """Declared types with no rule."""

    def test_pass_and_warn_once(self, make_field, settings, log_records) -> None:
        fields = [
            make_field("x", name="a", data_validate="zipcode"),
            make_field("y", name="b", data_validate="zipcode"),
        ]
        validator = Validator.from_fields(fields, settings)
        validator.register_field(make_field("z", name="c", data_validate="zipcode"))

        assert validator.validate().valid
        warnings = [m for m in log_records.messages() if m.startswith("Unknown validation type")]
        assert len(warnings) == 1

    def test_strict_raises_at_construction(self, make_field, settings) -> None:
        strict = settings.replace(strict_types=True)
        with pytest.raises(UnknownRuleError) as excinfo:
            Validator.from_fields([make_field(data_validate="zipcode")], strict)
        assert excinfo.value.name == "zipcode"

    def test_strict_register_adds_nothing(self, make_field, settings) -> None:
        strict = settings.replace(strict_types=True)
        validator = Validator.from_fields([], strict)
        field = make_field(name="zip", data_validate="zipcode")

        with pytest.raises(UnknownRuleError) as excinfo:
            validator.register_field(field)
        assert excinfo.value.field == "zip"
        assert validator.buckets.fields == []


class TestIncremental:
    def test_register_and_unregister(self, make_field, settings) -> None:
        validator = Validator.from_fields([], settings)
        field = make_field("abc", name="n", data_validate="numeric")

        assert validator.register_field(field) == ["numeric"]
        assert not validator.validate()
        assert validator.unregister_field(field)
        assert validator.validate()

    def test_validate_field(self, make_field, settings) -> None:
        field = make_field("", data_validate="required,numeric")
        validator = Validator.from_fields([field], settings)
        assert validator.validate_field(field).failing_type == "required"


class TestResultOutput:
    """Serialized results and exceptions."""

    def test_to_dict(self, signup, settings) -> None:
        data = Validator.from_fields(signup, settings).validate().to_dict()

        assert data["valid"] is False
        assert data["failures"]["email"] == ["email"]
        assert data["fields"][0] == {"field": "name", "valid": True, "reason": None}

    def test_to_json(self, signup, settings) -> None:
        result = Validator.from_fields(signup, settings).validate()
        assert orjson.loads(result.to_json()) == result.to_dict()
        assert "\n" in result.to_json(pretty=True)

    def test_raise_if_invalid(self, signup, settings) -> None:
        result = Validator.from_fields(signup, settings).validate()
        with pytest.raises(ValidationError) as excinfo:
            result.raise_if_invalid()

        error = excinfo.value
        assert error.errors == {"email": "email", "age": "length", "born": "date"}
        assert error.first() == "email"
        assert "born: date" in str(error)

    def test_valid_result_does_not_raise(self) -> None:
        ValidationResult().raise_if_invalid()
