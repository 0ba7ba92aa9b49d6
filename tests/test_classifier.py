"""
Tests for bucket classification.
"""

from fieldcheck.validation.classifier import BucketMap, check_order, classify
from fieldcheck.validation.form import FormField, validate_fields


class TestCheckOrder:
    """Order in which a field's types are checked."""

    def test_declared_order(self, make_field) -> None:
        field = make_field(data_validate="email, required ,email")
        assert check_order(field) == ["email", "required"]

    def test_implied_types_follow_declared(self, make_field) -> None:
        field = make_field(data_validate="numeric", required="", data_length="5")
        assert check_order(field) == ["numeric", "required", "length"]

    def test_declared_implied_type_keeps_declared_position(self, make_field) -> None:
        field = make_field(data_validate="length,numeric", data_length="1,5")
        assert check_order(field) == ["length", "numeric"]

    def test_no_declarations(self, make_field) -> None:
        assert check_order(make_field()) == []

    def test_date_attribute_follows_declared(self, make_field) -> None:
        field = make_field(data_validate="required", data_date="YYYY-MM-DD")
        assert check_order(field) == ["required", "date"]

    def test_format_keyword_implies_type(self, make_field) -> None:
        assert check_order(make_field(data_format="numeric")) == ["numeric"]
        assert check_order(make_field(data_format=" AlphaNumeric ")) == ["alphanumeric"]

    def test_other_format_values_imply_nothing(self, make_field) -> None:
        assert check_order(make_field(data_format="max")) == []
        assert check_order(make_field(data_format="DD/MM/YYYY")) == []


class TestClassify:
    """Partitioning fields into buckets."""

    def test_declared_and_implied_length_not_duplicated(self, make_field) -> None:
        field = make_field(data_validate="numeric,length", data_length="1,5")
        buckets = classify([field])

        assert list(buckets) == ["numeric", "length"]
        assert buckets["numeric"] == [field]
        assert buckets["length"] == [field]

    def test_repeated_classification_keeps_single_membership(self, make_field) -> None:
        field = make_field(data_validate="numeric,length", data_length="1,5")
        buckets = classify([field, field])
        buckets.register_field(field)

        assert len(buckets["numeric"]) == 1
        assert len(buckets["length"]) == 1
        assert buckets.fields == [field]

    def test_data_length_alone_implies_length(self, make_field) -> None:
        field = make_field(data_length="5")
        assert classify([field])["length"] == [field]

    def test_required_attribute_implies_required(self, make_field) -> None:
        field = make_field(required="")
        assert classify([field])["required"] == [field]

    def test_data_date_alone_implies_date(self, make_field) -> None:
        field = make_field(data_date="YYYY-MM-DD")
        assert classify([field])["date"] == [field]

    def test_data_date_alone_is_checked(self) -> None:
        field = FormField(value="2024-02-31", attributes={"data-date": "YYYY-MM-DD"})
        result = validate_fields([field])

        assert not result.valid
        assert result.failures == {"date": [field]}

    def test_data_format_numeric_alone_is_checked(self) -> None:
        field = FormField(value="12a", attributes={"data-format": "numeric"})
        assert validate_fields([field]).failures == {"numeric": [field]}

    def test_unvalidated_fields_left_out(self, make_field) -> None:
        plain = make_field(name="plain")
        checked = make_field(name="checked", data_validate="email")
        buckets = classify([plain, checked])

        assert buckets.fields == [checked]
        assert "email" in buckets
        assert len(buckets) == 1

    def test_bucket_and_member_order(self, make_field) -> None:
        a = make_field(name="a", data_validate="email")
        b = make_field(name="b", data_validate="numeric,email")
        buckets = classify([a, b])

        assert list(buckets) == ["email", "numeric"]
        assert buckets["email"] == [a, b]

    def test_equal_fields_are_distinct_members(self, make_field) -> None:
        first = make_field(name="same", data_validate="email")
        second = make_field(name="same", data_validate="email")
        assert len(classify([first, second])["email"]) == 2

    def test_custom_attribute(self, make_field) -> None:
        field = make_field(data_rules="email")
        buckets = classify([field], attribute="data-rules")
        assert buckets["email"] == [field]

    def test_as_dict(self, make_field) -> None:
        field = make_field(name="age", data_validate="numeric")
        assert classify([field]).as_dict() == {"numeric": ["age"]}


class TestBucketMap:
    """Registration after construction."""

    def test_unregister_drops_empty_buckets(self, make_field) -> None:
        a = make_field(name="a", data_validate="email")
        b = make_field(name="b", data_validate="email,numeric")
        buckets = classify([a, b])

        assert buckets.unregister_field(b)
        assert list(buckets) == ["email"]
        assert buckets["email"] == [a]

    def test_unregister_unknown_field(self, make_field) -> None:
        buckets = BucketMap()
        assert not buckets.unregister_field(make_field())

    def test_register_returns_types(self, make_field) -> None:
        buckets = BucketMap()
        field = make_field(data_validate="date", required="")
        assert buckets.register_field(field) == ["date", "required"]
        assert buckets.get("date") == [field]
        assert buckets.get("email") == []

    def test_add_reports_duplicates(self, make_field) -> None:
        buckets = BucketMap()
        field = make_field()
        assert buckets.add("email", field)
        assert not buckets.add("email", field)
