"""
Tests for date templates and calendar checks.
"""

from datetime import date

import pytest

from fieldcheck.validation.dates import (
    expand_year,
    normalize_date,
    parse_date_format,
)

TODAY = date(2024, 6, 15)


class TestParseDateFormat:
    """Template decomposition."""

    def test_components_and_delimiter(self) -> None:
        fmt = parse_date_format("MM/DD/YYYY")
        assert fmt is not None
        assert fmt.delimiter == "/"
        assert fmt.components == ("MM", "DD", "YYYY")
        assert fmt.keys == ("M", "D", "Y")

    def test_first_non_word_character_is_delimiter(self) -> None:
        fmt = parse_date_format("DD.MM.YYYY")
        assert fmt is not None
        assert fmt.delimiter == "."
        assert fmt.index_of("Y") == 2

    def test_lowercase_keys(self) -> None:
        fmt = parse_date_format("yyyy-mm-dd")
        assert fmt is not None
        assert fmt.keys == ("Y", "M", "D")

    @pytest.mark.parametrize("template", ["", None, "MMDDYYYY", "MM//YYYY", "/DD/YYYY"])
    def test_undecomposable_templates(self, template) -> None:
        assert parse_date_format(template) is None

    def test_placeholder_is_template(self) -> None:
        assert parse_date_format("DD-MM-YYYY").placeholder() == "DD-MM-YYYY"


class TestShape:
    """Digit-group shape of values."""

    def test_non_year_components_accept_short_values(self) -> None:
        fmt = parse_date_format("MM/DD/YYYY")
        assert fmt.extract("3/7/2024") == {"M": "3", "D": "7", "Y": "2024"}
        assert fmt.extract("03/07/2024") == {"M": "03", "D": "07", "Y": "2024"}

    def test_year_width_is_exact(self) -> None:
        fmt = parse_date_format("MM/DD/YYYY")
        assert fmt.extract("03/07/24") is None
        assert fmt.extract("03/07/02024") is None

    def test_overlong_component_rejected(self) -> None:
        fmt = parse_date_format("MM/DD/YYYY")
        assert fmt.extract("003/07/2024") is None

    def test_wrong_delimiter_rejected(self) -> None:
        fmt = parse_date_format("MM/DD/YYYY")
        assert fmt.extract("03-07-2024") is None

    def test_pattern_is_anchored(self) -> None:
        fmt = parse_date_format("MM/DD/YYYY")
        assert fmt.extract("x03/07/2024") is None
        assert fmt.extract("03/07/2024 ") is None


class TestCalendar:
    """Calendar correctness after shape matching."""

    @pytest.mark.parametrize("value", ["03/07/2024", "3/7/2024", "02/29/2024", "12/31/1999"])
    def test_real_dates_are_valid(self, value: str) -> None:
        assert parse_date_format("MM/DD/YYYY").is_valid(value, TODAY)

    @pytest.mark.parametrize(
        "value",
        ["02/31/2024", "02/29/2023", "13/01/2024", "00/10/2024", "04/31/2024", "01/00/2024"],
    )
    def test_impossible_dates_are_invalid(self, value: str) -> None:
        assert not parse_date_format("MM/DD/YYYY").is_valid(value, TODAY)

    def test_year_zero_is_invalid(self) -> None:
        assert not parse_date_format("DD.MM.YYYY").is_valid("01.01.0000", TODAY)

    def test_two_digit_year_uses_current_century(self) -> None:
        fmt = parse_date_format("DD.MM.YY")
        assert fmt.is_valid("07.03.24", TODAY)
        assert fmt.is_valid("29.02.24", TODAY)
        assert not fmt.is_valid("29.02.23", TODAY)

    def test_missing_components_are_not_compared(self) -> None:
        fmt = parse_date_format("MM/YYYY")
        assert fmt.is_valid("02/2024", TODAY)
        assert not fmt.is_valid("13/2024", TODAY)


class TestHelpers:
    """Year expansion and normalization."""

    def test_expand_year(self) -> None:
        assert expand_year("24", TODAY) == 2024
        assert expand_year("95", TODAY) == 2095
        assert expand_year("1995", TODAY) == 1995
        assert expand_year("07", date(1999, 1, 1)) == 1907

    def test_normalize_overflow(self) -> None:
        assert normalize_date(2024, 2, 31) == (2024, 3, 2)
        assert normalize_date(2024, 13, 1) == (2025, 1, 1)

    def test_normalize_underflow(self) -> None:
        assert normalize_date(2024, 1, 0) == (2023, 12, 31)
        assert normalize_date(2024, 0, 10) == (2023, 12, 10)

    def test_normalize_out_of_calendar(self) -> None:
        assert normalize_date(9999, 12, 32) is None
        assert normalize_date(0, 1, 1) is None
