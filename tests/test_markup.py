"""
Tests for the HTML form reader.
"""

import pytest

from fieldcheck.core.config import ConfigurationError
from fieldcheck.engine.markup import parse_form
from fieldcheck.validation.form import create_validator

SIGNUP = """
<html><body>
<form id="signup" class="card">
    <input type="text" name="email" data-validate="required,email" value="user@example.com">
    <input type="text" name="zip" data-length="5" data-format="max" class="wide">
    <input type="checkbox" name="terms" required>
    <input type="checkbox" name="news" value="weekly" checked>
    <textarea name="bio" data-length="2,">
Hello</textarea>
    <select name="country" data-validate="required">
        <option value="">Choose</option>
        <option value="nl" selected>Netherlands</option>
    </select>
    <select name="size"><option>S</option><option>M</option></select>
    <input type="submit" value="Send">
    <button type="submit">Go</button>
</form>
<form id="search">
    <input name="q" data-validate="required">
</form>
</body></html>
"""


class TestParseForm:
    """Reading controls from markup."""

    def test_controls_in_document_order(self) -> None:
        form = parse_form(SIGNUP)
        names = [f.name for f in form]
        assert names == ["email", "zip", "terms", "news", "bio", "country", "size", "q"]

    def test_input_values_and_attributes(self) -> None:
        form = parse_form(SIGNUP)
        email = form.get("email")
        assert email.value == "user@example.com"
        assert email.get_attribute("data-validate") == "required,email"
        assert form.get("zip").classes == ["wide"]
        assert form.get("terms").get_attribute("required") == ""

    def test_checkable_inputs(self) -> None:
        form = parse_form(SIGNUP)
        assert form.get("terms").value == ""
        assert form.get("news").value == "weekly"

    def test_textarea_drops_leading_newline(self) -> None:
        assert parse_form(SIGNUP).get("bio").value == "Hello"

    def test_select_values(self) -> None:
        form = parse_form(SIGNUP)
        assert form.get("country").value == "nl"
        assert form.get("size").value == "S"
        assert form.get("country").tag == "select"

    def test_buttons_skipped(self) -> None:
        assert parse_form(SIGNUP).get("Send") is None
        assert all(f.tag != "button" for f in parse_form(SIGNUP))

    def test_form_scoping(self) -> None:
        form = parse_form(SIGNUP, form_id="search")
        assert [f.name for f in form] == ["q"]
        assert form.name == "search"

    def test_unknown_form_id(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_form(SIGNUP, form_id="nope")

    def test_form_id_without_forms(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_form('<input name="q">', form_id="search")

    def test_first_form_attributes_without_scope(self) -> None:
        assert parse_form(SIGNUP).name == "signup"

    def test_unnamed_controls(self) -> None:
        form = parse_form('<input data-validate="numeric"><input id="code">')
        assert [f.name for f in form] == ["input-1", "code"]

    def test_unterminated_textarea(self) -> None:
        form = parse_form('<textarea name="note">draft')
        assert form.get("note").value == "draft"

    def test_apply_values(self) -> None:
        form = parse_form(SIGNUP)
        unmatched = form.apply_values({"zip": "123456", "terms": None, "nope": "x", "size": 7})

        assert unmatched == ["nope"]
        assert form.get("zip").value == "123456"
        assert form.get("terms").value == ""
        assert form.get("size").value == "7"
        assert len(form) == 8


class TestParsedFormValidation:
    """A parsed form end to end."""

    def test_submit(self) -> None:
        form = parse_form(SIGNUP, form_id="signup")
        form.apply_values({"zip": "1234", "terms": "on", "bio": "x"})
        result = create_validator(form).submit()

        assert result.errors == {"bio": "length"}
        assert form.get("bio").has_class("error")
        assert form.get("zip").classes == ["wide"]
