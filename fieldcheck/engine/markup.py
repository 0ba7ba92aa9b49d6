"""
fieldcheck Markup Reader
========================

Reads the controls of an HTML form into FormField objects.

Recognized controls:
    <input ...>          value from the ``value`` attribute
    <textarea>text</textarea>
    <select>             value of the selected option (else the first)

Checkboxes and radios read as their value (default "on") when ``checked``
and as "" otherwise. Button-like inputs (submit, button, reset, image) are
not fields and are skipped.

Example:
    form = parse_form('''
        <form id="signup">
            <input name="email" data-validate="required,email">
            <input name="born" data-validate="date" data-format="DD.MM.YYYY">
        </form>
    ''')
    form.apply_values({"email": "user@example.com", "born": "31.02.1990"})
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from fieldcheck.core.config import ConfigurationError
from fieldcheck.validation.form import FormField

SKIPPED_INPUT_TYPES = {"submit", "button", "reset", "image"}
CHECKABLE_INPUT_TYPES = {"checkbox", "radio"}

Attributes = List[Tuple[str, Optional[str]]]


@dataclass
class FieldContainer:
    """
    The controls of one form, in document order.

    Attributes:
        fields: Parsed fields
        attributes: Attributes of the enclosing <form> element, if any
    """

    fields: List[FormField] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.attributes.get("id") or self.attributes.get("name") or ""

    def get(self, name: str) -> Optional[FormField]:
        for candidate in self.fields:
            if candidate.name == name:
                return candidate
        return None

    def apply_values(self, values: Mapping[str, object]) -> List[str]:
        """
        Set field values by name.

        Every field sharing a name receives the value.

        Returns:
            Names that matched no field
        """
        unmatched = []
        for name, value in values.items():
            targets = [f for f in self.fields if f.name == name]
            if not targets:
                unmatched.append(name)
            for target in targets:
                target.value = "" if value is None else str(value)
        return unmatched

    def __iter__(self) -> Iterator[FormField]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


class FormMarkupParser(HTMLParser):
    """
    Collects form controls from HTML.

    When ``form_id`` is given only controls inside the <form> with that
    id (or name) are collected.
    """

    def __init__(self, form_id: Optional[str] = None) -> None:
        super().__init__(convert_charrefs=True)
        self.form_id = form_id
        self.container = FieldContainer()
        self._form_depth = 0
        self._in_target_form = form_id is None
        self.matched = form_id is None
        self._textarea: Optional[FormField] = None
        self._text: List[str] = []
        self._select: Optional[FormField] = None
        self._options: List[Tuple[str, bool]] = []
        self._option: Optional[Dict[str, Optional[str]]] = None

    def handle_starttag(self, tag: str, attrs: Attributes) -> None:
        attributes = dict(attrs)

        if tag == "form":
            self._enter_form(attributes)
        elif not self._in_target_form:
            return
        elif tag == "input":
            self._add_input(attributes)
        elif tag == "textarea":
            self._textarea = self._new_field(tag, attributes)
            self._text = []
        elif tag == "select":
            self._select = self._new_field(tag, attributes)
            self._options = []
        elif tag == "option" and self._select is not None:
            self._close_option()
            self._option = attributes
            self._text = []

    def handle_startendtag(self, tag: str, attrs: Attributes) -> None:
        self.handle_starttag(tag, attrs)
        if tag in ("textarea", "select", "option"):
            self.handle_endtag(tag)

    def handle_data(self, data: str) -> None:
        if self._textarea is not None or self._option is not None:
            self._text.append(data)

    def handle_endtag(self, tag: str) -> None:
        if tag == "form":
            self._leave_form()
        elif tag == "textarea" and self._textarea is not None:
            text = "".join(self._text)
            # A newline right after <textarea> is not part of the value
            if text.startswith("\n"):
                text = text[1:]
            self._textarea.value = text
            self.container.fields.append(self._textarea)
            self._textarea = None
        elif tag == "option":
            self._close_option()
        elif tag == "select" and self._select is not None:
            self._close_option()
            selected = [value for value, chosen in self._options if chosen]
            if selected:
                self._select.value = selected[0]
            elif self._options:
                self._select.value = self._options[0][0]
            self.container.fields.append(self._select)
            self._select = None

    def close(self) -> None:
        super().close()
        # Unterminated controls still count
        if self._textarea is not None:
            self.handle_endtag("textarea")
        if self._select is not None:
            self.handle_endtag("select")

    def _enter_form(self, attributes: Dict[str, Optional[str]]) -> None:
        self._form_depth += 1
        if self.form_id is None:
            if not self.container.attributes:
                self.container.attributes = _clean(attributes)
            return
        if self.form_id in (attributes.get("id"), attributes.get("name")):
            self._in_target_form = True
            self.matched = True
            self.container.attributes = _clean(attributes)

    def _leave_form(self) -> None:
        self._form_depth = max(0, self._form_depth - 1)
        if self.form_id is not None and self._form_depth == 0:
            self._in_target_form = False

    def _add_input(self, attributes: Dict[str, Optional[str]]) -> None:
        input_type = (attributes.get("type") or "text").lower()
        if input_type in SKIPPED_INPUT_TYPES:
            return

        control = self._new_field("input", attributes)
        if input_type in CHECKABLE_INPUT_TYPES:
            checked = "checked" in attributes
            control.value = (attributes.get("value") or "on") if checked else ""
        else:
            control.value = attributes.get("value") or ""
        self.container.fields.append(control)

    def _close_option(self) -> None:
        if self._option is None:
            return
        text = "".join(self._text).strip()
        value = self._option.get("value")
        self._options.append((text if value is None else value, "selected" in self._option))
        self._option = None
        self._text = []

    def _new_field(self, tag: str, attributes: Dict[str, Optional[str]]) -> FormField:
        name = attributes.get("name") or attributes.get("id") or f"{tag}-{len(self.container.fields) + 1}"
        return FormField(name=name, tag=tag, attributes=dict(attributes))


def _clean(attributes: Dict[str, Optional[str]]) -> Dict[str, str]:
    return {k: "" if v is None else v for k, v in attributes.items()}


def parse_form(html: str, form_id: Optional[str] = None) -> FieldContainer:
    """
    Parse the form controls out of an HTML document or fragment.

    Args:
        html: HTML source
        form_id: Only read controls of the <form> with this id or name

    Returns:
        FieldContainer with the controls in document order

    Raises:
        ConfigurationError: If ``form_id`` matches no <form>
    """
    parser = FormMarkupParser(form_id)
    parser.feed(html)
    parser.close()
    if not parser.matched:
        raise ConfigurationError(f"No <form> with id or name {form_id!r}")
    return parser.container
