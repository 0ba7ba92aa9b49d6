"""
Tests for layered configuration and validator settings.
"""

from pathlib import Path

import orjson
import pytest

from fieldcheck.core.config import Config, ConfigurationError
from fieldcheck.validation.settings import ValidatorSettings


class TestConfig:
    """Config sources and lookups."""

    def test_defaults_and_dot_notation(self) -> None:
        config = Config({"messages": {"required": "Fill in"}})
        assert config.get("messages.required") == "Fill in"
        assert config.get("messages.missing", "x") == "x"
        assert config.section("messages") == {"required": "Fill in"}
        assert config.section("nothing") == {}

    def test_runtime_values_win(self) -> None:
        config = Config({"date_format": "MM/DD/YYYY"})
        config.load_env({"FIELDCHECK_DATE_FORMAT": "DD.MM.YYYY"})
        assert config["date_format"] == "DD.MM.YYYY"

        config["date_format"] = "YYYY-MM-DD"
        assert config.get("date_format") == "YYYY-MM-DD"

    def test_env_parsing(self) -> None:
        config = Config().load_env({
            "FIELDCHECK_STRICT_TYPES": "yes",
            "FIELDCHECK_MESSAGES__REQUIRED": "Fill in",
            "FIELDCHECK_RULES": '{"zipcode": "[0-9]{5}"}',
            "FIELDCHECK_LIMIT": "12",
            "OTHER_SETTING": "ignored",
        })
        assert config.get("strict_types") is True
        assert config.get("messages.required") == "Fill in"
        assert config.get("rules") == {"zipcode": "[0-9]{5}"}
        assert config.get("limit") == 12
        assert "other_setting" not in config

    def test_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "fieldcheck.json"
        path.write_bytes(orjson.dumps({"date_format": "DD-MM-YYYY", "error_class": "bad"}))
        config = Config().load_from_path(path)
        assert config.get("date_format") == "DD-MM-YYYY"
        assert config.get_str("error_class") == "bad"

    def test_python_file(self, tmp_path: Path) -> None:
        path = tmp_path / "fieldcheck_config.py"
        path.write_text('config = {"strict_types": True}\n', encoding="utf-8")
        assert Config().load_from_path(path).get_bool("strict_types")

    def test_python_file_globals(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.py"
        path.write_text('date_format = "DD/MM/YY"\n_private = 1\n', encoding="utf-8")
        config = Config().load_from_path(path)
        assert config.get("date_format") == "DD/MM/YY"
        assert not config.has("_private")

    def test_invalid_files(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            Config().load_from_path(tmp_path / "missing.json")

        yaml = tmp_path / "config.yaml"
        yaml.write_text("date_format: x", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            Config().load_from_path(yaml)

        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            Config().load_from_path(broken)

        listing = tmp_path / "list.json"
        listing.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            Config().load_from_path(listing)


class TestFromOptions:
    """Settings resolution."""

    def test_defaults(self) -> None:
        settings = ValidatorSettings.from_options()
        assert settings.date_format == "MM/DD/YYYY"
        assert settings.error_class == "error"
        assert settings.validate_attribute == "data-validate"
        assert not settings.date_placeholder_enabled
        assert not settings.strict_types

    def test_camel_and_snake_case(self) -> None:
        settings = ValidatorSettings.from_options({"dateFormat": "DD.MM.YYYY", "error_class": "bad"})
        assert settings.date_format == "DD.MM.YYYY"
        assert settings.error_class == "bad"

    def test_options_override_config(self) -> None:
        config = Config({"date_format": "YYYY-MM-DD", "error_class": "bad"})
        settings = ValidatorSettings.from_options({"dateFormat": "DD.MM.YYYY"}, config=config)
        assert settings.date_format == "DD.MM.YYYY"
        assert settings.error_class == "bad"

    def test_boolean_coercion(self) -> None:
        settings = ValidatorSettings.from_options({"datePlaceholderEnabled": "true", "strictTypes": 0})
        assert settings.date_placeholder_enabled is True
        assert settings.strict_types is False

    def test_wrong_types_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ValidatorSettings.from_options({"strictTypes": "maybe"})
        with pytest.raises(ConfigurationError):
            ValidatorSettings.from_options({"dateFormat": 12})
        with pytest.raises(ConfigurationError):
            ValidatorSettings.from_options({"dateFormat": "  "})

    def test_unknown_option_warns(self, log_records) -> None:
        ValidatorSettings.from_options({"colour": "red"})
        assert "Unknown option ignored" in log_records.messages()

    def test_rules_from_all_sources(self) -> None:
        config = Config({"rules": {"zipcode": "[0-9]{4}", "plate": "[A-Z]{3}"}})
        settings = ValidatorSettings.from_options(
            {"rules": {"pin": "[0-9]{4}"}},
            rules={"zipcode": "[0-9]{5}"},
            config=config,
        )
        assert {"zipcode", "plate", "pin"} <= set(settings.rules)
        assert settings.rules["zipcode"].validate("12345")
        assert not settings.rules["zipcode"].validate("1234")

    def test_allow_override(self) -> None:
        settings = ValidatorSettings.from_options(
            {"allowOverride": True},
            rules={"email": r".+@.+"},
        )
        assert settings.rules["email"].validate("a@b")

    def test_messages_from_config(self) -> None:
        config = Config({"messages": {"required": "Fill in"}})
        settings = ValidatorSettings.from_options({"messages": {"email": "Bad email"}}, config=config)
        assert settings.messages["required"] == "Fill in"
        assert settings.messages["email"] == "Bad email"
        assert settings.messages["numeric"]

    def test_implied_table(self) -> None:
        settings = ValidatorSettings.from_options({"implied": [["data-length", "length"]]})
        assert settings.implied == (("data-length", "length"),)

    def test_value_matched_implied_entry(self) -> None:
        settings = ValidatorSettings.from_options({"implied": [["data-kind", "email", "email"]]})
        assert settings.implied == (("data-kind", "email", "email"),)

    def test_malformed_implied_entry_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ValidatorSettings.from_options({"implied": [["data-length"]]})

    def test_as_dict(self) -> None:
        data = ValidatorSettings.from_options().as_dict()
        assert data["rules"][:2] == ["required", "length"]
        assert data["implied"] == [
            ["required", "required"],
            ["data-length", "length"],
            ["data-date", "date"],
            ["data-format", "numeric", "numeric"],
            ["data-format", "alphanumeric", "alphanumeric"],
        ]
