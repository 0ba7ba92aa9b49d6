"""
fieldcheck CLI Main Module
==========================

Command-line entry point: validate an HTML form against a set of values.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

import orjson

from fieldcheck import __version__
from fieldcheck.core.config import Config, ConfigurationError, FieldcheckError
from fieldcheck.engine.markup import parse_form
from fieldcheck.utils.logger import configure_logging, get_logger
from fieldcheck.validation.compiler import BUILTIN_TYPES
from fieldcheck.validation.form import create_validator
from fieldcheck.validation.messages import hint_for
from fieldcheck.validation.settings import ValidatorSettings

logger = get_logger("fieldcheck")

EXIT_OK = 0
EXIT_BLOCKED = 1
EXIT_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="fieldcheck",
        description="Validate HTML form fields declared with data-validate attributes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fieldcheck check signup.html --values values.json
  fieldcheck check signup.html --set email=user@example.com --format json
  fieldcheck check signup.html --rules rules.json --strict
  fieldcheck rules --rules rules.json
        """,
    )

    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"fieldcheck {__version__}",
    )
    parser.add_argument(
        "--log-level",
        default="warning",
        choices=["debug", "info", "warning", "error"],
        help="Log level for messages on stderr",
    )
    parser.add_argument(
        "--log-format",
        default="text",
        choices=["text", "json"],
        help="Log output format",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        help="Validate the fields of an HTML form",
    )
    check_parser.add_argument(
        "form",
        help="HTML file containing the form ('-' reads stdin)",
    )
    check_parser.add_argument(
        "--form-id",
        help="Only validate the <form> with this id or name",
    )
    check_parser.add_argument(
        "--values",
        help="JSON file mapping field names to values",
    )
    check_parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set one field value (repeatable, applied after --values)",
    )
    _add_settings_arguments(check_parser)
    check_parser.add_argument(
        "--format",
        default="text",
        choices=["text", "json"],
        help="Report format",
    )

    # Rules command
    rules_parser = subparsers.add_parser(
        "rules",
        help="List the validation types available",
    )
    _add_settings_arguments(rules_parser)

    return parser


def _add_settings_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--rules",
        help="JSON file mapping custom type names to regular expressions",
    )
    parser.add_argument(
        "--config",
        help="Configuration file (.json or .py)",
    )
    parser.add_argument(
        "--date-format",
        help="Default date template, e.g. DD.MM.YYYY",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when a field declares a type that has no rule",
    )


def cli(args: Optional[List[str]] = None, stdout: Optional[TextIO] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)
        stdout: Stream for reports (sys.stdout if None)

    Returns:
        Exit code: 0 valid, 1 submission blocked, 2 usage or input error
    """
    parser = create_parser()
    parsed = parser.parse_args(args)
    out = stdout or sys.stdout

    configure_logging(level=parsed.log_level, format=parsed.log_format)

    if not parsed.command:
        parser.print_help(out)
        return EXIT_OK

    handlers = {
        "check": handle_check,
        "rules": handle_rules,
    }

    try:
        return handlers[parsed.command](parsed, out)
    except (FieldcheckError, OSError) as e:
        logger.error("Command failed", command=parsed.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


def _load_json(path: str, what: str) -> Dict[str, Any]:
    try:
        data = orjson.loads(Path(path).read_bytes())
    except orjson.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {what} file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"The {what} file {path} must contain a JSON object")
    return data


def _build_config(args: argparse.Namespace) -> Config:
    config = Config()
    if args.config:
        config.load_from_path(args.config)
    config.load_env()
    if args.date_format:
        config.set("date_format", args.date_format)
    if args.strict:
        config.set("strict_types", True)
    return config


def _custom_rules(args: argparse.Namespace) -> Dict[str, Any]:
    return _load_json(args.rules, "rules") if args.rules else {}


def _read_form(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _parse_assignments(assignments: List[str]) -> Dict[str, str]:
    values = {}
    for assignment in assignments:
        name, sep, value = assignment.partition("=")
        if not sep or not name:
            raise ConfigurationError(f"Expected NAME=VALUE, got {assignment!r}")
        values[name] = value
    return values


def handle_check(args: argparse.Namespace, out: TextIO) -> int:
    """Handle check command."""
    config = _build_config(args)
    form = parse_form(_read_form(args.form), form_id=args.form_id)

    values: Dict[str, Any] = {}
    if args.values:
        values.update(_load_json(args.values, "values"))
    values.update(_parse_assignments(args.assignments))

    for name in form.apply_values(values):
        logger.warning("Value given for unknown field", field=name)

    validator = create_validator(form, rules=_custom_rules(args), config=config)
    result = validator.submit()

    if args.format == "json":
        out.write(result.to_json(pretty=True) + "\n")
    else:
        for checked in result.checked:
            reason = result.reason_for(checked)
            if reason is None:
                out.write(f"ok    {checked.name}\n")
            else:
                message = hint_for(reason, validator.settings.messages)
                out.write(f"FAIL  {checked.name}  [{reason}] {message}\n")
        if result.blocked:
            focus = validator.focused.name if validator.focused is not None else "-"
            out.write(f"blocked: {len(result.verdicts)} invalid field(s), focus on {focus}\n")
        else:
            out.write(f"passed: {len(result.checked)} field(s) checked\n")

    return EXIT_BLOCKED if result.blocked else EXIT_OK


def handle_rules(args: argparse.Namespace, out: TextIO) -> int:
    """Handle rules command."""
    config = _build_config(args)
    settings = ValidatorSettings.from_options(rules=_custom_rules(args), config=config)

    for name in settings.rules:
        kind = "builtin" if name in BUILTIN_TYPES else "custom"
        out.write(f"{name:<16} {kind}\n")
    return EXIT_OK


def main() -> None:
    """Console script entry point."""
    sys.exit(cli())


if __name__ == "__main__":
    main()
