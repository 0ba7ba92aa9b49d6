"""
fieldcheck CLI
==============

Command-line interface.

Commands:
- check: Validate the fields of an HTML form
- rules: List the validation types available
"""

from fieldcheck.cli.main import cli, main

__all__ = ["main", "cli"]
