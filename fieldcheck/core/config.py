"""
fieldcheck Configuration
========================

Layered configuration with support for:
- Multiple sources with priorities (files, environment, runtime)
- Hierarchical keys with dot notation
- Typed access with defaults

Loading priority (highest to lowest):
1. Runtime values set with ``Config.set``
2. Environment variables (FIELDCHECK_*)
3. Configuration file (``.py`` or ``.json``)
4. Defaults supplied by the caller

Environment variables map to keys by dropping the prefix, lowercasing and
using a double underscore for nesting:

    FIELDCHECK_DATE_FORMAT=DD.MM.YYYY        -> date_format
    FIELDCHECK_MESSAGES__REQUIRED="Fill in"  -> messages.required

Example:
    config = Config()
    config.load_from_path(Path("fieldcheck_config.json"))
    config.load_env()

    date_format = config.get("date_format", "MM/DD/YYYY")

A Config is built by the caller and handed to ``create_validator``; the
package keeps no global instance.
"""

from __future__ import annotations

import importlib.util
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, TypeVar, Union

import orjson

T = TypeVar("T")

ENV_PREFIX = "FIELDCHECK_"


class FieldcheckError(Exception):
    """Base class for fieldcheck errors."""


class ConfigurationError(FieldcheckError):
    """Invalid construction-time configuration (options, files, rules)."""


@dataclass
class ConfigSource:
    """A configuration source with priority."""

    name: str
    data: Dict[str, Any]
    priority: int = 0


class Config:
    """
    Configuration container.

    Example:
        config = Config({"date_format": "DD-MM-YYYY"})
        config.set("messages.required", "Please fill in this field")

        config.get("date_format")                # "DD-MM-YYYY"
        config.get("messages.required")          # "Please fill in this field"
        config.get("missing", "default")         # "default"
    """

    def __init__(self, defaults: Optional[Mapping[str, Any]] = None) -> None:
        self._sources: List[ConfigSource] = []
        self._merged: Dict[str, Any] = {}
        self._dirty = True

        if defaults:
            self.add_source("defaults", dict(defaults), priority=0)

    def load_from_path(self, path: Union[str, Path]) -> "Config":
        """
        Load a configuration file.

        ``.json`` files are parsed with orjson. ``.py`` files are executed and
        either their ``config`` dict or their public module globals are used.

        Raises:
            ConfigurationError: If the file is missing, of an unsupported
                type or cannot be parsed.
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")

        if path.suffix == ".json":
            try:
                data = orjson.loads(path.read_bytes())
            except orjson.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
        elif path.suffix == ".py":
            data = self._load_python_config(path)
        else:
            raise ConfigurationError(
                f"Unsupported configuration file type: {path.suffix or path.name}"
            )

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration in {path} must be a mapping")

        self.add_source(f"file:{path}", data, priority=10)
        return self

    def _load_python_config(self, path: Path) -> Dict[str, Any]:
        spec = importlib.util.spec_from_file_location("fieldcheck_user_config", path)
        if spec is None or spec.loader is None:
            raise ConfigurationError(f"Cannot load configuration module: {path}")

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        if hasattr(module, "config"):
            return module.config

        return {
            key: value
            for key, value in vars(module).items()
            if not key.startswith("_")
        }

    def load_env(self, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Load overrides from FIELDCHECK_* environment variables."""
        environ = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}

        for key, value in environ.items():
            if not key.startswith(ENV_PREFIX):
                continue
            config_key = key[len(ENV_PREFIX):].lower().replace("__", ".")
            if config_key:
                overrides[config_key] = self._parse_env_value(value)

        if overrides:
            self.add_source("env_vars", self._unflatten(overrides), priority=100)

        return self

    def _parse_env_value(self, value: str) -> Any:
        """Parse an environment value to bool, int, JSON or plain string."""
        lowered = value.lower()
        if lowered in ("true", "yes", "on"):
            return True
        if lowered in ("false", "no", "off"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        if value.startswith(("{", "[")):
            try:
                return orjson.loads(value)
            except orjson.JSONDecodeError:
                pass

        return value

    def _unflatten(self, flat: Dict[str, Any]) -> Dict[str, Any]:
        """Convert dot-notation keys into a nested dict."""
        result: Dict[str, Any] = {}

        for key, value in flat.items():
            parts = key.split(".")
            current = result
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = value

        return result

    def add_source(
        self,
        name: str,
        data: Dict[str, Any],
        priority: int = 0,
    ) -> None:
        self._sources.append(ConfigSource(name=name, data=data, priority=priority))
        self._dirty = True

    def _merge(self) -> None:
        if not self._dirty:
            return

        # Lower priority first, so higher priority overrides
        self._merged = {}
        for source in sorted(self._sources, key=lambda s: s.priority):
            self._deep_merge(self._merged, source.data)

        self._dirty = False

    def _deep_merge(self, base: Dict[str, Any], override: Mapping[str, Any]) -> None:
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, Mapping):
                self._deep_merge(base[key], value)
            elif isinstance(value, Mapping):
                base[key] = {}
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: T = None) -> Union[Any, T]:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key (e.g. "messages.required")
            default: Value returned when the key is missing

        Returns:
            Configuration value or default
        """
        self._merge()

        current: Any = self._merged
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "yes", "on", "1")
        return bool(value)

    def get_str(self, key: str, default: str = "") -> str:
        value = self.get(key, default)
        return default if value is None else str(value)

    def set(self, key: str, value: Any) -> None:
        """Set a runtime value. Runtime values have the highest priority."""
        runtime = next((s for s in self._sources if s.name == "runtime"), None)
        if runtime is None:
            runtime = ConfigSource(name="runtime", data={}, priority=1000)
            self._sources.append(runtime)

        parts = key.split(".")
        current = runtime.data
        for part in parts[:-1]:
            current = current.setdefault(part, {})
        current[parts[-1]] = value

        self._dirty = True

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def all(self) -> Dict[str, Any]:
        self._merge()
        return dict(self._merged)

    def section(self, prefix: str) -> Dict[str, Any]:
        """Get all values under a prefix."""
        value = self.get(prefix)
        return dict(value) if isinstance(value, dict) else {}

    def __getitem__(self, key: str) -> Any:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: str) -> bool:
        return self.has(key)
