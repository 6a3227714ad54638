"""
Formcheck Configuration Management
==================================

Centralized configuration with support for:
- Multiple configuration sources (files, env, runtime)
- Hierarchical configuration with dot notation
- Type-safe access with defaults

Configuration Loading Priority (highest to lowest):
1. Runtime overrides
2. Environment variables (FORMCHECK_*)
3. config/{env}.py (environment-specific)
4. config/app.py (base configuration)
5. Default values

Known keys:
    validation.locale     Locale used for messages ("en")
    validation.fallback   Locale consulted when a key is missing ("en")
    validation.bail       Stop each field at its first failure (False)
    logging.level         Minimum log level name ("INFO")
    logging.format        "text" or "json"

Example:
    config = Config()
    config.set("validation.locale", "id")
    config.get("validation.locale")  # "id"
"""

from __future__ import annotations

import copy
import importlib.util
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, TypeVar, Union

T = TypeVar("T")

ENV_PREFIX = "FORMCHECK_"

DEFAULTS: Dict[str, Any] = {
    "validation": {
        "locale": "en",
        "fallback": "en",
        "bail": False,
    },
    "logging": {
        "level": "INFO",
        "format": "text",
    },
}


@dataclass
class ConfigSource:
    """Represents a configuration source with priority."""
    name: str
    data: Dict[str, Any]
    priority: int = 0


class Config:
    """
    Configuration container.

    Provides hierarchical configuration access with type coercion
    and default values. Configuration values can be nested using
    dot notation.
    """

    def __init__(self, defaults: bool = True) -> None:
        self._sources: List[ConfigSource] = []
        self._cache: Dict[str, Any] = {}
        self._merged: Dict[str, Any] = {}
        self._dirty = True

        if defaults:
            self.add_source("defaults", copy.deepcopy(DEFAULTS), priority=0)

    def load_from_path(self, config_path: Union[str, Path]) -> "Config":
        """
        Load configuration from a directory.

        Loads:
        - app.py (base configuration)
        - {FORMCHECK_ENV}.py (environment-specific)
        - FORMCHECK_* environment variables
        """
        config_path = Path(config_path)
        if config_path.exists():
            base_config = config_path / "app.py"
            if base_config.exists():
                self.add_source("app", self._load_python_config(base_config), priority=10)

            env = os.getenv(f"{ENV_PREFIX}ENV", "development")
            env_config = config_path / f"{env}.py"
            if env_config.exists():
                self.add_source(f"env:{env}", self._load_python_config(env_config), priority=20)

        self.load_env()
        return self

    def _load_python_config(self, path: Path) -> Dict[str, Any]:
        """Load configuration from Python file."""
        spec = importlib.util.spec_from_file_location("formcheck_config", path)
        if spec is None or spec.loader is None:
            return {}

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        # Look for 'config' dict or all public variables
        if hasattr(module, "config"):
            return module.config

        return {
            key: value
            for key, value in vars(module).items()
            if not key.startswith("_")
        }

    def load_env(self, environ: Optional[Dict[str, str]] = None) -> "Config":
        """Load overrides from FORMCHECK_* environment variables."""
        overrides: Dict[str, Any] = {}
        source = os.environ if environ is None else environ

        for key, value in source.items():
            if key.startswith(ENV_PREFIX) and key != f"{ENV_PREFIX}ENV":
                # FORMCHECK_VALIDATION_LOCALE -> validation.locale
                config_key = key[len(ENV_PREFIX):].lower().replace("_", ".")
                overrides[config_key] = self._parse_env_value(value)

        if overrides:
            self.add_source("env_vars", self._unflatten(overrides), priority=100)
        return self

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        # JSON (for complex values)
        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _unflatten(self, flat: Dict[str, Any]) -> Dict[str, Any]:
        """Convert flat dot-notation keys to nested dict."""
        result: Dict[str, Any] = {}

        for key, value in flat.items():
            parts = key.split(".")
            current = result

            for part in parts[:-1]:
                if part not in current:
                    current[part] = {}
                current = current[part]

            current[parts[-1]] = value

        return result

    def add_source(
        self,
        name: str,
        data: Dict[str, Any],
        priority: int = 0,
    ) -> None:
        """Add a configuration source."""
        self._sources.append(ConfigSource(name=name, data=data, priority=priority))
        self._dirty = True
        self._cache.clear()

    def _merge(self) -> None:
        """Merge all sources into single configuration."""
        if not self._dirty:
            return

        # Sort by priority (lower first, so higher overrides)
        sorted_sources = sorted(self._sources, key=lambda s: s.priority)

        self._merged = {}
        for source in sorted_sources:
            self._deep_merge(self._merged, source.data)

        self._dirty = False
        self._cache.clear()

    def _deep_merge(self, base: Dict, override: Dict) -> None:
        """Deep merge override into base."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            elif isinstance(value, dict):
                base[key] = {}
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: T = None) -> Union[Any, T]:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "validation.locale")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        self._merge()

        if key in self._cache:
            return self._cache[key]

        current: Any = self._merged
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        self._cache[key] = current
        return current

    def get_int(self, key: str, default: int = 0) -> int:
        """Get configuration value as integer."""
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get configuration value as boolean."""
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "yes", "1")
        return bool(value)

    def get_str(self, key: str, default: str = "") -> str:
        value = self.get(key, default)
        return default if value is None else str(value)

    def set(self, key: str, value: Any) -> None:
        """
        Set a runtime configuration value.

        Runtime values have the highest priority.
        """
        runtime_source = None
        for source in self._sources:
            if source.name == "runtime":
                runtime_source = source
                break

        if runtime_source is None:
            runtime_source = ConfigSource(name="runtime", data={}, priority=1000)
            self._sources.append(runtime_source)

        parts = key.split(".")
        current = runtime_source.data

        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = value
        self._dirty = True
        self._cache.clear()

    def has(self, key: str) -> bool:
        """Check if configuration key exists."""
        return self.get(key) is not None

    def all(self) -> Dict[str, Any]:
        """Get all configuration as dict."""
        self._merge()
        return copy.deepcopy(self._merged)

    def __getitem__(self, key: str) -> Any:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: str) -> bool:
        return self.has(key)


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get global configuration instance."""
    global _config
    if _config is None:
        _config = Config().load_env()
    return _config


def config(key: str, default: Any = None) -> Any:
    """Shortcut function for configuration access."""
    return get_config().get(key, default)
