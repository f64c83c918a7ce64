"""
================================================================================
Configuration Loader
================================================================================

Settings for the UI and API suites, read from YAML and overridable from the
environment.

Lookup order for `get("ui.timeouts.element", 10000)`:
    1. UI_TIMEOUTS_ELEMENT environment variable (coerced to the default's type)
    2. config/<TEST_ENV>.yaml, deep-merged over
    3. config/config.yaml
    4. the default argument

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


CONFIG_DIR = Path(__file__).parent.parent.parent / "config"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.yaml"

# TEST_ENV=qa layers config/qa.yaml on top of config.yaml
ENV_SELECTOR = "TEST_ENV"

_TRUTHY = ("true", "1", "yes", "on")


class ConfigurationError(Exception):
    """A configuration file exists but cannot be used."""


def env_var_for(key: str) -> str:
    """Environment variable that overrides a dotted key: ui.base_url -> UI_BASE_URL."""
    return key.upper().replace(".", "_")


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for name, value in override.items():
        if isinstance(merged.get(name), dict) and isinstance(value, dict):
            merged[name] = _deep_merge(merged[name], value)
        else:
            merged[name] = value
    return merged


def _coerce(raw: str, like: Any) -> Any:
    """Convert an environment string to the type of `like` when possible."""
    if isinstance(like, bool):
        return raw.strip().lower() in _TRUTHY
    for kind in (int, float):
        if isinstance(like, kind):
            try:
                return kind(raw)
            except ValueError:
                logger.warning(f"Cannot read {raw!r} as {kind.__name__}; using it as a string")
                return raw
    return raw


def _read_mapping(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{path} is not valid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must hold a mapping, got {type(data).__name__}")
    return data


class ConfigLoader:
    """
    Process-wide configuration.

    The first construction loads the files; later constructions return the
    same object and ignore their arguments. Tests call `ConfigLoader.reset()`
    to start over.

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("ui.base_url", "https://practicetestautomation.com")
        'https://practicetestautomation.com'
    """

    _instance: Optional["ConfigLoader"] = None

    def __new__(cls, config_path: Optional[Path] = None, env: Optional[str] = None) -> "ConfigLoader":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._loaded = False
            cls._instance = instance
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None, env: Optional[str] = None) -> None:
        """
        Args:
            config_path: Base YAML file (defaults to config/config.yaml)
            env: Overlay name (defaults to $TEST_ENV); empty means no overlay
        """
        if self._loaded:
            return
        self._path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._env = env if env is not None else os.environ.get(ENV_SELECTOR, "")
        self._data: Dict[str, Any] = {}
        self._load()
        self._loaded = True

    @property
    def env(self) -> str:
        """Active overlay name, "" when none."""
        return self._env

    def _load(self) -> None:
        if self._path.exists():
            data = _read_mapping(self._path)
            logger.debug(f"Configuration read from {self._path}")
        else:
            data = {}
            logger.warning(f"{self._path} not found; only defaults and environment variables apply")

        if self._env:
            overlay = self._path.with_name(f"{self._env}.yaml")
            if overlay.exists():
                data = _deep_merge(data, _read_mapping(overlay))
                logger.debug(f"Environment '{self._env}' overlay applied from {overlay}")
            else:
                logger.warning(f"Environment '{self._env}' has no overlay file ({overlay})")

        self._data = data

    def get(self, key: str, default: Any = None) -> Any:
        """
        Value for a dotted key, or `default` when it is not set anywhere.

        Environment overrides are returned as strings unless `default`
        gives a type to convert to.
        """
        raw = os.environ.get(env_var_for(key))
        if raw is not None:
            return raw if default is None else _coerce(raw, default)

        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or node.get(part) is None:
                return default
            node = node[part]
        return node

    def get_section(self, section: str) -> Dict[str, Any]:
        """Top-level mapping `section` from the files (no env overrides)."""
        return dict(self._data.get(section) or {})

    def reload(self) -> None:
        """Read the files again."""
        self._load()
        logger.info(f"Configuration reloaded from {self._path}")

    @classmethod
    def reset(cls) -> None:
        """Forget the shared instance."""
        cls._instance = None


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "env_var_for",
]
