"""Configuration loading utilities for SithCodec."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from .errors import ConfigError

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "configs" / "default.yaml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping at the top level")
    return data


def load_default_config() -> Dict[str, Any]:
    """Load the bundled default configuration.

    Returns
    -------
    Dict[str, Any]
        Parsed configuration dictionary.

    Raises
    ------
    ConfigError
        If the default configuration file is missing or cannot be parsed.
    """

    if not DEFAULT_CONFIG_PATH.exists():
        raise ConfigError(f"Default config not found at {DEFAULT_CONFIG_PATH}")
    return _read_yaml(DEFAULT_CONFIG_PATH)


def load_custom_config(path: Path) -> Dict[str, Any]:
    """Load a user supplied YAML config without merging."""

    if not path.exists():
        raise ConfigError(f"Config path does not exist: {path}")
    return _read_yaml(path)


def load_config(config_path: Path | None = None) -> Dict[str, Any]:
    """Load the default config, shallow-merged with ``config_path`` if given.

    The ``headers`` section is merged one level deeper so a user file can
    override a single format.
    """

    base = load_default_config()
    if config_path is None or Path(config_path).resolve() == DEFAULT_CONFIG_PATH:
        return base

    override = load_custom_config(Path(config_path))
    merged = {**base, **override}
    base_headers = base.get("headers") or {}
    override_headers = override.get("headers") or {}
    if isinstance(base_headers, dict) and isinstance(override_headers, dict):
        merged["headers"] = {**base_headers, **override_headers}
    return merged
