"""Configuration loader for the content registry

Configurable values come from config/config.yaml, validated at load
time with Pydantic. Typos and invalid values fail fast with clear error
messages.

The config path can be overridden with the CONTENT_REGISTRY_CONFIG
environment variable (run.py loads it from .env).

Usage:
    from src.config import load_config, get, get_validated_config

    # Load and validate (call once at startup)
    load_config("config/config.yaml")

    # Get values by dot-path
    authority = get("registry.root_authority")

    # Or use the typed config object (preferred)
    config = get_validated_config()
    authority = config.registry.root_authority
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from .config_schema import AppConfig, load_validated_config, validate_config_dict


# Global config instances
_config: dict[str, Any] | None = None
_validated_config: AppConfig | None = None

# Default config path
DEFAULT_CONFIG_PATH: Path = Path(__file__).parent.parent / "config" / "config.yaml"
CONFIG_ENV_VAR = "CONTENT_REGISTRY_CONFIG"


def _resolve_path(config_path: str | Path | None) -> Path:
    if config_path:
        return Path(config_path)
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)
    return DEFAULT_CONFIG_PATH


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config file. Defaults to $CONTENT_REGISTRY_CONFIG,
            then config/config.yaml.

    Returns:
        Configuration dictionary (validated, with defaults filled in).

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    global _config, _validated_config

    path = _resolve_path(config_path)
    _validated_config = load_validated_config(path)
    _config = _validated_config.model_dump()
    return _config


def reset_config() -> None:
    """Forget the loaded config so the next access reloads it. Mainly for tests."""
    global _config, _validated_config
    _config = None
    _validated_config = None


def get_config() -> dict[str, Any]:
    """Get the loaded configuration dict. Loads default if not already loaded.

    For typed access, use get_validated_config() instead.
    """
    global _config
    if _config is None:
        load_config()
    if _config is None:
        raise RuntimeError("Config failed to load. Call load_config() first.")
    return _config


def get_validated_config() -> AppConfig:
    """Get the validated configuration object.

    Returns a typed AppConfig instance with IDE autocompletion support.
    Loads default config if not already loaded.
    """
    global _validated_config
    if _validated_config is None:
        load_config()
    if _validated_config is None:
        raise RuntimeError("Validated config failed to load. Call load_config() first.")
    return _validated_config


def get(key: str, default: Any = None) -> Any:
    """Get a config value by dot-separated key path.

    Examples:
        get("registry.root_authority")
        get("logging.default_recent")
    """
    config: dict[str, Any] = get_config()
    keys: list[str] = key.split(".")

    value: Any = config
    for k in keys:
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value


def set_config_value(key: str, value: Any) -> None:
    """Set a config value by dot-separated key path.

    Used for runtime overrides (e.g., CLI args). The whole config is
    re-validated, so an invalid override raises pydantic.ValidationError
    and leaves the previous config in place.

    Args:
        key: Dot-separated key path (e.g., "registry.root_authority")
        value: Value to set
    """
    global _config, _validated_config

    current = get_config()
    updated: dict[str, Any] = _deep_copy(current)

    keys = key.split(".")
    target = updated
    for k in keys[:-1]:
        if k not in target:
            target[k] = {}
        target = target[k]
    target[keys[-1]] = value

    _validated_config = validate_config_dict(updated)
    _config = _validated_config.model_dump()


def _deep_copy(data: dict[str, Any]) -> dict[str, Any]:
    return {k: _deep_copy(v) if isinstance(v, dict) else v for k, v in data.items()}
