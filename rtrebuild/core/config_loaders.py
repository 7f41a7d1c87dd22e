"""
Configuration Loading Functions.

Configuration precedence: 1. Env vars, 2. YAML file, 3. Defaults

Environment Variables
---------------------
    RTREBUILD_SOURCE_PASSWORD   Password for the source database
    RTREBUILD_SEARCHD_HOST      Search daemon host
    RTREBUILD_SEARCHD_PORT      Search daemon SphinxQL port

String values in the YAML file may also reference the environment with
``${VAR}`` or ``${VAR:default}``.
"""

import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from rtrebuild.core.config.config import AppConfig
from rtrebuild.core.exceptions import ConfigurationError


CONFIG_FILENAMES = ("rtrebuild.yaml", "config.yaml")


class _Logger:
    """Lazy logger holder."""

    _instance = None

    @classmethod
    def get(cls) -> Any:
        """Get logger (lazy-loaded)."""
        if cls._instance is None:
            from rtrebuild.core.logging import get_logger

            cls._instance = get_logger(__name__)
        return cls._instance


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Args:
        value: Configuration value (string, dict, list, or primitive)

    Returns:
        Value with all environment variables expanded
    """
    if isinstance(value, str):
        pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

        def replace_env_var(match: re.Match) -> str:
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def _apply_env_overrides(data: dict) -> dict:
    """Apply environment variable overrides to the raw config mapping."""
    source = dict(data.get("source") or {})
    searchd = dict(data.get("searchd") or {})

    password = os.environ.get("RTREBUILD_SOURCE_PASSWORD")
    if password:
        source["password"] = password

    host = os.environ.get("RTREBUILD_SEARCHD_HOST")
    if host:
        searchd["host"] = host

    port = os.environ.get("RTREBUILD_SEARCHD_PORT")
    if port:
        if not port.isdigit():
            raise ConfigurationError(
                f"RTREBUILD_SEARCHD_PORT must be an integer, got {port!r}"
            )
        searchd["port"] = int(port)

    data["source"] = source
    data["searchd"] = searchd
    return data


def find_config_file(base_path: Optional[Path] = None) -> Optional[Path]:
    """Return the first known config file in base_path, if any."""
    base_path = base_path or Path.cwd()
    for filename in CONFIG_FILENAMES:
        candidate = base_path / filename
        if candidate.exists():
            return candidate
    return None


def load_config(
    config_path: Optional[Path] = None, base_path: Optional[Path] = None
) -> AppConfig:
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to rtrebuild.yaml or
            config.yaml in base_path.
        base_path: Directory searched when config_path is None.

    Returns:
        AppConfig with all settings.

    Raises:
        ConfigurationError: If the file cannot be parsed or holds invalid values
    """
    if config_path is None:
        config_path = find_config_file(base_path)

    data: dict = {}
    if config_path is not None and config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Cannot parse config file {config_path}: {e}",
                config_file=str(config_path),
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {config_path} must contain a mapping",
                config_file=str(config_path),
            )
        _Logger.get().debug("Loaded config file", path=str(config_path))
    elif config_path is not None:
        _Logger.get().warning("Config file not found, using defaults", path=str(config_path))

    data = _apply_env_overrides(expand_env_vars(data))

    try:
        return AppConfig.from_dict(data)
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            config_file=str(config_path) if config_path else None,
        ) from e
