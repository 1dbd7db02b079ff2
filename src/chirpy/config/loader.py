"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from chirpy.config.models import ChirpyConfig, ConfigError
from chirpy.config.paths import get_config_path
from chirpy.logging import LOG_LEVEL_ENV_VAR


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("chirpy.toml"),  # Current directory
        get_config_path(),  # $CHIRPY_HOME/config.toml
    ]


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    if level := os.environ.get(LOG_LEVEL_ENV_VAR):
        config.setdefault("logging", {})["level"] = level
    return config


def load_config(path: Path | None = None) -> ChirpyConfig:
    """Load configuration from a TOML file.

    Args:
        path: Explicit path to config file. If None, searches default
            locations and falls back to defaults when none exists.

    Returns:
        Validated ChirpyConfig instance.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigError: If the file is not valid TOML or fails validation.
    """
    config_path: Path | None = None

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in _get_default_config_paths():
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    raw_config: dict[str, Any] = {}
    if config_path is not None:
        try:
            with config_path.open("rb") as f:
                raw_config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    raw_config = _apply_env_overrides(raw_config)

    try:
        return ChirpyConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed: {e}") from e
