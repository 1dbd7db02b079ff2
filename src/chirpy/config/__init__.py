"""Configuration for chirpy."""

from chirpy.config.loader import load_config
from chirpy.config.models import (
    ChirpyConfig,
    ConfigError,
    LoggingConfig,
    PostsConfig,
    StorageConfig,
)
from chirpy.config.paths import get_chirpy_home

__all__ = [
    "ChirpyConfig",
    "ConfigError",
    "LoggingConfig",
    "PostsConfig",
    "StorageConfig",
    "get_chirpy_home",
    "load_config",
]
