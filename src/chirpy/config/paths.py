"""Path resolution for chirpy state.

Relative paths are resolved against the chirpy home directory, which is
the process working directory unless the CHIRPY_HOME environment variable
points elsewhere.
"""

import os
from pathlib import Path

ENV_VAR = "CHIRPY_HOME"


def get_chirpy_home() -> Path:
    """Get the base directory for chirpy state.

    Resolution order:
    1. CHIRPY_HOME environment variable (if set)
    2. Current working directory
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()
    return Path.cwd()


def get_config_path() -> Path:
    """Get the config file path inside the chirpy home."""
    return get_chirpy_home() / "config.toml"


def resolve_path(path: Path) -> Path:
    """Resolve ``path`` against the chirpy home if it is relative."""
    path = path.expanduser()
    if path.is_absolute():
        return path
    return get_chirpy_home() / path
