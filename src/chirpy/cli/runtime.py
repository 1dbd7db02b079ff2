"""Shared runtime bootstrap for CLI commands."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

import typer

from chirpy.cli.console import error
from chirpy.config import ChirpyConfig, ConfigError, load_config
from chirpy.runtime import Chirpy, load_chirpy
from chirpy.store import StorageInitError


@dataclass(slots=True)
class CliState:
    """Global options collected by the root callback."""

    config_path: Path | None = None
    data_dir: Path | None = None
    _config: ChirpyConfig | None = None

    def config(self) -> ChirpyConfig:
        if self._config is None:
            try:
                config = load_config(self.config_path)
            except (FileNotFoundError, ConfigError) as e:
                error(str(e))
                raise typer.Exit(1) from None
            if self.data_dir is not None:
                config.storage.data_dir = self.data_dir
            self._config = config
        return self._config


def bootstrap(ctx: typer.Context) -> Chirpy:
    """Load every store for the current invocation."""
    state: CliState = ctx.ensure_object(CliState)
    config = state.config()
    try:
        return asyncio.run(load_chirpy(config))
    except StorageInitError as e:
        error(f"Cannot open data directory: {e}")
        raise typer.Exit(1) from None
