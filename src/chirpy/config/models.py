"""Configuration models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from chirpy.config.paths import resolve_path

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class ConfigError(Exception):
    """Configuration error."""


class LoggingConfig(BaseModel):
    """Console and file logging."""

    level: LogLevel = "INFO"
    use_rich: bool = False
    # Optional JSONL log file; relative paths resolve against the chirpy home
    log_file: Path | None = None

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class StorageConfig(BaseModel):
    """Where each record store lives.

    Store directories are relative to ``data_dir``.
    """

    data_dir: Path = Path("data")
    accounts_dir: str = "accounts"
    follows_dir: str = "follows"
    posts_dir: str = "posts"

    @property
    def root(self) -> Path:
        return resolve_path(self.data_dir)

    def accounts_path(self) -> Path:
        return self.root / self.accounts_dir

    def follows_path(self) -> Path:
        return self.root / self.follows_dir

    def posts_path(self) -> Path:
        return self.root / self.posts_dir


class PostsConfig(BaseModel):
    max_length: int = Field(default=280, gt=0)


class ChirpyConfig(BaseModel):
    """Root configuration model."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    posts: PostsConfig = Field(default_factory=PostsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
