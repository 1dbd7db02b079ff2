"""Centralized logging configuration for chirpy.

Components never configure logging themselves. Each store, index and
service takes an optional ``logging.Logger`` at construction and falls back
to its module logger; entry points call configure_logging() once.

Events are snake_case messages with structured ``extra`` fields, e.g.::

    logger.warning("record_load_failed", extra={"file.path": "...", ...})

Logging Levels:
- DEBUG: Per-record store operations
- INFO: Account creation, index loads, directory creation
- WARNING: Skipped records, failed write-throughs
- ERROR: Store initialization failures
"""

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TextIO

LOG_LEVEL_ENV_VAR = "CHIRPY_LOG_LEVEL"

# Attributes present on every LogRecord; anything else came from ``extra``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "component"}


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Structured fields passed to the logger via ``extra``."""
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


def _component(name: str) -> str:
    parts = name.split(".")
    if len(parts) >= 2 and parts[0] == "chirpy":
        return parts[1]
    return parts[0]


class ComponentFormatter(logging.Formatter):
    """Formatter that shortens logger names and appends structured fields.

    - chirpy.store.object_store -> store
    - chirpy.index.follows -> index
    """

    def format(self, record: logging.LogRecord) -> str:
        record.component = _component(record.name)
        text = super().format(record)
        extras = record_extras(record)
        if extras:
            fields = " ".join(f"{k}={v}" for k, v in sorted(extras.items()))
            text = f"{text} {fields}"
        return text


class JSONLHandler(logging.Handler):
    """Handler that appends one JSON object per log record to a file.

    The format is inspectable with standard tools (cat, grep, jq).
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file: TextIO | None = None

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry: dict[str, Any] = {
                "ts": datetime.now(UTC).isoformat(),
                "level": record.levelname,
                "component": _component(record.name),
                "logger": record.name,
                "message": record.getMessage(),
            }
            if record.exc_info:
                formatter = self.formatter or logging.Formatter()
                entry["exception"] = formatter.formatException(record.exc_info)
            extras = record_extras(record)
            if extras:
                entry["extra"] = extras

            if self._file is None:
                self._file = self._path.open("a", encoding="utf-8")
            self._file.write(json.dumps(entry, default=str) + "\n")
            self._file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None
        super().close()


def configure_logging(
    level: str | None = None,
    use_rich: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure logging for chirpy.

    Call this once at application startup.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses CHIRPY_LOG_LEVEL env var or INFO.
        use_rich: Use Rich handler for colorful console output.
        log_file: Also write logs as JSONL to this file.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO")
    level = level.upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        level = "INFO"
    log_level = getattr(logging, level)

    handlers: list[logging.Handler] = []

    if use_rich:
        from rich.logging import RichHandler

        console_handler: logging.Handler = RichHandler(
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        console_handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            ComponentFormatter(
                "%(asctime)s | %(levelname)-8s | %(component)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    handlers.append(console_handler)

    if log_file is not None:
        file_handler = JSONLHandler(log_file)
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True,
    )
