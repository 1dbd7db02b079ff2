"""File-backed CRUD store: one JSON envelope file per record.

A store is scoped to one record type and one directory. Reads and writes
never touch another store's directory. Writes are atomic
(tempfile + fsync + os.replace()), so a crash leaves either the old or the
new record on disk, never a torn file.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeVar

import aiofiles

from chirpy.store.codec import (
    FILE_EXTENSION,
    Record,
    decode_record,
    encode_record,
    record_tag,
    validate_key,
)
from chirpy.store.errors import (
    AlreadyExists,
    CorruptData,
    NotFound,
    StorageInitError,
    StoreError,
)


@dataclass(frozen=True)
class LoadFailure:
    """A file skipped during ``load_all``."""

    path: Path
    reason: str


R = TypeVar("R", bound=Record)


class ObjectStore(Generic[R]):
    """Durable one-file-per-record persistence for a single record type.

    Provides:
    - create: write a new record, never overwriting
    - read: decode one record
    - update: overwrite an existing record, never creating
    - delete: remove an existing record
    - load_all: decode every record in the directory, skipping bad files

    Not thread-safe: callers serialize mutations against one store.
    """

    def __init__(
        self,
        record_type: type[R],
        directory: Path | str,
        *,
        base_dir: Path | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._log = logger or logging.getLogger(__name__)
        self._record_type = record_type
        self._tag = record_tag(record_type)

        path = Path(directory).expanduser()
        if not path.is_absolute():
            path = (base_dir or Path.cwd()) / path
        self._dir = path

        if self._dir.is_dir():
            self._log.debug(
                "store_directory_exists", extra={"file.path": str(self._dir)}
            )
        else:
            try:
                self._dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                self._log.error(
                    "store_directory_create_failed",
                    extra={"file.path": str(self._dir), "error.message": str(e)},
                )
                raise StorageInitError(
                    f"cannot create store directory {self._dir}: {e}"
                ) from e
            self._log.info(
                "store_directory_created", extra={"file.path": str(self._dir)}
            )

        self.last_errors: list[LoadFailure] = []

    @property
    def directory(self) -> Path:
        return self._dir

    @property
    def record_type(self) -> type[R]:
        return self._record_type

    @property
    def tag(self) -> str:
        return self._tag

    def path_for(self, key: str) -> Path:
        return self._dir / f"{validate_key(key)}{FILE_EXTENSION}"

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def keys(self) -> list[str]:
        """Keys of every record file currently in the directory."""
        return [p.name[: -len(FILE_EXTENSION)] for p in self._record_files()]

    # -- CRUD --

    def create(self, record: R, key: str) -> None:
        """Write ``record`` under a new ``key``.

        Raises:
            AlreadyExists: a record is already stored under ``key``.
        """
        path = self.path_for(key)
        if path.exists():
            self._log.warning(
                "record_already_exists",
                extra={"record.key": key, "file.path": str(path)},
            )
            raise AlreadyExists(key)
        self._write(path, record, operation="create")
        self._log.debug("record_created", extra={"record.key": key})

    def read(self, key: str) -> R:
        """Decode the record stored under ``key``.

        Raises:
            NotFound: no record under ``key``.
            TypeMismatch: the file holds another record type.
            CorruptData: the file cannot be decoded.
        """
        path = self.path_for(key)
        if not path.exists():
            raise NotFound(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            raise NotFound(key) from None
        return decode_record(raw, self._record_type)

    def update(self, key: str, record: R) -> None:
        """Overwrite the record stored under ``key``.

        Raises:
            NotFound: no record under ``key``; update never creates.
        """
        path = self.path_for(key)
        if not path.exists():
            self._log.warning("record_update_missing", extra={"record.key": key})
            raise NotFound(key)
        self._write(path, record, operation="update")
        self._log.debug("record_updated", extra={"record.key": key})

    def delete(self, key: str) -> None:
        """Remove the record stored under ``key``.

        Raises:
            NotFound: no record under ``key``.
        """
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            self._log.warning("record_delete_missing", extra={"record.key": key})
            raise NotFound(key) from None
        except OSError as e:
            self._log.warning(
                "record_delete_failed",
                extra={"record.key": key, "error.message": str(e)},
            )
            raise
        self._log.debug("record_deleted", extra={"record.key": key})

    # -- Bulk load --

    def load_all(self) -> list[R]:
        """Decode every record file in the directory.

        Files that fail to decode are skipped with a warning and recorded in
        ``last_errors``. Never raises; an unreadable directory yields ``[]``.
        """
        records: list[R] = []
        failures: list[LoadFailure] = []
        for path in self._entries(failures):
            try:
                records.append(decode_record(path.read_bytes(), self._record_type))
            except (StoreError, OSError) as e:
                failures.append(self._record_failure(path, e))
        self._finish_load(failures, len(records))
        return records

    async def load_all_async(self) -> list[R]:
        """Async variant of ``load_all`` reading files with aiofiles."""
        records: list[R] = []
        failures: list[LoadFailure] = []
        for path in self._entries(failures):
            try:
                async with aiofiles.open(path, "rb") as f:
                    raw = await f.read()
                records.append(decode_record(raw, self._record_type))
            except (StoreError, OSError) as e:
                failures.append(self._record_failure(path, e))
        self._finish_load(failures, len(records))
        return records

    # -- Internals --

    def _record_files(self) -> list[Path]:
        try:
            return sorted(
                p
                for p in self._dir.iterdir()
                if p.is_file()
                and not p.name.startswith(".")
                and p.name.endswith(FILE_EXTENSION)
            )
        except OSError:
            return []

    def _entries(self, failures: list[LoadFailure]) -> list[Path]:
        """Regular files to decode; foreign files are reported as failures."""
        try:
            children = sorted(self._dir.iterdir())
        except OSError as e:
            self._log.warning(
                "store_directory_unreadable",
                extra={"file.path": str(self._dir), "error.message": str(e)},
            )
            return []

        paths: list[Path] = []
        for path in children:
            if path.name.startswith(".") or not path.is_file():
                continue
            if not path.name.endswith(FILE_EXTENSION):
                failures.append(
                    self._record_failure(path, CorruptData("not a record file"))
                )
                continue
            paths.append(path)
        return paths

    def _record_failure(self, path: Path, error: BaseException) -> LoadFailure:
        self._log.warning(
            "record_load_failed",
            extra={
                "file.path": str(path.relative_to(self._dir)),
                "error.type": type(error).__name__,
                "error.message": str(error),
            },
        )
        return LoadFailure(path=path, reason=f"{type(error).__name__}: {error}")

    def _finish_load(self, failures: list[LoadFailure], loaded: int) -> None:
        self.last_errors = failures
        if failures:
            self._log.warning(
                "store_load_incomplete",
                extra={
                    "record.type": self._tag,
                    "loaded": loaded,
                    "error_count": len(failures),
                },
            )
        else:
            self._log.debug(
                "store_loaded", extra={"record.type": self._tag, "loaded": loaded}
            )

    def _write(self, path: Path, record: R, *, operation: str) -> None:
        """Write atomically via tempfile + fsync + os.replace()."""
        data = encode_record(record)
        fd, tmp = tempfile.mkstemp(
            dir=self._dir, prefix=f".{path.stem}_", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            Path(tmp).replace(path)
        except BaseException as e:
            self._log.warning(
                f"record_{operation}_failed",
                extra={"file.path": str(path), "error.message": str(e)},
            )
            try:
                Path(tmp).unlink()
            except OSError:
                pass
            raise
