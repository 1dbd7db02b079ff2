"""Error taxonomy for the record store."""

from __future__ import annotations


class StoreError(Exception):
    """Base class for record store errors."""


class StorageInitError(StoreError):
    """The store cannot be constructed (unserializable type or unusable directory)."""


class InvalidKey(StoreError, ValueError):
    """Record key is not safe to use as a file name."""


class AlreadyExists(StoreError, FileExistsError):
    """A record already exists under the key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"record already exists: {key}")
        self.key = key


class NotFound(StoreError, FileNotFoundError):
    """No record exists under the key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"record not found: {key}")
        self.key = key


class TypeMismatch(StoreError):
    """Stored payload carries a different type tag than the store expects."""

    def __init__(self, expected: str, actual: str | None) -> None:
        super().__init__(f"expected record type {expected!r}, found {actual!r}")
        self.expected = expected
        self.actual = actual


class CorruptData(StoreError):
    """Stored bytes cannot be decoded into a record."""


class PersistenceWriteFailure(StoreError):
    """A write-through to the store failed after the in-memory change was applied.

    Never raised out of an index mutation; indices build one to log and
    remember the failure.
    """

    def __init__(self, operation: str, key: str, cause: BaseException) -> None:
        super().__init__(f"{operation} {key!r} failed: {cause}")
        self.operation = operation
        self.key = key
        self.cause = cause
