"""Shared write-through plumbing for store-backed indices."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

from chirpy.store import ObjectStore, PersistenceWriteFailure, Record, StoreError


R = TypeVar("R", bound=Record)


class StoreBackedIndex(Generic[R]):
    """In-memory index mirroring one ObjectStore.

    Mutations apply to memory first and then write through to the store.
    A failed write is logged and kept in ``write_failures``; the in-memory
    change is never rolled back.
    """

    def __init__(
        self,
        store: ObjectStore[R],
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._log = logger or logging.getLogger(type(self).__module__)
        self.write_failures: list[PersistenceWriteFailure] = []

    @property
    def store(self) -> ObjectStore[R]:
        return self._store

    def _write_through(
        self, operation: str, key: str, write: Callable[[], None]
    ) -> PersistenceWriteFailure | None:
        """Run ``write`` and convert a store failure into a logged result."""
        try:
            write()
        except (StoreError, OSError) as e:
            failure = PersistenceWriteFailure(operation, key, e)
            self.write_failures.append(failure)
            self._log.warning(
                "write_through_failed",
                extra={
                    "record.type": self._store.tag,
                    "record.key": key,
                    "store.operation": operation,
                    "error.message": str(e),
                },
            )
            return failure
        return None
