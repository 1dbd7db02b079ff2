"""File-backed record store.

Public API:
- ObjectStore: one-file-per-record CRUD for a single record type
- Record: base class for storable records
- Post, Account, Follow: the record types chirpy persists

Errors:
- StoreError and its subclasses (AlreadyExists, NotFound, TypeMismatch,
  CorruptData, InvalidKey, StorageInitError, PersistenceWriteFailure)
"""

from chirpy.store.codec import Record
from chirpy.store.errors import (
    AlreadyExists,
    CorruptData,
    InvalidKey,
    NotFound,
    PersistenceWriteFailure,
    StorageInitError,
    StoreError,
    TypeMismatch,
)
from chirpy.store.object_store import LoadFailure, ObjectStore
from chirpy.store.types import Account, Follow, Post

__all__ = [
    "Account",
    "AlreadyExists",
    "CorruptData",
    "Follow",
    "InvalidKey",
    "LoadFailure",
    "NotFound",
    "ObjectStore",
    "PersistenceWriteFailure",
    "Post",
    "Record",
    "StorageInitError",
    "StoreError",
    "TypeMismatch",
]
