"""Tagged JSON envelope used for on-disk records.

Each record file holds one envelope::

    {"type": "post", "version": 1, "data": {...}}

The tag is compared with the expected type before the payload is validated,
so a file written for one record type is rejected as a mismatch rather than
coerced into another.
"""

from __future__ import annotations

import json
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ValidationError

from chirpy.store.errors import CorruptData, InvalidKey, StorageInitError, TypeMismatch

ENVELOPE_VERSION = 1
FILE_EXTENSION = ".json"

_FORBIDDEN_KEY_CHARS = ("/", "\\", "\x00")


class Record(BaseModel):
    """Base class for storable records.

    Subclasses set ``record_type`` to a short, unique tag.
    """

    record_type: ClassVar[str] = ""

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def record_tag(record_cls: type) -> str:
    """Return the type tag for ``record_cls``.

    Raises StorageInitError if the type cannot be stored.
    """
    if not isinstance(record_cls, type) or not issubclass(record_cls, Record):
        raise StorageInitError(f"{record_cls!r} is not a serializable record type")
    tag = record_cls.record_type
    if not tag:
        raise StorageInitError(f"{record_cls.__name__} does not declare a record_type")
    return tag


def validate_key(key: str) -> str:
    """Check that ``key`` can be used as a file name inside a store directory.

    Names starting with a dot are reserved for in-progress temp files.
    """
    if not isinstance(key, str) or not key or key.startswith("."):
        raise InvalidKey(f"invalid record key: {key!r}")
    if any(ch in key for ch in _FORBIDDEN_KEY_CHARS):
        raise InvalidKey(f"record key contains a path separator: {key!r}")
    return key


def encode_record(record: Record) -> bytes:
    envelope = {
        "type": record_tag(type(record)),
        "version": ENVELOPE_VERSION,
        "data": record.to_dict(),
    }
    return json.dumps(envelope, ensure_ascii=False, separators=(",", ":")).encode(
        "utf-8"
    )


R = TypeVar("R", bound=Record)


def decode_record(raw: bytes, record_cls: type[R]) -> R:
    """Decode an envelope into ``record_cls``.

    Raises:
        CorruptData: bytes are not a well-formed envelope or the payload
            fails validation.
        TypeMismatch: the envelope is tagged for another record type.
    """
    expected = record_tag(record_cls)
    try:
        envelope = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorruptData(f"undecodable record: {e}") from e

    if not isinstance(envelope, dict) or "type" not in envelope:
        raise CorruptData("record envelope is missing its type tag")
    actual = envelope.get("type")
    if actual != expected:
        raise TypeMismatch(expected, actual if isinstance(actual, str) else None)

    data = envelope.get("data")
    if not isinstance(data, dict):
        raise CorruptData("record envelope is missing its payload")
    try:
        return record_cls.model_validate(data)
    except ValidationError as e:
        raise CorruptData(f"invalid {expected} payload: {e}") from e
