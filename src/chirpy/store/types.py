"""Record types persisted by chirpy."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from pydantic import Field

from chirpy.store.codec import Record


class Post(Record):
    """A short message published by an account."""

    record_type: ClassVar[str] = "post"

    owner: str
    content: str
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def formatted_time(self) -> str:
        """Display form, e.g. ``Mon, Jan 6, 3:04 PM``."""
        ts = self.created_at
        hour = ts.hour % 12 or 12
        return f"{ts:%a, %b} {ts.day}, {hour}:{ts:%M %p}"


class Account(Record):
    """A registered user.

    Passwords are opaque strings; no hashing is applied.
    """

    record_type: ClassVar[str] = "account"

    username: str
    password: str
    public_posts: bool = True


class Follow(Record):
    """Directed edge: ``follower`` follows ``followee``."""

    record_type: ClassVar[str] = "follow"

    follower: str
    followee: str
