"""One-to-many index: posts grouped by author."""

from __future__ import annotations

import logging
from datetime import datetime

from chirpy.index.base import StoreBackedIndex
from chirpy.store import ObjectStore, Post


class PostIndex(StoreBackedIndex[Post]):
    """Append-only posts per owner, mirrored to the post store.

    ``load()`` must be called exactly once, before serving requests; a
    second call appends every stored post again.
    """

    def __init__(
        self,
        store: ObjectStore[Post],
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(store, logger=logger)
        self._by_owner: dict[str, list[Post]] = {}
        self._last_stamp = 0

    def load(self) -> int:
        """Populate the index from the store. Returns the number of posts loaded."""
        return self._ingest(self._store.load_all())

    async def aload(self) -> int:
        return self._ingest(await self._store.load_all_async())

    def _ingest(self, posts: list[Post]) -> int:
        for post in posts:
            self._by_owner.setdefault(post.owner, []).append(post)
            self._last_stamp = max(self._last_stamp, _stamp(post))
        self._log.info("posts_loaded", extra={"count": len(posts)})
        return len(posts)

    def add(self, owner: str, content: str) -> Post:
        """Create a post for ``owner`` and write it through to the store.

        The post is visible to readers even if the write fails.
        """
        post = Post(owner=owner, content=content, created_at=datetime.now())
        self._by_owner.setdefault(owner, []).append(post)
        key = self._next_key(post)
        self._write_through("create", key, lambda: self._store.create(post, key))
        return post

    def _next_key(self, post: Post) -> str:
        """Record key ``<owner>_<microseconds>``, strictly increasing per index."""
        stamp = _stamp(post)
        if stamp <= self._last_stamp:
            stamp = self._last_stamp + 1
        self._last_stamp = stamp
        return f"{post.owner}_{stamp}"

    def get_by_owner(self, owner: str) -> list[Post]:
        return list(self._by_owner.get(owner, []))

    def get_all(self) -> list[Post]:
        """Every post, grouped by owner. Order across owners is unspecified."""
        result: list[Post] = []
        for posts in self._by_owner.values():
            result.extend(posts)
        return result

    def owners(self) -> list[str]:
        return list(self._by_owner)

    def __len__(self) -> int:
        return sum(len(posts) for posts in self._by_owner.values())


def _stamp(post: Post) -> int:
    return int(post.created_at.timestamp() * 1_000_000)
