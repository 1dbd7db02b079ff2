"""Bidirectional follow graph.

Two adjacency maps are kept over the same edge set:

- ``_following``: follower -> accounts they follow (forward edges)
- ``_followers``: followee -> accounts following them (reverse edges)

Every edge (a, b) appears as ``b`` in ``_following[a]`` and as ``a`` in
``_followers[b]``. Both maps are only changed together, in ``_link`` and
``_unlink``.
"""

from __future__ import annotations

import logging

from chirpy.index.base import StoreBackedIndex
from chirpy.store import Follow, ObjectStore


def edge_key(follower: str, followee: str) -> str:
    """Order-sensitive record key for the edge follower -> followee."""
    return f"{follower} {followee}"


class FollowGraph(StoreBackedIndex[Follow]):
    """Follow edges mirrored to the follow store.

    Duplicate and self edges are not rejected here; FollowService checks
    both before calling ``add_edge``.
    """

    def __init__(
        self,
        store: ObjectStore[Follow],
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(store, logger=logger)
        self._following: dict[str, list[str]] = {}
        self._followers: dict[str, list[str]] = {}

    def load(self) -> bool:
        """Rebuild both adjacency maps. Returns True if any edge was loaded."""
        return self._ingest(self._store.load_all())

    async def aload(self) -> bool:
        return self._ingest(await self._store.load_all_async())

    def _ingest(self, edges: list[Follow]) -> bool:
        for edge in edges:
            self._link(edge.follower, edge.followee)
        self._log.info("follows_loaded", extra={"count": len(edges)})
        return bool(edges)

    # -- Mutations --

    def add_edge(self, follower: str, followee: str) -> bool:
        """Add follower -> followee and persist it.

        Returns whether the store write succeeded; the edge is visible
        either way.
        """
        self._log.debug(
            "follow_edge_add",
            extra={"follow.source": follower, "follow.target": followee},
        )
        self._link(follower, followee)
        key = edge_key(follower, followee)
        edge = Follow(follower=follower, followee=followee)
        failure = self._write_through(
            "create", key, lambda: self._store.create(edge, key)
        )
        return failure is None

    def remove_edge(self, follower: str, followee: str) -> bool:
        """Remove follower -> followee and delete its record.

        Callers must check the edge exists first. Returns whether the
        store delete succeeded.
        """
        self._log.debug(
            "follow_edge_remove",
            extra={"follow.source": follower, "follow.target": followee},
        )
        self._unlink(follower, followee)
        key = edge_key(follower, followee)
        failure = self._write_through("delete", key, lambda: self._store.delete(key))
        return failure is None

    # -- Queries --

    def following(self, follower: str) -> list[str]:
        """Accounts ``follower`` follows (forward edges), as a copy."""
        return list(self._following.get(follower, []))

    def followers(self, followee: str) -> list[str]:
        """Accounts following ``followee`` (reverse edges), as a copy."""
        return list(self._followers.get(followee, []))

    def is_following(self, follower: str, followee: str) -> bool:
        return followee in self._following.get(follower, [])

    def edges(self) -> list[tuple[str, str]]:
        return [
            (follower, followee)
            for follower, followees in self._following.items()
            for followee in followees
        ]

    # -- Adjacency maintenance --

    def _link(self, follower: str, followee: str) -> None:
        self._following.setdefault(follower, []).append(followee)
        self._followers.setdefault(followee, []).append(follower)

    def _unlink(self, follower: str, followee: str) -> None:
        _remove_first(self._following, follower, followee)
        _remove_first(self._followers, followee, follower)


def _remove_first(index: dict[str, list[str]], key: str, value: str) -> None:
    """Remove the first ``value`` under ``key``; drop the key once empty."""
    values = index.get(key)
    if not values:
        return
    try:
        values.remove(value)
    except ValueError:
        return
    if not values:
        del index[key]
