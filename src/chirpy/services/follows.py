"""Follow / unfollow rules on top of the follow graph."""

from __future__ import annotations

import logging

from chirpy.index import FollowGraph


class SelfFollowError(ValueError):
    """A user tried to follow or unfollow themselves."""


class AlreadyFollowing(ValueError):
    pass


class NotFollowing(ValueError):
    pass


class FollowService:
    """Enforces the follow graph's preconditions.

    FollowGraph accepts any edge; this service rejects self edges,
    duplicates and removal of edges that do not exist.
    """

    def __init__(
        self, graph: FollowGraph, *, logger: logging.Logger | None = None
    ) -> None:
        self._graph = graph
        self._log = logger or logging.getLogger(__name__)

    def following(self, username: str) -> list[str]:
        return self._graph.following(username)

    def followers(self, username: str) -> list[str]:
        return self._graph.followers(username)

    def is_following(self, follower: str, followee: str) -> bool:
        return self._graph.is_following(follower, followee)

    def follow(self, follower: str, followee: str) -> bool:
        """Add follower -> followee. Returns whether the edge was persisted."""
        if follower == followee:
            raise SelfFollowError("a user cannot follow themselves")
        if self._graph.is_following(follower, followee):
            raise AlreadyFollowing(f"{follower} is already following {followee}")
        saved = self._graph.add_edge(follower, followee)
        self._log.info(
            "followed",
            extra={
                "follow.source": follower,
                "follow.target": followee,
                "saved": saved,
            },
        )
        return saved

    def unfollow(self, follower: str, followee: str) -> bool:
        """Remove follower -> followee. Returns whether the deletion was persisted."""
        if follower == followee:
            raise SelfFollowError("a user cannot unfollow themselves")
        if not self._graph.is_following(follower, followee):
            raise NotFollowing(f"{follower} is not following {followee}")
        saved = self._graph.remove_edge(follower, followee)
        self._log.info(
            "unfollowed",
            extra={
                "follow.source": follower,
                "follow.target": followee,
                "saved": saved,
            },
        )
        return saved
