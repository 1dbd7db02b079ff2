"""Posting, timelines and search."""

from __future__ import annotations

import logging

from chirpy.index import FollowGraph, PostIndex
from chirpy.store import Post

DEFAULT_MAX_LENGTH = 280


def newest_first(posts: list[Post]) -> list[Post]:
    return sorted(posts, key=lambda p: p.created_at, reverse=True)


class PostService:
    """Publishes posts and assembles timelines.

    Timelines are sorted newest first; PostIndex.get_all() has no
    cross-author order of its own.
    """

    def __init__(
        self,
        posts: PostIndex,
        follows: FollowGraph,
        *,
        max_length: int = DEFAULT_MAX_LENGTH,
        logger: logging.Logger | None = None,
    ) -> None:
        self._posts = posts
        self._follows = follows
        self._max_length = max_length
        self._log = logger or logging.getLogger(__name__)

    def post(self, username: str, content: str) -> Post:
        """Publish ``content`` for ``username``.

        Raises:
            ValueError: content is empty or longer than the limit.
        """
        text = content.strip()
        if not text:
            raise ValueError("post content is required")
        if len(text) > self._max_length:
            raise ValueError(
                f"post is {len(text)} characters; the limit is {self._max_length}"
            )
        post = self._posts.add(username, text)
        self._log.info("post_published", extra={"post.owner": username})
        return post

    def posts_by(self, username: str) -> list[Post]:
        return self._posts.get_by_owner(username)

    def all_posts(self) -> list[Post]:
        return self._posts.get_all()

    def timeline(self) -> list[Post]:
        return newest_first(self._posts.get_all())

    def follow_timeline(self, username: str) -> list[Post]:
        """Posts by accounts ``username`` follows, newest first."""
        followed = set(self._follows.following(username))
        return newest_first([p for p in self._posts.get_all() if p.owner in followed])


class SearchService:
    """Linear scans over all posts."""

    def __init__(self, posts: PostService) -> None:
        self._posts = posts

    def search_by_tag(self, tag: str) -> list[Post]:
        """Posts whose content contains ``tag`` (case-sensitive substring)."""
        return newest_first([p for p in self._posts.all_posts() if tag in p.content])

    def search_by_user(self, username: str) -> list[Post]:
        return newest_first(
            [p for p in self._posts.all_posts() if p.owner == username]
        )
