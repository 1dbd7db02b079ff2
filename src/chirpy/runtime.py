"""Wiring: stores -> indices -> services.

Each index is loaded exactly once here, before any service is handed out.
A StorageInitError from any store aborts startup.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from chirpy.config import ChirpyConfig
from chirpy.index import AccountIndex, FollowGraph, PostIndex
from chirpy.services import FollowService, PostService, SearchService, UserService
from chirpy.store import Account, Follow, ObjectStore, Post

logger = logging.getLogger(__name__)


@dataclass
class Chirpy:
    """Loaded indices and the services built on them."""

    accounts: AccountIndex
    follows: FollowGraph
    posts: PostIndex
    users: UserService
    follow_service: FollowService
    post_service: PostService
    search: SearchService

    def stores(self) -> list[ObjectStore]:
        return [self.accounts.store, self.follows.store, self.posts.store]


def _build_indices(
    config: ChirpyConfig,
) -> tuple[AccountIndex, FollowGraph, PostIndex]:
    storage = config.storage
    return (
        AccountIndex(
            ObjectStore(
                Account,
                storage.accounts_path(),
                logger=logging.getLogger("chirpy.store.accounts"),
            ),
            logger=logging.getLogger("chirpy.index.accounts"),
        ),
        FollowGraph(
            ObjectStore(
                Follow,
                storage.follows_path(),
                logger=logging.getLogger("chirpy.store.follows"),
            ),
            logger=logging.getLogger("chirpy.index.follows"),
        ),
        PostIndex(
            ObjectStore(
                Post,
                storage.posts_path(),
                logger=logging.getLogger("chirpy.store.posts"),
            ),
            logger=logging.getLogger("chirpy.index.posts"),
        ),
    )


def _assemble(
    config: ChirpyConfig,
    accounts: AccountIndex,
    follows: FollowGraph,
    posts: PostIndex,
) -> Chirpy:
    post_service = PostService(posts, follows, max_length=config.posts.max_length)
    return Chirpy(
        accounts=accounts,
        follows=follows,
        posts=posts,
        users=UserService(accounts),
        follow_service=FollowService(follows),
        post_service=post_service,
        search=SearchService(post_service),
    )


def create_chirpy(config: ChirpyConfig) -> Chirpy:
    """Build and load every index synchronously."""
    accounts, follows, posts = _build_indices(config)
    accounts.load()
    if not follows.load():
        logger.debug("no_follows_loaded")
    posts.load()
    logger.info("chirpy_loaded", extra={"data_dir": str(config.storage.root)})
    return _assemble(config, accounts, follows, posts)


async def load_chirpy(config: ChirpyConfig) -> Chirpy:
    """Build every index and load the three stores concurrently."""
    accounts, follows, posts = _build_indices(config)
    _, any_follows, _ = await asyncio.gather(
        accounts.aload(), follows.aload(), posts.aload()
    )
    if not any_follows:
        logger.debug("no_follows_loaded")
    logger.info("chirpy_loaded", extra={"data_dir": str(config.storage.root)})
    return _assemble(config, accounts, follows, posts)
