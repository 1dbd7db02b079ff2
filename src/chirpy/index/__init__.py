"""In-memory indices kept in sync with their record stores.

Public API:
- PostIndex: posts grouped by author (one-to-many, append-only)
- AccountIndex: accounts keyed by username (one-to-one)
- FollowGraph: follow edges with forward and reverse adjacency
"""

from chirpy.index.accounts import AccountIndex
from chirpy.index.follows import FollowGraph, edge_key
from chirpy.index.posts import PostIndex

__all__ = [
    "AccountIndex",
    "FollowGraph",
    "PostIndex",
    "edge_key",
]
