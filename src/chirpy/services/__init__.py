"""Business-logic callers of the indices."""

from chirpy.services.follows import (
    AlreadyFollowing,
    FollowService,
    NotFollowing,
    SelfFollowError,
)
from chirpy.services.posts import PostService, SearchService
from chirpy.services.users import (
    InvalidUsername,
    UserService,
    UsernameTaken,
    check_username,
)

__all__ = [
    "AlreadyFollowing",
    "FollowService",
    "InvalidUsername",
    "NotFollowing",
    "PostService",
    "SearchService",
    "SelfFollowError",
    "UserService",
    "UsernameTaken",
    "check_username",
]
