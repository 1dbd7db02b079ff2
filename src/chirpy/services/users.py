"""Account registration and credential checks."""

from __future__ import annotations

import logging

from chirpy.index import AccountIndex
from chirpy.store import Account, InvalidKey
from chirpy.store.codec import validate_key


class UsernameTaken(ValueError):
    """Registration attempted with a username that already exists."""


class InvalidUsername(ValueError):
    """Username cannot be used as part of a record key."""


def check_username(username: str) -> str:
    """Reject names that would make ambiguous or unsafe record keys.

    Edge keys join two usernames with a space, so whitespace is not allowed.
    """
    if any(ch.isspace() for ch in username):
        raise InvalidUsername(f"username must not contain whitespace: {username!r}")
    try:
        return validate_key(username)
    except InvalidKey as e:
        raise InvalidUsername(f"invalid username: {username!r}") from e


class UserService:
    """Business rules around accounts.

    Credentials are opaque strings compared as-is.
    """

    def __init__(
        self, accounts: AccountIndex, *, logger: logging.Logger | None = None
    ) -> None:
        self._accounts = accounts
        self._log = logger or logging.getLogger(__name__)

    def register(self, username: str, password: str) -> bool:
        """Create an account.

        Returns False only if the index refused the insert.

        Raises:
            ValueError: username or password is empty.
            InvalidUsername: username contains whitespace, a path separator
                or NUL, or starts with a dot.
            UsernameTaken: username already exists.
        """
        username = username.strip()
        if not username or not password:
            raise ValueError("username and password are required")
        check_username(username)
        if self._accounts.exists(username):
            raise UsernameTaken(f"the username {username} is already taken")
        return self._accounts.insert(username, password, True)

    def exists(self, username: str) -> bool:
        return self._accounts.exists(username)

    def is_valid_user(self, username: str, password: str) -> bool:
        valid = self._accounts.password_matches(username, password)
        if not valid:
            self._log.info("login_rejected", extra={"account.username": username})
        return valid

    def change_password(self, username: str, old: str, new: str) -> bool:
        """Replace the password after checking the current one."""
        if not new:
            raise ValueError("new password is required")
        if not self._accounts.password_matches(username, old):
            return False
        return self._accounts.update_password(username, new)

    def delete(self, username: str) -> bool:
        return self._accounts.remove(username)

    def usernames(self) -> list[str]:
        return sorted(self._accounts.keys())

    def users(self) -> list[Account]:
        return [
            account
            for name in self.usernames()
            if (account := self._accounts.get(name)) is not None
        ]
