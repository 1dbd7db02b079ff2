"""One-to-one index: accounts keyed by username."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable

from chirpy.index.base import StoreBackedIndex
from chirpy.store import Account, NotFound, ObjectStore


class AccountIndex(StoreBackedIndex[Account]):
    """Unique usernames mapped to their account record.

    Usernames are case-sensitive and immutable. Field updates mutate the
    in-memory record and write through with ``ObjectStore.update``.
    Accounts whose last write failed are tracked in ``unsaved`` until
    ``retry_unsaved()`` succeeds for them.
    """

    def __init__(
        self,
        store: ObjectStore[Account],
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(store, logger=logger)
        self._accounts: dict[str, Account] = {}
        self._unsaved: set[str] = set()

    def load(self) -> int:
        """Populate the index from the store. Returns the number of accounts loaded."""
        return self._ingest(self._store.load_all())

    async def aload(self) -> int:
        return self._ingest(await self._store.load_all_async())

    def _ingest(self, accounts: list[Account]) -> int:
        loaded = 0
        for account in accounts:
            if account.username in self._accounts:
                self._log.warning(
                    "duplicate_account_record",
                    extra={"account.username": account.username},
                )
                continue
            self._accounts[account.username] = account
            loaded += 1
        self._log.info("accounts_loaded", extra={"count": loaded})
        return loaded

    # -- Queries --

    def exists(self, username: str) -> bool:
        return username in self._accounts

    def keys(self) -> set[str]:
        return set(self._accounts)

    def get(self, username: str) -> Account | None:
        """Return a copy of the account, or None."""
        account = self._accounts.get(username)
        return account.model_copy() if account else None

    def get_password(self, username: str) -> str | None:
        account = self._accounts.get(username)
        return account.password if account else None

    def password_matches(self, username: str, password: str) -> bool:
        account = self._accounts.get(username)
        if account is None:
            return False
        return secrets.compare_digest(
            account.password.encode("utf-8"), password.encode("utf-8")
        )

    def get_public_status(self, username: str) -> bool:
        account = self._accounts.get(username)
        if account is None:
            self._log.warning(
                "public_status_unknown_account", extra={"account.username": username}
            )
            return False
        return account.public_posts

    @property
    def unsaved(self) -> set[str]:
        return set(self._unsaved)

    # -- Mutations --

    def insert(self, username: str, password: str, public_posts: bool = True) -> bool:
        """Add a new account.

        Returns False (without raising) if the username is taken. A failed
        store write does not undo the insert.
        """
        if username in self._accounts:
            self._log.info("account_exists", extra={"account.username": username})
            return False
        account = Account(
            username=username, password=password, public_posts=public_posts
        )
        self._accounts[username] = account
        self._log.info("account_created", extra={"account.username": username})
        self._persist(
            "create", account, lambda: self._store.create(account, username)
        )
        return True

    def update_password(self, username: str, password: str) -> bool:
        """Replace the stored password. Returns False if the account is unknown."""
        account = self._accounts.get(username)
        if account is None:
            return False
        account.password = password
        self._persist(
            "update", account, lambda: self._store.update(username, account)
        )
        return True

    def set_public_status(self, username: str, public_posts: bool) -> bool:
        account = self._accounts.get(username)
        if account is None:
            self._log.warning(
                "public_status_unknown_account", extra={"account.username": username}
            )
            return False
        account.public_posts = public_posts
        self._persist(
            "update", account, lambda: self._store.update(username, account)
        )
        return True

    def remove(self, username: str) -> bool:
        """Account deletion is not supported; always returns False."""
        self._log.info(
            "account_delete_unsupported", extra={"account.username": username}
        )
        return False

    def retry_unsaved(self) -> list[str]:
        """Re-attempt writes for accounts whose write-through failed.

        Returns the usernames saved by this call.
        """
        saved: list[str] = []
        for username in sorted(self._unsaved):
            account = self._accounts[username]
            if self._write_through("save", username, lambda: self._save(account)):
                continue
            self._unsaved.discard(username)
            saved.append(username)
        return saved

    def _save(self, account: Account) -> None:
        try:
            self._store.update(account.username, account)
        except NotFound:
            self._store.create(account, account.username)

    def _persist(
        self, operation: str, account: Account, write: Callable[[], None]
    ) -> None:
        if self._write_through(operation, account.username, write):
            self._unsaved.add(account.username)
        else:
            self._unsaved.discard(account.username)
