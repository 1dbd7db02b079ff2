"""Shared test fixtures and factories."""

import logging
from pathlib import Path
from typing import TypeVar

import pytest

from chirpy.index import AccountIndex, FollowGraph, PostIndex
from chirpy.store import Account, Follow, ObjectStore, Post, Record

# =============================================================================
# Store Fixtures
# =============================================================================


R = TypeVar("R", bound=Record)


class FailingStore(ObjectStore[R]):
    """ObjectStore whose writes always fail, as on a full or read-only disk."""

    def create(self, record: R, key: str) -> None:
        raise OSError(28, "No space left on device")

    def update(self, key: str, record: R) -> None:
        raise OSError(28, "No space left on device")

    def delete(self, key: str) -> None:
        raise OSError(30, "Read-only file system")


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo configure_logging() calls made by CLI invocations."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture(autouse=True)
def chirpy_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate CHIRPY_HOME and the working directory per test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("CHIRPY_HOME", str(home))
    monkeypatch.delenv("CHIRPY_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def post_store(data_dir: Path) -> ObjectStore[Post]:
    return ObjectStore(Post, data_dir / "posts")


@pytest.fixture
def account_store(data_dir: Path) -> ObjectStore[Account]:
    return ObjectStore(Account, data_dir / "accounts")


@pytest.fixture
def follow_store(data_dir: Path) -> ObjectStore[Follow]:
    return ObjectStore(Follow, data_dir / "follows")


# =============================================================================
# Index Fixtures
# =============================================================================


@pytest.fixture
def posts(post_store: ObjectStore[Post]) -> PostIndex:
    index = PostIndex(post_store)
    index.load()
    return index


@pytest.fixture
def accounts(account_store: ObjectStore[Account]) -> AccountIndex:
    index = AccountIndex(account_store)
    index.load()
    return index


@pytest.fixture
def follows(follow_store: ObjectStore[Follow]) -> FollowGraph:
    graph = FollowGraph(follow_store)
    graph.load()
    return graph


@pytest.fixture
def failing_posts(data_dir: Path) -> PostIndex:
    return PostIndex(FailingStore(Post, data_dir / "posts"))


@pytest.fixture
def failing_accounts(data_dir: Path) -> AccountIndex:
    return AccountIndex(FailingStore(Account, data_dir / "accounts"))


@pytest.fixture
def failing_follows(data_dir: Path) -> FollowGraph:
    return FollowGraph(FailingStore(Follow, data_dir / "follows"))


# =============================================================================
# CLI Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1", "COLUMNS": "200"})
