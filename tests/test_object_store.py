"""Tests for the file-backed ObjectStore.

Tests focus on:
- Strict create / update / delete semantics
- Type-tag checks on read
- Bulk loading that skips bad files
"""

import json
from datetime import datetime
from pathlib import Path
from typing import ClassVar

import pytest

from chirpy.store import (
    Account,
    AlreadyExists,
    CorruptData,
    Follow,
    InvalidKey,
    NotFound,
    ObjectStore,
    Post,
    Record,
    StorageInitError,
    TypeMismatch,
)


class TestConstruction:
    def test_creates_missing_directories(self, tmp_path: Path):
        target = tmp_path / "a" / "b" / "posts"
        store = ObjectStore(Post, target)
        assert target.is_dir()
        assert store.directory == target

    def test_relative_directory_resolves_against_cwd(self, tmp_path: Path):
        store = ObjectStore(Post, "data/posts")
        assert store.directory == tmp_path / "data" / "posts"
        assert store.directory.is_dir()

    def test_existing_directory_is_reused(self, tmp_path: Path):
        (tmp_path / "posts").mkdir()
        (tmp_path / "posts" / "keep.json").write_text("{}")
        ObjectStore(Post, tmp_path / "posts")
        assert (tmp_path / "posts" / "keep.json").exists()

    def test_rejects_type_without_tag(self, tmp_path: Path):
        class Untagged(Record):
            value: int

        with pytest.raises(StorageInitError):
            ObjectStore(Untagged, tmp_path / "x")

    def test_rejects_non_record_type(self, tmp_path: Path):
        with pytest.raises(StorageInitError):
            ObjectStore(dict, tmp_path / "x")  # type: ignore[type-var]

    def test_directory_blocked_by_file(self, tmp_path: Path):
        blocker = tmp_path / "posts"
        blocker.write_text("not a directory")
        with pytest.raises(StorageInitError):
            ObjectStore(Post, blocker)


class TestCrud:
    def test_create_then_read_round_trips(self, post_store: ObjectStore[Post]):
        post = Post(owner="alice", content="hello", created_at=datetime(2024, 5, 1))
        post_store.create(post, "alice_1")
        assert post_store.read("alice_1") == post

    def test_create_writes_one_file(self, post_store: ObjectStore[Post]):
        post_store.create(Post(owner="alice", content="hi"), "alice_1")
        files = [p.name for p in post_store.directory.iterdir()]
        assert files == ["alice_1.json"]

    def test_create_is_strict(self, post_store: ObjectStore[Post]):
        post_store.create(Post(owner="alice", content="first"), "k")
        with pytest.raises(AlreadyExists):
            post_store.create(Post(owner="alice", content="second"), "k")
        assert post_store.read("k").content == "first"

    def test_already_exists_is_file_exists_error(self, post_store: ObjectStore[Post]):
        post_store.create(Post(owner="a", content="x"), "k")
        with pytest.raises(FileExistsError):
            post_store.create(Post(owner="a", content="x"), "k")

    @pytest.mark.parametrize("operation", ["read", "update", "delete"])
    def test_missing_key_raises_not_found(
        self, account_store: ObjectStore[Account], operation: str
    ):
        account = Account(username="ghost", password="pw")
        calls = {
            "read": lambda: account_store.read("ghost"),
            "update": lambda: account_store.update("ghost", account),
            "delete": lambda: account_store.delete("ghost"),
        }
        with pytest.raises(NotFound):
            calls[operation]()

    def test_update_never_creates(self, account_store: ObjectStore[Account]):
        with pytest.raises(NotFound):
            account_store.update("bob", Account(username="bob", password="pw"))
        assert not account_store.exists("bob")

    def test_update_overwrites(self, account_store: ObjectStore[Account]):
        account_store.create(Account(username="bob", password="old"), "bob")
        account_store.update("bob", Account(username="bob", password="new"))
        assert account_store.read("bob").password == "new"

    def test_delete_removes_file(self, follow_store: ObjectStore[Follow]):
        follow_store.create(Follow(follower="a", followee="b"), "a b")
        follow_store.delete("a b")
        assert not follow_store.exists("a b")
        with pytest.raises(NotFound):
            follow_store.read("a b")

    def test_no_temp_files_left_behind(self, account_store: ObjectStore[Account]):
        account_store.create(Account(username="bob", password="1"), "bob")
        account_store.update("bob", Account(username="bob", password="2"))
        assert sorted(p.name for p in account_store.directory.iterdir()) == [
            "bob.json"
        ]

    @pytest.mark.parametrize("key", ["", ".hidden", "a/b", "..", "a\\b", "a\x00b"])
    def test_rejects_unsafe_keys(self, post_store: ObjectStore[Post], key: str):
        with pytest.raises(InvalidKey):
            post_store.create(Post(owner="a", content="x"), key)

    def test_keys_lists_record_files(self, follow_store: ObjectStore[Follow]):
        follow_store.create(Follow(follower="a", followee="b"), "a b")
        follow_store.create(Follow(follower="b", followee="a"), "b a")
        assert sorted(follow_store.keys()) == ["a b", "b a"]


class TestTypeChecks:
    def test_read_rejects_other_record_type(self, data_dir: Path):
        shared = data_dir / "shared"
        ObjectStore(Account, shared).create(Account(username="a", password="p"), "a")
        with pytest.raises(TypeMismatch) as exc_info:
            ObjectStore(Post, shared).read("a")
        assert exc_info.value.expected == "post"
        assert exc_info.value.actual == "account"

    def test_read_rejects_garbage(self, post_store: ObjectStore[Post]):
        (post_store.directory / "bad.json").write_bytes(b"\x80\x81not json")
        with pytest.raises(CorruptData):
            post_store.read("bad")

    def test_read_rejects_envelope_without_tag(self, post_store: ObjectStore[Post]):
        (post_store.directory / "bad.json").write_text(json.dumps({"data": {}}))
        with pytest.raises(CorruptData):
            post_store.read("bad")

    def test_read_rejects_invalid_payload(self, post_store: ObjectStore[Post]):
        envelope = {"type": "post", "version": 1, "data": {"owner": "a"}}
        (post_store.directory / "bad.json").write_text(json.dumps(envelope))
        with pytest.raises(CorruptData):
            post_store.read("bad")

    def test_envelope_format(self, follow_store: ObjectStore[Follow]):
        follow_store.create(Follow(follower="a", followee="b"), "a b")
        envelope = json.loads((follow_store.directory / "a b.json").read_text())
        assert envelope == {
            "type": "follow",
            "version": 1,
            "data": {"follower": "a", "followee": "b"},
        }

    def test_tag_checked_before_payload(self, tmp_path: Path):
        class Note(Record):
            record_type: ClassVar[str] = "note"
            owner: str
            content: str

        store = ObjectStore(Note, tmp_path / "notes")
        envelope = {"type": "post", "data": {"owner": "a", "content": "b"}}
        (store.directory / "n.json").write_text(json.dumps(envelope))
        with pytest.raises(TypeMismatch):
            store.read("n")


class TestLoadAll:
    def _write_valid(self, store: ObjectStore[Post], count: int) -> None:
        for i in range(count):
            store.create(Post(owner="alice", content=f"post {i}"), f"alice_{i}")

    def test_empty_directory(self, post_store: ObjectStore[Post]):
        assert post_store.load_all() == []
        assert post_store.last_errors == []

    def test_skips_corrupt_and_mismatched_files(
        self, post_store: ObjectStore[Post], data_dir: Path
    ):
        self._write_valid(post_store, 3)
        (post_store.directory / "corrupt.json").write_text("{not json")
        (post_store.directory / "stray.txt").write_text("hello")
        mismatched = Account(username="x", password="y")
        ObjectStore(Account, post_store.directory).create(mismatched, "x")

        loaded = post_store.load_all()

        assert len(loaded) == 3
        assert {p.content for p in loaded} == {"post 0", "post 1", "post 2"}
        assert len(post_store.last_errors) == 3
        reasons = " ".join(f.reason for f in post_store.last_errors)
        assert "TypeMismatch" in reasons
        assert "CorruptData" in reasons

    def test_all_files_bad_yields_empty(self, post_store: ObjectStore[Post]):
        for name in ("a.json", "b.json"):
            (post_store.directory / name).write_text("")
        assert post_store.load_all() == []
        assert len(post_store.last_errors) == 2

    def test_ignores_subdirectories_and_temp_files(
        self, post_store: ObjectStore[Post]
    ):
        self._write_valid(post_store, 1)
        (post_store.directory / "nested").mkdir()
        (post_store.directory / ".alice_0_abc.tmp").write_text("partial")
        assert len(post_store.load_all()) == 1
        assert post_store.last_errors == []

    def test_missing_directory_yields_empty(self, post_store: ObjectStore[Post]):
        post_store.directory.rmdir()
        assert post_store.load_all() == []

    def test_logs_each_failure(
        self, post_store: ObjectStore[Post], caplog: pytest.LogCaptureFixture
    ):
        (post_store.directory / "bad.json").write_text("nope")
        with caplog.at_level("WARNING"):
            post_store.load_all()
        messages = [r.getMessage() for r in caplog.records]
        assert "record_load_failed" in messages
        assert "store_load_incomplete" in messages

    async def test_async_load_matches_sync(self, post_store: ObjectStore[Post]):
        self._write_valid(post_store, 2)
        (post_store.directory / "bad.json").write_text("nope")

        loaded = await post_store.load_all_async()

        assert sorted(p.content for p in loaded) == ["post 0", "post 1"]
        assert len(post_store.last_errors) == 1
