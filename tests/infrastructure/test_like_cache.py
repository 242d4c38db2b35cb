"""Tests for the local liked-by-me caches."""

from __future__ import annotations

import json
from pathlib import Path

from folio.infrastructure.like_cache import FileLikeCache, MemoryLikeCache, cache_key


class TestMemoryLikeCache:
    def test_absent_is_not_liked(self) -> None:
        assert MemoryLikeCache().get("blog/a") is False

    def test_set_and_clear(self) -> None:
        cache = MemoryLikeCache()
        cache.set("blog/a", True)
        assert cache.get("blog/a") is True
        assert cache.snapshot() == {"postLike:blog/a": "1"}
        cache.set("blog/a", False)
        assert cache.get("blog/a") is False
        assert cache.snapshot() == {}

    def test_clear_missing_is_noop(self) -> None:
        cache = MemoryLikeCache()
        cache.clear("blog/a")
        assert cache.snapshot() == {}

    def test_other_values_are_not_liked(self) -> None:
        cache = MemoryLikeCache({cache_key("blog/a"): "yes"})
        assert cache.get("blog/a") is False


class TestFileLikeCache:
    def test_missing_file_reads_empty(self, tmp_path: Path) -> None:
        assert FileLikeCache(tmp_path / "likes.json").get("blog/a") is False

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / ".folio" / "likes.json"
        FileLikeCache(path).set("blog/a", True)
        assert json.loads(path.read_text()) == {"postLike:blog/a": "1"}
        assert FileLikeCache(path).get("blog/a") is True

    def test_unlike_removes_key(self, tmp_path: Path) -> None:
        path = tmp_path / "likes.json"
        cache = FileLikeCache(path)
        cache.set("blog/a", True)
        cache.set("blog/b", True)
        cache.set("blog/a", False)
        assert json.loads(path.read_text()) == {"postLike:blog/b": "1"}

    def test_corrupt_file_reads_not_liked(self, tmp_path: Path) -> None:
        path = tmp_path / "likes.json"
        path.write_text("{not json")
        assert FileLikeCache(path).get("blog/a") is False

    def test_non_object_reads_not_liked(self, tmp_path: Path) -> None:
        path = tmp_path / "likes.json"
        path.write_text('["postLike:blog/a"]')
        assert FileLikeCache(path).get("blog/a") is False

    def test_unwritable_location_is_silent(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        cache = FileLikeCache(blocker / "likes.json")
        cache.set("blog/a", True)
        assert cache.get("blog/a") is False
