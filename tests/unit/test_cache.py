"""Tests for the key-value scratch cache and its backends."""

from __future__ import annotations

from pathlib import Path

from ccstatus.store.cache import CacheBackend, FileCacheBackend, KeyValueCache, MemoryCacheBackend


class TestMemoryBackend:
    def test_read_write_delete(self):
        backend = MemoryCacheBackend()
        assert backend.read("k") is None
        backend.write("k", "v")
        assert backend.read("k") == "v"
        backend.delete("k")
        assert backend.read("k") is None
        backend.delete("k")  # deleting twice is fine

    def test_satisfies_protocol(self, tmp_path: Path):
        assert isinstance(MemoryCacheBackend(), CacheBackend)
        assert isinstance(FileCacheBackend(tmp_path), CacheBackend)


class TestFileBackend:
    def test_creates_directory_lazily(self, tmp_path: Path):
        directory = tmp_path / "nested" / "cache"
        backend = FileCacheBackend(directory)
        assert backend.read("k") is None
        assert not directory.exists()
        backend.write("k", "hello")
        assert backend.read("k") == "hello"
        assert backend.path_for("k").parent == directory

    def test_keys_are_sanitized(self, tmp_path: Path):
        backend = FileCacheBackend(tmp_path)
        path = backend.path_for("../../etc/passwd")
        assert path.parent == tmp_path
        backend.write("../../etc/passwd", "x")
        assert backend.read("../../etc/passwd") == "x"

    def test_delete_missing(self, tmp_path: Path):
        FileCacheBackend(tmp_path).delete("nope")

    def test_no_temp_files_left(self, tmp_path: Path):
        backend = FileCacheBackend(tmp_path)
        backend.write("a", "1")
        backend.write("a", "2")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.json"]


class TestKeyValueCache:
    def test_json_values(self, memory_cache: KeyValueCache):
        memory_cache.set("fp", ["s", 1.5, 3, 4, 5])
        assert memory_cache.get("fp") == ["s", 1.5, 3, 4, 5]

    def test_missing(self, memory_cache: KeyValueCache):
        assert memory_cache.get("missing") is None

    def test_max_age_expires(self, memory_cache: KeyValueCache, clock):
        memory_cache.set("quote", {"price": 1})
        clock.advance(30)
        assert memory_cache.get("quote", max_age=60) == {"price": 1}
        clock.advance(31)
        assert memory_cache.get("quote", max_age=60) is None
        assert memory_cache.get("quote") == {"price": 1}

    def test_unreadable_entry_is_absent(self, clock):
        backend = MemoryCacheBackend()
        backend.write("bad", "{not json")
        backend.write("shape", "[1, 2]")
        cache = KeyValueCache(backend, clock=clock)
        assert cache.get("bad") is None
        assert cache.get("shape") is None

    def test_delete(self, memory_cache: KeyValueCache):
        memory_cache.set("k", 1)
        memory_cache.delete("k")
        assert memory_cache.get("k") is None

    def test_file_backed(self, tmp_path: Path, clock):
        cache = KeyValueCache(FileCacheBackend(tmp_path), clock=clock)
        cache.set("k", {"a": 1})
        again = KeyValueCache(FileCacheBackend(tmp_path), clock=clock)
        assert again.get("k") == {"a": 1}
