"""Small key-value cache for cross-invocation scratch state.

Entries are best-effort: losing one must never lose usage data. The
backend is injected so the filesystem can be swapped for memory in tests.
"""

from __future__ import annotations

import json
import logging
import os
import re
import time
from pathlib import Path
from typing import Any, Callable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


@runtime_checkable
class CacheBackend(Protocol):
    """Raw string storage keyed by name."""

    def read(self, key: str) -> str | None:
        """Return the stored text, or None if absent."""
        ...

    def write(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryCacheBackend:
    """In-process backend, mainly for tests."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def read(self, key: str) -> str | None:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __len__(self) -> int:
        return len(self._data)


class FileCacheBackend:
    """One file per key under *directory*, replaced atomically."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        safe = _UNSAFE_KEY_CHARS.sub("_", key) or "_"
        return self._directory / f"{safe}.json"

    def read(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write(self, key: str, value: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        tmp = path.with_name(f"{path.name}.{os.getpid()}.tmp")
        try:
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


class KeyValueCache:
    """JSON values stamped with their write time.

    ``get(key, max_age=...)`` treats entries older than *max_age* seconds as
    missing. Without *max_age* an entry never expires.
    """

    def __init__(self, backend: CacheBackend, *, clock: Callable[[], float] = time.time) -> None:
        self._backend = backend
        self._clock = clock

    @property
    def backend(self) -> CacheBackend:
        return self._backend

    def get(self, key: str, *, max_age: float | None = None) -> Any | None:
        raw = self._backend.read(key)
        if raw is None:
            return None
        try:
            entry = json.loads(raw)
        except (json.JSONDecodeError, ValueError):
            logger.debug("Discarding unreadable cache entry '%s'", key)
            return None
        if not isinstance(entry, dict) or "value" not in entry:
            return None
        if max_age is not None:
            updated_at = entry.get("updated_at")
            if not isinstance(updated_at, (int, float)):
                return None
            if self._clock() - updated_at > max_age:
                return None
        return entry["value"]

    def set(self, key: str, value: Any) -> None:
        entry = {"value": value, "updated_at": self._clock()}
        self._backend.write(key, json.dumps(entry))

    def delete(self, key: str) -> None:
        self._backend.delete(key)
