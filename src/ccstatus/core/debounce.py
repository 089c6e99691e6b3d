"""Debounce gate that skips history writes when nothing material changed."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from ccstatus.store.cache import KeyValueCache
from ccstatus.types.records import SessionRecord

logger = logging.getLogger(__name__)

FINGERPRINT_KEY = "last-write-fingerprint"


def fingerprint_key(history_path: Path) -> str:
    """Fingerprint cache key scoped to one history file."""
    resolved = str(history_path.expanduser().resolve())
    digest = hashlib.sha1(resolved.encode("utf-8")).hexdigest()[:12]
    return f"{FINGERPRINT_KEY}-{digest}"


class DebounceGate:
    """Compares a record's fingerprint with the one from the last write.

    The stored fingerprint is not authoritative. If it cannot be read the
    gate answers "persist".
    """

    def __init__(self, cache: KeyValueCache, *, key: str = FINGERPRINT_KEY) -> None:
        self._cache = cache
        self._key = key

    def should_persist(self, record: SessionRecord) -> bool:
        current = list(record.fingerprint())
        try:
            previous = self._cache.get(self._key)
        except Exception as exc:
            logger.debug("Fingerprint read failed, persisting: %s", exc)
            previous = None

        if previous == current:
            return False

        try:
            self._cache.set(self._key, current)
        except Exception as exc:
            logger.debug("Fingerprint write failed: %s", exc)
        return True

    def forget(self) -> None:
        """Drop the stored fingerprint so the next record is persisted."""
        try:
            self._cache.delete(self._key)
        except Exception as exc:
            logger.debug("Fingerprint delete failed: %s", exc)
