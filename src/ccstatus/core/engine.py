"""Per-invocation usage tracking: recover, debounce, persist, aggregate."""

from __future__ import annotations

import logging
import time
from typing import Callable

from ccstatus.core.aggregate import aggregate
from ccstatus.core.debounce import DebounceGate, fingerprint_key
from ccstatus.store.cache import FileCacheBackend, KeyValueCache
from ccstatus.store.records import RecordStore, StoreCorruptedError
from ccstatus.types.config import StoreConfig
from ccstatus.types.records import RecoveryOutcome, SessionRecord, UsageSummary
from ccstatus.types.session import SessionSnapshot

logger = logging.getLogger(__name__)


class UsageTracker:
    """Runs one status-line invocation against the usage history.

    Never raises for storage problems: every failure is logged and the
    summary falls back to whatever could still be read (often zeros).
    """

    def __init__(
        self,
        store: RecordStore,
        gate: DebounceGate | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._gate = gate
        self._clock = clock

    @classmethod
    def from_config(cls, config: StoreConfig) -> UsageTracker:
        cache = KeyValueCache(FileCacheBackend(config.cache_dir))
        gate = DebounceGate(cache, key=fingerprint_key(config.history_path))
        return cls(RecordStore(config.history_path), gate)

    @property
    def store(self) -> RecordStore:
        return self._store

    def track(self, snapshot: SessionSnapshot) -> UsageSummary:
        record = snapshot.record
        self._recover()
        persisted = self._persist(record)
        records = self._load()
        totals = aggregate(records, record.session_id, self._clock())
        return UsageSummary(
            session_cost=record.cost,
            weekly_total=totals.weekly_total,
            lifetime_total=totals.lifetime_total,
            persisted=persisted,
            include_session=record.is_persistable,
        )

    def _recover(self) -> None:
        try:
            outcome = self._store.recover()
        except OSError as exc:
            logger.warning("Could not validate usage history: %s", exc)
            return
        if outcome is not RecoveryOutcome.READY and self._gate is not None:
            # History was rolled back; the last fingerprint no longer matches it.
            self._gate.forget()

    def _persist(self, record: SessionRecord) -> bool:
        if not record.is_persistable:
            return False
        if self._gate is not None and not self._gate.should_persist(record):
            return False
        try:
            return self._store.upsert(record)
        except (OSError, StoreCorruptedError) as exc:
            logger.warning("Failed to record session %s: %s", record.session_id, exc)
            if self._gate is not None:
                self._gate.forget()
            return False

    def _load(self) -> list[SessionRecord]:
        try:
            return self._store.load_all()
        except StoreCorruptedError as exc:
            logger.warning("%s", exc)
        except OSError as exc:
            logger.warning("Could not read usage history: %s", exc)
            return []
        try:
            self._store.recover()
            return self._store.load_all()
        except (OSError, StoreCorruptedError) as exc:
            logger.warning("Usage history still unreadable: %s", exc)
            return []
