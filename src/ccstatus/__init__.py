"""ccstatus: status line with persistent session cost tracking.

Usage:
    from ccstatus import RecordStore, UsageTracker, parse_snapshot

    tracker = UsageTracker(RecordStore(path))
    summary = tracker.track(parse_snapshot(payload))
    print(summary.weekly_with_session)
"""

from ccstatus.core.aggregate import aggregate
from ccstatus.core.debounce import DebounceGate
from ccstatus.core.engine import UsageTracker
from ccstatus.core.ingest import parse_snapshot, parse_snapshot_text
from ccstatus.core.pricing import estimate_cost
from ccstatus.store.cache import FileCacheBackend, KeyValueCache, MemoryCacheBackend
from ccstatus.store.records import RecordStore, StoreCorruptedError
from ccstatus.types.records import (
    AggregateTotals,
    RecoveryOutcome,
    SessionRecord,
    UsageSummary,
)
from ccstatus.types.session import ContextUsage, SessionSnapshot

__version__ = "0.1.0"

__all__ = [
    # Core API
    "UsageTracker",
    "aggregate",
    "estimate_cost",
    "parse_snapshot",
    "parse_snapshot_text",
    # Storage
    "DebounceGate",
    "FileCacheBackend",
    "KeyValueCache",
    "MemoryCacheBackend",
    "RecordStore",
    "StoreCorruptedError",
    # Types
    "AggregateTotals",
    "ContextUsage",
    "RecoveryOutcome",
    "SessionRecord",
    "SessionSnapshot",
    "UsageSummary",
]
