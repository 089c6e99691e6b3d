"""Persistent usage history and scratch cache."""

from ccstatus.store.cache import FileCacheBackend, KeyValueCache, MemoryCacheBackend
from ccstatus.store.records import RecordStore, StoreCorruptedError

__all__ = [
    "FileCacheBackend",
    "KeyValueCache",
    "MemoryCacheBackend",
    "RecordStore",
    "StoreCorruptedError",
]
