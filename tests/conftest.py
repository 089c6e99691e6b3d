"""Test fixtures: fake clock, record factory, isolated stores and payloads."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from ccstatus.store.cache import KeyValueCache, MemoryCacheBackend
from ccstatus.store.records import RecordStore
from ccstatus.types.records import SessionRecord

NOW = 1_760_000_000.0  # fixed "current time" for deterministic windows
DAY = 86_400.0


class FakeClock:
    """A settable clock usable anywhere a ``time.time``-style callable is expected."""

    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the real ~/.claude and any CCSTATUS_* settings."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    for name in (
        "CCSTATUS_CONFIG",
        "CCSTATUS_DATA_DIR",
        "CCSTATUS_CACHE_DIR",
        "CCSTATUS_SEPARATOR",
        "CCSTATUS_LOG_FILE",
        "CCSTATUS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_record() -> Callable[..., SessionRecord]:
    def _make(session_id: str = "sess-1", **overrides: Any) -> SessionRecord:
        values: dict[str, Any] = {
            "timestamp": NOW,
            "model": "Claude Opus 4.5",
            "project_dir": "/work/demo",
            "cost": 1.25,
            "duration_ms": 60_000,
            "api_duration_ms": 20_000,
            "input_tokens": 1_000,
            "output_tokens": 500,
            "lines_added": 10,
            "lines_removed": 2,
        }
        values.update(overrides)
        return SessionRecord(session_id=session_id, **values)

    return _make


@pytest.fixture
def history_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "weekly-usage.json"


@pytest.fixture
def store(history_path: Path, clock: FakeClock) -> RecordStore:
    return RecordStore(history_path, clock=clock)


@pytest.fixture
def memory_cache(clock: FakeClock) -> KeyValueCache:
    return KeyValueCache(MemoryCacheBackend(), clock=clock)


@pytest.fixture
def payload() -> dict[str, Any]:
    """A realistic stdin snapshot from the host CLI."""
    return {
        "session_id": "abc123",
        "model": {"id": "claude-opus-4-5", "display_name": "Claude Opus 4.5"},
        "workspace": {"current_dir": "/work/demo/src", "project_dir": "/work/demo"},
        "cost": {
            "total_cost_usd": 0.42,
            "total_duration_ms": 150_000,
            "total_api_duration_ms": 2_300,
            "total_lines_added": 156,
            "total_lines_removed": 23,
        },
        "context_window": {
            "total_input_tokens": 12_000,
            "total_output_tokens": 3_000,
            "context_window_size": 200_000,
            "current_usage": {
                "input_tokens": 20_000,
                "cache_creation_input_tokens": 1_000,
                "cache_read_input_tokens": 1_000,
            },
        },
    }
