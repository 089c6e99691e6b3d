"""Tests for ccstatus.types module."""

from __future__ import annotations

import pytest

from ccstatus.types.records import (
    UNKNOWN_SESSION_ID,
    SessionRecord,
    UsageSummary,
    coerce_float,
    coerce_int,
)
from ccstatus.types.session import ContextUsage


class TestCoercion:
    @pytest.mark.parametrize("value,expected", [
        (5, 5), ("7", 7), (3.9, 3), (None, 0), (True, 0), (-1, 0), ("x", 0), (float("inf"), 0),
        (10 ** 400, 0),
    ])
    def test_coerce_int(self, value, expected):
        assert coerce_int(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (0.5, 0.5), ("1.25", 1.25), (None, 0.0), (False, 0.0), (-2.0, 0.0), (float("nan"), 0.0),
        (10 ** 400, 0.0),
    ])
    def test_coerce_float(self, value, expected):
        assert coerce_float(value) == expected


class TestSessionRecord:
    def test_round_trip(self, make_record):
        record = make_record("abc")
        assert SessionRecord.from_dict(record.to_dict()) == record

    def test_legacy_entry(self):
        record = SessionRecord.from_dict({"session_id": "old", "cost": 2.5, "timestamp": 100})
        assert record.cost == 2.5
        assert record.timestamp == 100.0
        assert record.model == ""
        assert record.lines_added == 0

    def test_unknown_fields_ignored(self):
        record = SessionRecord.from_dict({"session_id": "x", "colour": "blue"})
        assert record.session_id == "x"

    def test_missing_id_is_unknown(self):
        record = SessionRecord.from_dict({"cost": 1})
        assert record.session_id == UNKNOWN_SESSION_ID
        assert record.is_persistable is False

    def test_zero_cost_is_persistable(self):
        assert SessionRecord(session_id="s", cost=0.0).is_persistable is True

    def test_fingerprint(self, make_record):
        record = make_record("s", cost=2.0, duration_ms=10, lines_added=3, lines_removed=1)
        assert record.fingerprint() == ("s", 2.0, 10, 3, 1)

    def test_frozen(self, make_record):
        record = make_record()
        with pytest.raises(AttributeError):
            record.cost = 9.0  # type: ignore[misc]


class TestUsageSummary:
    def test_adds_session(self):
        summary = UsageSummary(session_cost=1.0, weekly_total=2.0, lifetime_total=5.0)
        assert summary.weekly_with_session == 3.0
        assert summary.lifetime_with_session == 6.0

    def test_excluded_session(self):
        summary = UsageSummary(session_cost=1.0, weekly_total=2.0, include_session=False)
        assert summary.weekly_with_session == 2.0


class TestContextUsage:
    def test_percentages(self):
        ctx = ContextUsage(input_tokens=50_000, cache_read_input_tokens=10_000,
                           context_window_size=200_000)
        assert ctx.used_tokens == 60_000
        assert ctx.free_tokens == 140_000
        assert ctx.used_percent == 30

    def test_zero_window(self):
        assert ContextUsage(input_tokens=5).used_percent == 0
        assert ContextUsage(input_tokens=5).free_tokens == 0
