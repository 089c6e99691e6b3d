"""Rolling cost sums over the usage history."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from ccstatus.types.records import UNKNOWN_SESSION_ID, AggregateTotals, SessionRecord

WEEK_SECONDS = 7 * 24 * 3600


def aggregate(
    records: Iterable[SessionRecord] | None,
    current_session_id: str | None,
    now: float,
) -> AggregateTotals:
    """Sum stored costs for the last 7 days and for all time.

    The live session is excluded: its cost comes from the current input,
    never from a possibly stale stored copy.
    """
    if not records:
        return AggregateTotals()

    week_ago = now - WEEK_SECONDS
    weekly = 0.0
    lifetime = 0.0
    for record in records:
        if record.session_id in (current_session_id, UNKNOWN_SESSION_ID):
            continue
        lifetime += record.cost
        if record.timestamp > week_ago:
            weekly += record.cost
    return AggregateTotals(weekly_total=weekly, lifetime_total=lifetime)


def daily_totals(
    records: Iterable[SessionRecord] | None,
    now: float,
    days: int = 7,
) -> list[tuple[str, float]]:
    """Per local calendar day cost sums, oldest first, ending today."""
    today = datetime.fromtimestamp(now).date()
    buckets = {(today - timedelta(days=i)).isoformat(): 0.0 for i in range(days - 1, -1, -1)}
    for record in records or ():
        if record.session_id == UNKNOWN_SESSION_ID:
            continue
        day = datetime.fromtimestamp(record.timestamp).date().isoformat()
        if day in buckets:
            buckets[day] += record.cost
    return list(buckets.items())
