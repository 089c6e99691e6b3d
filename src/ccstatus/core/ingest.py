"""Normalize the host's JSON snapshot into a session record.

Every field is optional. Missing, null or malformed values fall back to
zero (or an empty string) so that a bad snapshot still yields a line.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from ccstatus.core.pricing import estimate_cost
from ccstatus.types.records import UNKNOWN_SESSION_ID, SessionRecord, coerce_float, coerce_int
from ccstatus.types.session import ContextUsage, SessionSnapshot

logger = logging.getLogger(__name__)


def _dig(data: Any, *path: str) -> Any:
    """Follow *path* through nested dicts, returning None on any gap."""
    node = data
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _first(data: Any, *paths: tuple[str, ...]) -> Any:
    for path in paths:
        value = _dig(data, *path)
        if value is not None:
            return value
    return None


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def _parse_context(data: Any) -> ContextUsage | None:
    usage = _dig(data, "context_window", "current_usage")
    if not isinstance(usage, dict):
        return None
    return ContextUsage(
        input_tokens=coerce_int(usage.get("input_tokens")),
        cache_creation_input_tokens=coerce_int(usage.get("cache_creation_input_tokens")),
        cache_read_input_tokens=coerce_int(usage.get("cache_read_input_tokens")),
        context_window_size=coerce_int(_dig(data, "context_window", "context_window_size")),
    )


def parse_snapshot(raw: Any, now: float | None = None) -> SessionSnapshot:
    """Build a :class:`SessionSnapshot` from the decoded stdin payload.

    *now* (default: the current time) only seeds the record's timestamp;
    the store restamps it at write time.
    """
    data = raw if isinstance(raw, dict) else {}
    if now is None:
        now = time.time()

    session_id = _text(data.get("session_id")).strip() or UNKNOWN_SESSION_ID
    display_name = _text(_first(data, ("model", "display_name"), ("model", "id")))
    current_dir = _text(_first(data, ("workspace", "current_dir"), ("cwd",)))
    project_dir = _text(_first(data, ("workspace", "project_dir"))) or current_dir

    input_tokens = coerce_int(_dig(data, "context_window", "total_input_tokens"))
    output_tokens = coerce_int(_dig(data, "context_window", "total_output_tokens"))

    cost = coerce_float(_dig(data, "cost", "total_cost_usd"))
    cost_source = "reported"
    if cost == 0.0 and (input_tokens > 0 or output_tokens > 0):
        cost = estimate_cost(display_name, input_tokens, output_tokens)
        cost_source = "estimated"
        logger.debug("Estimated cost %.6f for %s from token counts", cost, display_name or "?")

    record = SessionRecord(
        session_id=session_id,
        timestamp=coerce_float(now),
        model=display_name,
        project_dir=project_dir,
        cost=cost,
        duration_ms=coerce_int(_first(data, ("cost", "total_duration_ms"), ("duration_ms",))),
        api_duration_ms=coerce_int(_dig(data, "cost", "total_api_duration_ms")),
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        lines_added=coerce_int(_dig(data, "cost", "total_lines_added")),
        lines_removed=coerce_int(_dig(data, "cost", "total_lines_removed")),
    )
    return SessionSnapshot(
        record=record,
        model_display_name=display_name,
        current_dir=current_dir,
        context=_parse_context(data),
        cost_source=cost_source,
    )


def parse_snapshot_text(text: str, now: float | None = None) -> SessionSnapshot:
    """Decode stdin text; unreadable JSON yields an empty, unknown session."""
    try:
        raw = json.loads(text) if text.strip() else {}
    except (ValueError, RecursionError) as exc:
        logger.warning("Ignoring malformed status input: %s", exc)
        raw = {}
    return parse_snapshot(raw, now=now)
