"""Usage record types persisted by the record store."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any

UNKNOWN_SESSION_ID = "unknown"

_INT_FIELDS = (
    "duration_ms",
    "api_duration_ms",
    "input_tokens",
    "output_tokens",
    "lines_added",
    "lines_removed",
)


def coerce_int(value: Any) -> int:
    """Coerce *value* to a non-negative int, degrading to 0."""
    if isinstance(value, bool) or value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number)


def coerce_float(value: Any) -> float:
    """Coerce *value* to a non-negative finite float, degrading to 0.0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


@dataclass(frozen=True, slots=True)
class SessionRecord:
    """One coding session's cumulative usage."""

    session_id: str
    timestamp: float = 0.0
    model: str = ""
    project_dir: str = ""
    cost: float = 0.0
    duration_ms: int = 0
    api_duration_ms: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    lines_added: int = 0
    lines_removed: int = 0

    @property
    def is_persistable(self) -> bool:
        return bool(self.session_id) and self.session_id != UNKNOWN_SESSION_ID

    def fingerprint(self) -> tuple[str, float, int, int, int]:
        """Fields whose change makes a new write worthwhile."""
        return (
            self.session_id,
            self.cost,
            self.duration_ms,
            self.lines_added,
            self.lines_removed,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionRecord:
        """Build a record from a stored entry.

        Older history files only carry ``session_id``, ``cost`` and
        ``timestamp``; every other field falls back to its zero value.
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {k: v for k, v in data.items() if k in known}
        session_id = values.get("session_id")
        values["session_id"] = str(session_id) if session_id else UNKNOWN_SESSION_ID
        values["timestamp"] = coerce_float(values.get("timestamp"))
        values["cost"] = coerce_float(values.get("cost"))
        values["model"] = str(values.get("model") or "")
        values["project_dir"] = str(values.get("project_dir") or "")
        for name in _INT_FIELDS:
            values[name] = coerce_int(values.get(name))
        return cls(**values)


class RecoveryOutcome(Enum):
    """Result of validating the history file at the start of an invocation."""

    READY = "ready"  # primary valid or absent
    RESTORED = "restored"  # primary replaced from backup
    REINITIALIZED = "reinitialized"  # both unusable, reset to empty


@dataclass(frozen=True, slots=True)
class AggregateTotals:
    """Rolling cost sums over stored sessions, excluding the live one."""

    weekly_total: float = 0.0
    lifetime_total: float = 0.0


@dataclass(frozen=True, slots=True)
class UsageSummary:
    """What one invocation hands to the line renderer."""

    session_cost: float = 0.0
    weekly_total: float = 0.0
    lifetime_total: float = 0.0
    persisted: bool = False
    include_session: bool = True

    @property
    def weekly_with_session(self) -> float:
        extra = self.session_cost if self.include_session else 0.0
        return self.weekly_total + extra

    @property
    def lifetime_with_session(self) -> float:
        extra = self.session_cost if self.include_session else 0.0
        return self.lifetime_total + extra
