"""Type definitions for ccstatus."""

from ccstatus.types.config import DisplayConfig, StatuslineConfig, StoreConfig
from ccstatus.types.records import (
    UNKNOWN_SESSION_ID,
    AggregateTotals,
    RecoveryOutcome,
    SessionRecord,
    UsageSummary,
)
from ccstatus.types.session import ContextUsage, SessionSnapshot

__all__ = [
    "AggregateTotals",
    "ContextUsage",
    "DisplayConfig",
    "RecoveryOutcome",
    "SessionRecord",
    "SessionSnapshot",
    "StatuslineConfig",
    "StoreConfig",
    "UNKNOWN_SESSION_ID",
    "UsageSummary",
]
