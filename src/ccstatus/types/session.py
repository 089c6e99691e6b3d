"""Normalized status-line input types."""

from __future__ import annotations

from dataclasses import dataclass

from ccstatus.types.records import SessionRecord


@dataclass(frozen=True, slots=True)
class ContextUsage:
    """Token usage of the current context window."""

    input_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_read_input_tokens: int = 0
    context_window_size: int = 0

    @property
    def used_tokens(self) -> int:
        return self.input_tokens + self.cache_creation_input_tokens + self.cache_read_input_tokens

    @property
    def free_tokens(self) -> int:
        return max(0, self.context_window_size - self.used_tokens)

    @property
    def used_percent(self) -> int:
        if self.context_window_size <= 0:
            return 0
        return self.used_tokens * 100 // self.context_window_size


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """One invocation's input after normalization."""

    record: SessionRecord
    model_display_name: str = ""
    current_dir: str = ""
    context: ContextUsage | None = None
    cost_source: str = "reported"  # "reported" or "estimated"

    @property
    def session_cost(self) -> float:
        return self.record.cost
