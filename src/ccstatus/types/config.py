"""Configuration types for ccstatus."""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_SEPARATOR = " | "


def default_data_dir() -> Path:
    return Path.home() / ".claude"


def default_cache_dir() -> Path:
    return Path(tempfile.gettempdir()) / "ccstatus"


@dataclass(frozen=True, slots=True)
class DisplayConfig:
    """Which elements appear on the status line."""

    model: bool = True
    directory: bool = True
    git_branch: bool = True
    context: bool = True
    duration: bool = True
    api_duration: bool = True
    lines: bool = True
    session_cost: bool = True
    weekly_cost: bool = True
    lifetime_cost: bool = False
    separator: str = DEFAULT_SEPARATOR


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """Where usage history and scratch state live."""

    data_dir: Path = field(default_factory=default_data_dir)
    cache_dir: Path = field(default_factory=default_cache_dir)
    history_file: str = "weekly-usage.json"

    @property
    def history_path(self) -> Path:
        return self.data_dir / self.history_file


@dataclass(frozen=True, slots=True)
class StatuslineConfig:
    """Resolved configuration for one invocation."""

    display: DisplayConfig = field(default_factory=DisplayConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    log_file: Path | None = None
    log_level: str = "WARNING"
