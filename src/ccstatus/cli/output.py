"""Plain single-line status output."""

from __future__ import annotations

import logging
import os
import re
import subprocess

from ccstatus.types.config import DisplayConfig
from ccstatus.types.records import UsageSummary
from ccstatus.types.session import SessionSnapshot

logger = logging.getLogger(__name__)

_MODEL_NAME = re.compile(r"Claude ([0-9.]+) (Opus|Sonnet|Haiku)")

FALLBACK_MODEL = "Claude"


def short_model_name(name: str) -> str:
    """'Claude 3.5 Sonnet' -> 'Sonnet 3.5'; other names pass through."""
    return _MODEL_NAME.sub(r"\2 \1", name)


def format_cost(cost: float) -> str:
    return f"${cost:.2f}" if cost >= 1 else f"${cost:.3f}"


def format_tokens(tokens: int) -> str:
    """Whole thousands or millions: 22000 -> '22k'."""
    if tokens >= 1_000_000:
        return f"{tokens // 1_000_000}M"
    if tokens >= 1_000:
        return f"{tokens // 1_000}k"
    return str(tokens)


def format_duration(ms: int) -> str:
    """Session wall time: '1h 5m', '2m 30s' or '45s'."""
    total = ms // 1000
    hours, rest = divmod(total, 3600)
    mins, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h {mins}m"
    if mins:
        return f"{mins}m {secs}s"
    return f"{secs}s"


def format_api_duration(ms: int) -> str:
    """Time spent in API calls: 'API 1m 5s', 'API 2.3s' or 'API 450ms'."""
    secs = ms // 1000
    if secs >= 60:
        return f"API {secs // 60}m {secs % 60}s"
    if secs:
        return f"API {secs}.{(ms % 1000) // 100}s"
    return f"API {ms}ms"


def git_branch(cwd: str, *, timeout: float = 1.0) -> str | None:
    """Current branch of the repository containing *cwd*, if any."""
    if not cwd or not os.path.isdir(cwd):
        return None
    try:
        proc = subprocess.run(
            ["git", "-C", cwd, "--no-optional-locks", "branch", "--show-current"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("git branch lookup failed: %s", exc)
        return None
    if proc.returncode != 0:
        return None
    return proc.stdout.strip() or None


def format_status_line(
    snapshot: SessionSnapshot,
    summary: UsageSummary,
    display: DisplayConfig,
    *,
    branch: str | None = None,
) -> str:
    """Join the enabled elements into one line (no trailing newline)."""
    record = snapshot.record
    parts: list[str] = []

    if display.model:
        parts.append(short_model_name(snapshot.model_display_name) or FALLBACK_MODEL)
    if display.directory and snapshot.current_dir:
        parts.append(os.path.basename(snapshot.current_dir.rstrip("/\\")) or snapshot.current_dir)
    if display.git_branch and branch:
        parts.append(f"[{branch}]")
    ctx = snapshot.context
    if display.context and ctx is not None and ctx.context_window_size > 0:
        used, free = format_tokens(ctx.used_tokens), format_tokens(ctx.free_tokens)
        parts.append(f"{used}/{free} ({ctx.used_percent}%)")
    if display.duration and record.duration_ms > 0:
        parts.append(format_duration(record.duration_ms))
    if display.api_duration and record.api_duration_ms > 0:
        parts.append(format_api_duration(record.api_duration_ms))
    if display.lines and (record.lines_added or record.lines_removed):
        parts.append(f"+{record.lines_added} -{record.lines_removed}")
    if display.session_cost and summary.session_cost > 0:
        parts.append(f"S:{format_cost(summary.session_cost)}")
    if display.weekly_cost and summary.weekly_with_session > 0:
        parts.append(f"W:{format_cost(summary.weekly_with_session)}")
    if display.lifetime_cost and summary.lifetime_with_session > 0:
        parts.append(f"L:{format_cost(summary.lifetime_with_session)}")

    line = display.separator.join(parts)
    return line.replace("\r", " ").replace("\n", " ")
