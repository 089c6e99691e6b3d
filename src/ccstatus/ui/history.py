"""Rich-powered usage history report."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ccstatus.types.records import AggregateTotals, SessionRecord

STYLE_LABEL = "bold #94a3b8"   # slate
STYLE_VALUE = "#e2e8f0"        # light
STYLE_COST = "#34d399"         # green
STYLE_DIM = "dim #7c7c8a"


class HistoryPrinter:
    """Prints the stored sessions, daily sums and rolling totals."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def print_history(
        self,
        records: list[SessionRecord],
        *,
        totals: AggregateTotals,
        daily: list[tuple[str, float]],
        limit: int = 20,
        path: Path | None = None,
    ) -> None:
        if not records:
            self._console.print(Text("No sessions recorded.", style=STYLE_DIM))
            return

        recent = sorted(records, key=lambda r: r.timestamp, reverse=True)[:max(0, limit)]
        sessions = Table(title="Recent sessions", title_justify="left", expand=False)
        sessions.add_column("Session", style=STYLE_VALUE, no_wrap=True)
        sessions.add_column("Updated", style=STYLE_DIM, no_wrap=True)
        sessions.add_column("Model", style=STYLE_VALUE)
        sessions.add_column("Project", style=STYLE_DIM)
        sessions.add_column("Tokens in/out", justify="right")
        sessions.add_column("Lines", justify="right")
        sessions.add_column("Cost", justify="right", style=STYLE_COST)
        for r in recent:
            updated = datetime.fromtimestamp(r.timestamp).strftime("%Y-%m-%d %H:%M")
            sessions.add_row(
                r.session_id[:12],
                updated,
                r.model or "?",
                Path(r.project_dir).name if r.project_dir else "",
                f"{r.input_tokens:,}/{r.output_tokens:,}",
                f"+{r.lines_added} -{r.lines_removed}",
                f"${r.cost:.4f}",
            )
        self._console.print(sessions)

        by_day = Table(show_header=False, show_edge=False, padding=(0, 1), expand=False)
        by_day.add_column(style=STYLE_LABEL, no_wrap=True)
        by_day.add_column(style=STYLE_COST, justify="right", no_wrap=True)
        for day, cost in daily:
            by_day.add_row(day, f"${cost:.2f}")
        self._console.print(by_day)

        summary = Table(show_header=False, show_edge=False, padding=(0, 1), expand=False)
        summary.add_column(style=STYLE_LABEL, justify="right", no_wrap=True)
        summary.add_column(style=STYLE_VALUE, no_wrap=True)
        summary.add_row("Sessions", str(len(records)))
        summary.add_row("Last 7 days", Text(f"${totals.weekly_total:.2f}", style=STYLE_COST))
        summary.add_row("Lifetime", Text(f"${totals.lifetime_total:.2f}", style=STYLE_COST))
        if path is not None:
            summary.add_row("File", str(path))
        self._console.print(summary)
