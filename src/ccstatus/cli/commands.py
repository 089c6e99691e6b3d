"""CLI subcommands for ccstatus (history, prune, recover)."""

from __future__ import annotations

import time

import click

from ccstatus.store.records import RecordStore, StoreCorruptedError
from ccstatus.types.config import StatuslineConfig


def _store(ctx: click.Context) -> RecordStore:
    config: StatuslineConfig = ctx.obj["config"]
    return RecordStore(config.store.history_path)


def _load_or_exit(store: RecordStore):
    """Recover the history if needed, then load it."""
    try:
        store.recover()
        return store.load_all()
    except (OSError, StoreCorruptedError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


@click.command()
@click.option("--limit", "-n", default=20, help="Max sessions to show")
@click.pass_context
def history_cmd(ctx: click.Context, limit: int) -> None:
    """Show recent sessions and cost totals."""
    from ccstatus.core.aggregate import aggregate, daily_totals
    from ccstatus.ui.history import HistoryPrinter

    store = _store(ctx)
    records = _load_or_exit(store)
    now = time.time()

    HistoryPrinter().print_history(
        records,
        totals=aggregate(records, None, now),
        daily=daily_totals(records, now),
        limit=limit,
        path=store.path,
    )


@click.command()
@click.option("--keep", type=int, default=None, help="Keep only the N most recent sessions")
@click.option("--max-age-days", type=float, default=None, help="Drop sessions older than this")
@click.pass_context
def prune_cmd(ctx: click.Context, keep: int | None, max_age_days: float | None) -> None:
    """Remove old sessions from the usage history."""
    if keep is None and max_age_days is None:
        click.echo("Error: pass --keep and/or --max-age-days", err=True)
        raise SystemExit(2)

    store = _store(ctx)
    try:
        store.recover()
        removed = store.prune(keep=keep, max_age_days=max_age_days)
    except (OSError, StoreCorruptedError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Removed {removed} session(s) from {store.path}")


@click.command()
@click.pass_context
def recover_cmd(ctx: click.Context) -> None:
    """Validate the usage history, restoring from backup if needed."""
    store = _store(ctx)
    try:
        outcome = store.recover()
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"{store.path}: {outcome.value}")
