"""CLI entry point for ccstatus."""

from __future__ import annotations

import logging
import sys
import time

import click

from ccstatus.cli.output import FALLBACK_MODEL, format_status_line, git_branch, short_model_name
from ccstatus.types.config import StatuslineConfig

logger = logging.getLogger("ccstatus")


def _configure_logging(config: StatuslineConfig, verbose: bool) -> None:
    """Route diagnostics away from stdout, which carries the status line."""
    root = logging.getLogger("ccstatus")
    root.handlers.clear()
    root.propagate = False
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    if verbose:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(fmt)
        root.addHandler(handler)
        root.setLevel(logging.DEBUG)
    if config.log_file is not None:
        try:
            config.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
        except OSError:
            pass  # fall back to NullHandler below
        else:
            file_handler.setFormatter(fmt)
            root.addHandler(file_handler)
            if not verbose:
                root.setLevel(getattr(logging, config.log_level, logging.WARNING))
    if not root.handlers:
        root.addHandler(logging.NullHandler())


def render_status(config: StatuslineConfig, text: str) -> str:
    """Track usage for one stdin payload and build the status line."""
    from ccstatus.core.engine import UsageTracker
    from ccstatus.core.ingest import parse_snapshot_text

    snapshot = parse_snapshot_text(text, now=time.time())
    summary = UsageTracker.from_config(config.store).track(snapshot)
    branch = git_branch(snapshot.current_dir) if config.display.git_branch else None
    return format_status_line(snapshot, summary, config.display, branch=branch)


def _fallback_line(text: str) -> str:
    """Best-effort model name when rendering failed outright."""
    try:
        from ccstatus.core.ingest import parse_snapshot_text

        name = parse_snapshot_text(text).model_display_name
    except Exception:
        name = ""
    return short_model_name(name) or FALLBACK_MODEL


@click.group(invoke_without_command=True)
@click.option("--data-dir", default=None, help="Directory holding the usage history")
@click.option("--verbose", "-v", is_flag=True, help="Log diagnostics to stderr")
@click.pass_context
def cli(ctx: click.Context, data_dir: str | None, verbose: bool) -> None:
    """ccstatus -- status line with persistent cost tracking.

    \b
    Usage:
      ccstatus < snapshot.json          (print the status line)
      ccstatus history
      ccstatus prune --keep 500
      ccstatus recover
    """
    from ccstatus.core.config import resolve_config

    config = resolve_config(data_dir=data_dir)
    _configure_logging(config, verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is not None:
        return

    text = click.get_text_stream("stdin").read()
    try:
        line = render_status(config, text)
    except Exception:
        logger.exception("Status line rendering failed")
        line = _fallback_line(text)
    click.echo(line, nl=False)


def _register_subcommands() -> None:
    """Register CLI subcommands."""
    from ccstatus.cli.commands import history_cmd, prune_cmd, recover_cmd

    cli.add_command(history_cmd, "history")
    cli.add_command(prune_cmd, "prune")
    cli.add_command(recover_cmd, "recover")


_register_subcommands()


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
