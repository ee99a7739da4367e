"""``livelogger clean [DAYS]`` — delete events older than DAYS days."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from livelogger.cli.commands._context import get_state, open_store
from livelogger.storage.event_store import PersistenceError

console = Console()


def clean_cmd(
    ctx: typer.Context,
    days: Optional[int] = typer.Argument(
        None,
        min=0,
        help="Remove events older than this many days (default from config, 30).",
    ),
) -> None:
    """Remove logs older than the given number of days."""
    state = get_state(ctx)
    days = state.settings.default_days_to_keep if days is None else days
    store = open_store(state, console)

    try:
        removed = store.purge_days(days)
    except PersistenceError as exc:
        console.print(f"[bold red]failed to delete old events:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"Deleted {removed} events older than {days} days")
