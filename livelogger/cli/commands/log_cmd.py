"""``livelogger log USERNAME`` — track a live stream.

Reads raw source events from a JSON-lines feed (a file, or stdin when
the feed is ``-``), shows them in the live display and records them in
the event database.  Press Ctrl+C to stop.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Optional

import typer
from rich.console import Console

from livelogger.cli.commands._context import get_state, open_store
from livelogger.cli.commands._live import run_with_display, saved_count
from livelogger.core.session import LiveSession
from livelogger.logging_config import configure_logging
from livelogger.monitor.renderer import LiveViewRenderer
from livelogger.monitor.view import LiveView
from livelogger.sources import SourceError
from livelogger.sources.jsonl import JsonLinesSource

console = Console()


def log_cmd(
    ctx: typer.Context,
    username: str = typer.Argument(
        ...,
        help="The username whose live stream is tracked.",
    ),
    feed: str = typer.Option(
        "-",
        "--feed",
        "-f",
        help="JSON-lines feed of raw source events ('-' reads stdin).",
    ),
    max_entries: Optional[int] = typer.Option(
        None,
        "--max-entries",
        "-n",
        help="Keep at most this many events in the live view.",
    ),
) -> None:
    """Track a live stream, displaying and recording every event."""
    state = get_state(ctx)
    settings = state.settings
    log_path = configure_logging(settings, console)

    store = open_store(state, console)
    source = (
        JsonLinesSource(stream=sys.stdin) if feed == "-" else JsonLinesSource(path=feed)
    )
    view = LiveView(username, max_entries=max_entries or settings.display_max_entries)
    session = LiveSession.create(
        username,
        source,
        store,
        view,
        channel_capacity=settings.channel_capacity,
        overflow=settings.overflow_policy,
    )
    renderer = LiveViewRenderer(console=console)

    if log_path is not None:
        console.print(f"[dim]Logging to {log_path}[/dim]")

    try:
        stats = asyncio.run(
            run_with_display(session, view, renderer, refresh_hz=settings.refresh_hz)
        )
    except SourceError as exc:
        console.print(f"[bold red]failed to track user:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    except KeyboardInterrupt:
        console.print(f"[yellow]Stopped tracking @{username}.[/yellow]")
        stats = session.stats()

    console.print(
        f"[bold green]{stats.dispatched}[/bold green] events dispatched for @{username}, "
        f"{saved_count(session)} saved to {store.db_path} "
        f"([dim]{stats.skipped} skipped, {stats.sink_failures} sink failures[/dim])"
    )
