"""``livelogger list`` and ``livelogger show`` — browse recorded events."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from livelogger.cli.commands._context import get_state, open_store
from livelogger.models.events import EventKind
from livelogger.storage.event_store import PersistenceError
from livelogger.storage.export import TEXT_TIMESTAMP_FORMAT

console = Console()

_KIND_STYLES: dict[EventKind, str] = {
    EventKind.CHAT: "white",
    EventKind.GIFT: "bold magenta",
    EventKind.LIKE: "red",
    EventKind.FOLLOW: "bold green",
    EventKind.SHARE: "green",
    EventKind.STATS: "dim",
}


def _parse_time(value: Optional[str], option: str) -> Optional[datetime]:
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"{option} must be an ISO-8601 date or time") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def list_cmd(ctx: typer.Context) -> None:
    """List every recorded stream with its event and session-day counts."""
    store = open_store(get_state(ctx), console, must_exist=True)
    try:
        subjects = store.list_subjects()
        if not subjects:
            console.print("[dim]No streams recorded yet.[/dim]")
            return

        table = Table(title="Recorded Streams")
        table.add_column("Username", style="cyan")
        table.add_column("Events", justify="right")
        table.add_column("Sessions", justify="right")
        table.add_column("Last Day", style="dim")

        for subject in subjects:
            days = store.session_days(subject)
            table.add_row(
                Text(subject),
                str(store.count(subject)),
                f"{len(days)} sessions",
                days[0].isoformat() if days else "-",
            )
    except PersistenceError as exc:
        console.print(f"[bold red]failed to get usernames:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(table)


def show_cmd(
    ctx: typer.Context,
    username: str = typer.Argument(..., help="The username whose events are shown."),
    since: Optional[str] = typer.Option(
        None, "--since", help="Only events at or after this ISO-8601 time (UTC if naive)."
    ),
    until: Optional[str] = typer.Option(
        None, "--until", help="Only events at or before this ISO-8601 time (UTC if naive)."
    ),
    limit: int = typer.Option(50, "--limit", "-n", help="Show at most this many events."),
) -> None:
    """Show recorded events for a username, newest first."""
    start = _parse_time(since, "--since")
    end = _parse_time(until, "--until")
    store = open_store(get_state(ctx), console, must_exist=True)

    try:
        if start is None and end is None:
            events = store.events_for(username)
        else:
            events = store.events_between(
                username,
                start or datetime.min.replace(tzinfo=timezone.utc),
                end or datetime.max.replace(tzinfo=timezone.utc),
            )
    except PersistenceError as exc:
        console.print(f"[bold red]failed to read events:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    if not events:
        console.print(f"[dim]No events recorded for @{username}.[/dim]")
        return

    table = Table(title=f"@{username}: {len(events)} events")
    table.add_column("Time (UTC)", style="dim", no_wrap=True)
    table.add_column("Kind", justify="center")
    table.add_column("Content")

    for event in events[: max(limit, 0)]:
        style = _KIND_STYLES.get(event.kind, "")
        table.add_row(
            event.timestamp.strftime(TEXT_TIMESTAMP_FORMAT),
            f"[{style}]{event.kind.value}[/{style}]",
            Text(event.content),
        )
    console.print(table)
    if len(events) > limit:
        console.print(f"[dim]... and {len(events) - limit} more[/dim]")
