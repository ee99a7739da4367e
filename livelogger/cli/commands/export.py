"""``livelogger export USERNAME`` — export a stream's events to a file."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from livelogger.cli.commands._context import get_state, open_store
from livelogger.storage.event_store import PersistenceError
from livelogger.storage.export import EXPORTERS

console = Console()


class ExportFormat(str, Enum):
    JSON = "json"
    TXT = "txt"
    DB = "db"


def export_cmd(
    ctx: typer.Context,
    username: str = typer.Argument(..., help="The username whose events are exported."),
    fmt: ExportFormat = typer.Option(
        ExportFormat.JSON,
        "--format",
        "-F",
        case_sensitive=False,
        help="Export format: json records, txt lines, or a db copy.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file (default: <username>.<format> in the current directory).",
    ),
) -> None:
    """Export all recorded events of a username."""
    store = open_store(get_state(ctx), console, must_exist=True)
    target = output or Path(f"{username}.{fmt.value}")

    try:
        count = EXPORTERS[fmt.value](store, username, target)
    except PersistenceError as exc:
        console.print(f"[bold red]failed to export events:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"Exported [bold]{count}[/bold] events for @{username} to {target}")
