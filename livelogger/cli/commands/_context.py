"""Shared command context — settings resolved once by the app callback."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from livelogger.config import ConfigError, LoggerSettings, load_settings
from livelogger.storage.event_store import EventStore, PersistenceError


class CliState:
    """Per-invocation state stored on ``typer.Context.obj``."""

    def __init__(self, settings: LoggerSettings, config_path: Path | None = None) -> None:
        self.settings = settings
        self.config_path = config_path


def get_state(ctx: typer.Context) -> CliState:
    """Return the state set by the app callback (or build a default one)."""
    root = ctx.find_root()
    if not isinstance(root.obj, CliState):
        try:
            root.obj = CliState(load_settings())
        except ConfigError as exc:
            raise typer.BadParameter(str(exc)) from exc
    return root.obj


def open_store(state: CliState, console: Console, *, must_exist: bool = False) -> EventStore:
    """Open the configured event store, exiting with code 1 on failure."""
    db_path = state.settings.resolved_database_path
    if must_exist and not db_path.exists():
        console.print(f"[bold red]Database not found:[/bold red] {db_path}")
        console.print("[dim]Record a stream first with: livelogger log USERNAME[/dim]")
        raise typer.Exit(code=1)
    try:
        return EventStore(db_path)
    except PersistenceError as exc:
        console.print(f"[bold red]failed to initialize database:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
