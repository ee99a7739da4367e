"""``livelogger config`` — show or update the JSON configuration file.

``livelogger config`` prints the effective configuration.
``livelogger config set KEY VALUE`` validates and stores one value.
"""

from __future__ import annotations

import json
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from livelogger.cli.commands._context import get_state
from livelogger.config import (
    SETTABLE_KEYS,
    ConfigError,
    default_config_path,
    load_settings,
    save_settings,
    set_config_value,
)

console = Console()


def config_cmd(
    ctx: typer.Context,
    action: Optional[str] = typer.Argument(None, help="'set' to change a value."),
    key: Optional[str] = typer.Argument(None, help="Configuration key."),
    value: Optional[str] = typer.Argument(None, help="New value ('none' clears optional keys)."),
) -> None:
    """View and modify the application configuration."""
    state = get_state(ctx)
    config_path = state.config_path or default_config_path()

    if action is None:
        console.print_json(json.dumps(state.settings.model_dump(mode="json")))
        return

    if action != "set":
        console.print(f"[bold red]unknown subcommand:[/bold red] {action}")
        raise typer.Exit(code=1)

    if key is None or value is None:
        console.print("usage: livelogger config set <key> <value>")
        console.print(f"[dim]keys: {', '.join(SETTABLE_KEYS)}[/dim]")
        raise typer.Exit(code=1)

    try:
        # Command-line overrides are never persisted.
        updated = set_config_value(load_settings(config_path), key, value)
    except ConfigError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        raise typer.Exit(code=1) from exc

    try:
        save_settings(updated, config_path)
    except OSError as exc:
        console.print(f"[bold red]failed to write config file:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    state.settings = updated
    console.print("Configuration updated successfully")
