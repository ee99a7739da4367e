"""Main Typer application — imports and registers all CLI commands.

Entry point: ``livelogger`` (configured via pyproject.toml scripts).

Commands: log, demo, list, show, clean, export, config.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from livelogger import __version__
from livelogger.cli.commands._context import CliState
from livelogger.cli.commands.browse import list_cmd, show_cmd
from livelogger.cli.commands.clean import clean_cmd
from livelogger.cli.commands.config_cmd import config_cmd
from livelogger.cli.commands.demo import demo_cmd
from livelogger.cli.commands.export import export_cmd
from livelogger.cli.commands.log_cmd import log_cmd
from livelogger.config import ConfigError, load_settings

app = typer.Typer(
    name="livelogger",
    help="livelogger: record live-stream events with a live terminal view.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="log", help="Log a live stream (chat, gifts, likes, ...).")(log_cmd)
app.command(name="demo", help="Run the pipeline on sample events.")(demo_cmd)
app.command(name="list", help="List all logged live streams.")(list_cmd)
app.command(name="show", help="Show logged events for a username.")(show_cmd)
app.command(name="clean", help="Clean old logs.")(clean_cmd)
app.command(name="export", help="Export logged events (json, txt, db).")(export_cmd)
app.command(name="config", help="Manage configuration.")(config_cmd)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"livelogger {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    db: Optional[Path] = typer.Option(
        None, "--db", "-d", help="Path to the event database file."
    ),
    debug: bool = typer.Option(False, "--debug", "-v", help="Enable debug mode."),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to the JSON config file."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Resolve settings once for every subcommand."""
    try:
        settings = load_settings(
            config,
            database_path=db,
            debug_mode=True if debug else None,
        )
    except ConfigError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    ctx.obj = CliState(settings, config)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
