"""``livelogger demo`` — run a session on a scripted sample stream.

Plays a short, varied sequence of raw events through the full pipeline
with the live display, recording into the configured database (or the
one given with ``--db``).
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel

from livelogger.cli.commands._context import get_state, open_store
from livelogger.cli.commands._live import run_with_display
from livelogger.core.session import LiveSession
from livelogger.logging_config import configure_logging
from livelogger.monitor.renderer import LiveViewRenderer
from livelogger.monitor.view import LiveView
from livelogger.sources.scripted import ScriptedSource, sample_events

console = Console()


def demo_cmd(
    ctx: typer.Context,
    username: str = typer.Argument(
        "demo_streamer",
        help="Subject name the demo events are recorded under.",
    ),
    delay: float = typer.Option(
        0.3,
        "--delay",
        help="Delay in seconds between events for visual effect.",
    ),
) -> None:
    """Run the pipeline on sample events."""
    state = get_state(ctx)
    configure_logging(state.settings, console)
    store = open_store(state, console)

    console.print(
        Panel(
            "[bold]livelogger demo[/bold]\n\n"
            "Streaming sample chat, gift, like, follow, share and viewer events\n"
            f"for [cyan]@{username}[/cyan] into {store.db_path}.",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    view = LiveView(username)
    session = LiveSession.create(
        username, ScriptedSource(sample_events(), delay=delay), store, view
    )
    renderer = LiveViewRenderer(console=console)
    stats = asyncio.run(run_with_display(session, view, renderer, refresh_hz=8.0))

    console.print(
        f"[bold green]Demo complete:[/bold green] {stats.dispatched} events dispatched, "
        f"{stats.skipped} skipped."
    )
