"""Rich terminal renderer for the live event view.

Turns a ``LiveView`` into a Rich panel: title, the stats table, the
newest events and, when set, the error line.  ``run`` is the redraw
loop; it re-renders only when the view's revision has moved and never
feeds anything back into the pipeline.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from rich.console import Console, Group
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from livelogger.monitor.view import LiveView


# ---------------------------------------------------------------------------
# Summary key -> (label, style)
# ---------------------------------------------------------------------------

_SUMMARY_ROWS: tuple[tuple[str, str, str], ...] = (
    ("viewers", "Viewers", "bold cyan"),
    ("likes", "Likes", "bold magenta"),
    ("shares", "Shares", "bold green"),
    ("comments", "Comments", "bold yellow"),
)


class LiveViewRenderer:
    """Renders a ``LiveView`` as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    visible_entries:
        How many of the newest events the feed shows.
    """

    def __init__(self, console: Console | None = None, visible_entries: int = 20) -> None:
        self.console = console or Console()
        self.visible_entries = visible_entries

    # ------------------------------------------------------------------
    # Single render
    # ------------------------------------------------------------------

    def render(self, view: LiveView) -> Panel:
        """Render the view as a Panel usable in ``rich.live.Live``."""
        feed_lines = view.tail(self.visible_entries)
        feed = (
            Text("\n".join(feed_lines))
            if feed_lines
            else Text("Waiting for events...", style="dim")
        )

        parts: list = [self._build_stats_table(view), Text("")]
        parts.append(
            Panel(
                feed,
                title=f"Events ({view.total_appended})",
                border_style="magenta",
                padding=(0, 1),
            )
        )
        if view.error:
            parts.append(Text(f"Error: {view.error}", style="bold red"))

        return Panel(
            Group(*parts),
            title=f"[bold]Live Stream: @{escape(view.subject)}[/bold]",
            border_style="blue",
            padding=(1, 2),
        )

    def _build_stats_table(self, view: LiveView) -> Table:
        table = Table(show_header=True, header_style="bold cyan", expand=False)
        table.add_column("Metric", width=20)
        table.add_column("Value", width=20, justify="right")

        summary = view.summary
        for key, label, style in _SUMMARY_ROWS:
            table.add_row(label, f"[{style}]{summary.get(key, 0)}[/{style}]")
        return table

    # ------------------------------------------------------------------
    # Continuous live rendering
    # ------------------------------------------------------------------

    async def run(
        self,
        view: LiveView,
        stop: asyncio.Event,
        *,
        refresh_hz: float = 4.0,
    ) -> None:
        """Redraw the view until *stop* is set.

        Runs as its own task on the session's event loop, next to the
        consumer task that mutates the view.
        """
        interval = 1.0 / max(refresh_hz, 0.1)
        last_revision = -1

        with Live(
            self.render(view),
            console=self.console,
            refresh_per_second=refresh_hz,
            transient=False,
        ) as live:
            while not stop.is_set():
                if view.revision != last_revision:
                    last_revision = view.revision
                    live.update(self.render(view))
                try:
                    await asyncio.wait_for(stop.wait(), timeout=interval)
                except asyncio.TimeoutError:
                    pass
            # Final frame on exit
            live.update(self.render(view))
