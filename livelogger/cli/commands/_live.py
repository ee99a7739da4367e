"""Runs a session next to the live display's redraw task, and reports what it saved."""

from __future__ import annotations

import asyncio

from livelogger.core.session import LiveSession, SessionStats
from livelogger.monitor.renderer import LiveViewRenderer
from livelogger.monitor.view import LiveView
from livelogger.routing.sinks.persistence import PersistenceSink


async def run_with_display(
    session: LiveSession,
    view: LiveView,
    renderer: LiveViewRenderer,
    *,
    refresh_hz: float,
) -> SessionStats:
    """Run *session* while *renderer* redraws *view* on its own task."""
    stop = asyncio.Event()
    redraw = asyncio.create_task(
        renderer.run(view, stop, refresh_hz=refresh_hz), name="redraw"
    )
    try:
        return await session.run()
    finally:
        stop.set()
        await redraw


def saved_count(session: LiveSession) -> int:
    """Events the session's persistence sink actually wrote."""
    return sum(
        sink.written
        for sink in session.dispatcher.registered_sinks
        if isinstance(sink, PersistenceSink)
    )
