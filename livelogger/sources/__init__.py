"""Live-stream sources — the producers of raw source events.

A source is the external collaborator that connects to the live stream
and decodes network data into typed raw events.  The pipeline only
depends on the ``LiveSource`` protocol: ``subscribe(subject)`` returns
an async generator of raw events, ``close()`` ends the subscription.

Bundled implementations:

jsonl
    ``JsonLinesSource`` reads already-decoded events, one JSON object per
    line, from a file or a text stream (e.g. a bridge process on stdin).
scripted
    ``ScriptedSource`` replays a fixed list of events; used by the demo
    command and the tests.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Protocol, runtime_checkable

from livelogger.models.source import RawSourceEvent


class SourceError(RuntimeError):
    """Raised when a subscription cannot be established or is lost."""


@runtime_checkable
class LiveSource(Protocol):
    """Protocol every event producer implements."""

    def subscribe(self, subject: str) -> AsyncGenerator[RawSourceEvent, None]:
        """Start streaming raw events for *subject*.

        Raises ``SourceError`` (at subscription or while iterating) when
        the stream cannot be established or maintained.
        """
        ...

    async def close(self) -> None:
        """Unsubscribe; the iterator returned by ``subscribe`` ends."""
        ...
