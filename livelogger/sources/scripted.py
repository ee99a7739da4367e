"""Scripted source — replays a fixed list of raw events."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, Iterable

from livelogger.models.source import (
    ChatMessage,
    GiftMessage,
    LikeMessage,
    RawSourceEvent,
    UserAction,
    ViewerCount,
)
from livelogger.sources import SourceError


class ScriptedSource:
    """Yields the given events in order, then ends the stream.

    Parameters
    ----------
    events:
        Raw events to emit.
    delay:
        Seconds to wait before each event.
    fail_on_subscribe:
        If set, ``subscribe`` raises ``SourceError`` with this message.
    fail_after:
        If set, the stream raises ``SourceError`` after this many events.
    """

    def __init__(
        self,
        events: Iterable[RawSourceEvent],
        *,
        delay: float = 0.0,
        fail_on_subscribe: str | None = None,
        fail_after: int | None = None,
    ) -> None:
        self._events = list(events)
        self._delay = delay
        self._fail_on_subscribe = fail_on_subscribe
        self._fail_after = fail_after
        self._closed = False
        self.emitted = 0

    async def subscribe(self, subject: str) -> AsyncGenerator[RawSourceEvent, None]:
        if self._fail_on_subscribe is not None:
            raise SourceError(self._fail_on_subscribe)
        for event in self._events:
            if self._closed:
                return
            if self._fail_after is not None and self.emitted >= self._fail_after:
                raise SourceError(f"Connection to {subject} lost")
            if self._delay:
                await asyncio.sleep(self._delay)
            else:
                await asyncio.sleep(0)
            if self._closed:
                return
            self.emitted += 1
            yield event

    async def close(self) -> None:
        self._closed = True


def sample_events(start_ts: int = 1_700_000_000) -> list[RawSourceEvent]:
    """A short, varied stream used by ``livelogger demo``."""
    return [
        ViewerCount(viewers=118),
        ChatMessage(nickname="alice", text="hi everyone!", timestamp=start_ts),
        LikeMessage(nickname="carol", like_count=15),
        GiftMessage(nickname="bob", gift_name="Rose", repeat_count=3, timestamp=start_ts + 2),
        UserAction(nickname="dave", action="follow"),
        ChatMessage(nickname="erin", text="what game is this?", timestamp=start_ts + 4),
        UserAction(nickname="frank", action="join"),
        UserAction(nickname="grace", action="share"),
        ViewerCount(viewers=131),
        LikeMessage(nickname="alice", like_count=30),
        GiftMessage(nickname="heidi", gift_name="Galaxy", repeat_count=1, timestamp=start_ts + 7),
        ChatMessage(nickname="bob", text="gg", timestamp=start_ts + 9),
    ]
