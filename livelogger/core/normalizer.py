"""Event normalizer — maps raw source variants onto ``CanonicalEvent``.

One function per source variant, looked up by type.  Chat and gift
events keep the source's own timestamp; every other kind is stamped with
the local receipt time, since the source does not carry one for them.
A source timestamp outside the datetime range (e.g. milliseconds) falls
back to the receipt time as well.

Variants without a mapping (and user actions other than follow/share)
normalize to ``None``: they are skipped, not treated as errors.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from livelogger.models.events import CanonicalEvent, EventKind
from livelogger.models.source import (
    USER_ACTION_FOLLOW,
    USER_ACTION_SHARE,
    ChatMessage,
    GiftMessage,
    LikeMessage,
    UserAction,
    ViewerCount,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _from_unix(ts: int) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


class EventNormalizer:
    """Converts raw source events for one subject into canonical events.

    Parameters
    ----------
    subject:
        The username whose stream is being tracked.  Stamped on every
        canonical event.
    clock:
        Returns the local receipt time for kinds without a source
        timestamp.  Defaults to ``utc_now``.
    """

    def __init__(self, subject: str, clock: Clock | None = None) -> None:
        self._subject = subject
        self._clock = clock or utc_now
        self._handlers: dict[type, Callable[[Any], CanonicalEvent | None]] = {
            ChatMessage: self._chat,
            GiftMessage: self._gift,
            LikeMessage: self._like,
            UserAction: self._user_action,
            ViewerCount: self._viewers,
        }

    @property
    def subject(self) -> str:
        return self._subject

    def normalize(self, raw: object) -> CanonicalEvent | None:
        """Return the canonical event for *raw*, or ``None`` to skip it."""
        handler = self._handlers.get(type(raw))
        if handler is None:
            logger.debug("Skipping unrecognized source event %s", type(raw).__name__)
            return None
        return handler(raw)

    # ------------------------------------------------------------------
    # Per-variant mapping
    # ------------------------------------------------------------------

    def _source_time(self, ts: int) -> datetime:
        """The source's unix time, or receipt time when it is out of range."""
        try:
            return _from_unix(ts)
        except (OverflowError, OSError, ValueError):
            logger.warning("Source timestamp %d out of range; using receipt time", ts)
            return self._clock()

    def _event(
        self,
        kind: EventKind,
        content: str,
        timestamp: datetime,
        quantity: int | None = None,
    ) -> CanonicalEvent:
        return CanonicalEvent(
            kind=kind,
            content=content,
            timestamp=timestamp,
            subject=self._subject,
            quantity=quantity,
        )

    def _chat(self, raw: ChatMessage) -> CanonicalEvent:
        event = self._event(
            EventKind.CHAT, f"{raw.nickname}: {raw.text}", self._source_time(raw.timestamp)
        )
        logger.debug("Chat message: %s", event.content)
        return event

    def _gift(self, raw: GiftMessage) -> CanonicalEvent:
        event = self._event(
            EventKind.GIFT,
            f"{raw.nickname} sent {raw.gift_name} (x{raw.repeat_count})",
            self._source_time(raw.timestamp),
            quantity=raw.repeat_count,
        )
        logger.info("Gift received: %s", event.content)
        return event

    def _like(self, raw: LikeMessage) -> CanonicalEvent:
        event = self._event(
            EventKind.LIKE,
            f"{raw.nickname} sent {raw.like_count} likes",
            self._clock(),
            quantity=raw.like_count,
        )
        logger.debug("Likes received: %s", event.content)
        return event

    def _user_action(self, raw: UserAction) -> CanonicalEvent | None:
        if raw.action == USER_ACTION_FOLLOW:
            event = self._event(
                EventKind.FOLLOW, f"{raw.nickname} followed the streamer", self._clock()
            )
            logger.info("New follower: %s", event.content)
            return event
        if raw.action == USER_ACTION_SHARE:
            event = self._event(
                EventKind.SHARE, f"{raw.nickname} shared the stream", self._clock()
            )
            logger.info("Stream shared: %s", event.content)
            return event
        logger.debug("Ignoring user action %r from %s", raw.action, raw.nickname)
        return None

    def _viewers(self, raw: ViewerCount) -> CanonicalEvent:
        event = self._event(
            EventKind.STATS,
            f"Viewer count: {raw.viewers}",
            self._clock(),
            quantity=raw.viewers,
        )
        logger.debug("Room stats updated: %s", event.content)
        return event


def normalize(
    raw: object, subject: str, clock: Clock | None = None
) -> CanonicalEvent | None:
    """Normalize a single raw event without keeping a normalizer around."""
    return EventNormalizer(subject, clock=clock).normalize(raw)
