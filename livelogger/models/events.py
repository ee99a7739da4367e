"""Canonical event models — the single record shape every sink receives.

Source events of every variant are normalized into a ``CanonicalEvent``.
Once normalized, the structured source payload is gone: ``content`` is
the already-formatted text that the display shows and the event log
stores verbatim.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventKind(str, Enum):
    """The canonical event kinds."""

    CHAT = "chat"
    GIFT = "gift"
    LIKE = "like"
    FOLLOW = "follow"
    SHARE = "share"
    STATS = "stats"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CanonicalEvent(BaseModel):
    """One normalized occurrence in the live stream.

    Frozen: the same instance is handed to every sink, so no sink can
    change what another sink sees.
    """

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    content: str = Field(min_length=1)
    timestamp: datetime
    subject: str = Field(min_length=1)
    quantity: int | None = None  # viewers / likes / gift repeats; display only

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return _as_utc(value)


class StoredEvent(BaseModel):
    """An event as recorded in the event log."""

    model_config = ConfigDict(frozen=True)

    id: int
    subject: str
    kind: EventKind
    content: str
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return _as_utc(value)


# Keys of the live summary shown next to the event feed.
SUMMARY_KEYS: tuple[str, ...] = ("viewers", "likes", "shares", "comments")
