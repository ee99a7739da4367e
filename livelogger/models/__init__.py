"""livelogger data models — all Pydantic v2, all frozen (immutable)."""

from livelogger.models.events import SUMMARY_KEYS, CanonicalEvent, EventKind, StoredEvent
from livelogger.models.failures import SinkFailure
from livelogger.models.source import (
    RAW_EVENT_ADAPTER,
    ChatMessage,
    GiftMessage,
    LikeMessage,
    RawSourceEvent,
    UserAction,
    ViewerCount,
)

__all__ = [
    # events
    "EventKind",
    "CanonicalEvent",
    "StoredEvent",
    "SUMMARY_KEYS",
    # source
    "ChatMessage",
    "GiftMessage",
    "LikeMessage",
    "UserAction",
    "ViewerCount",
    "RawSourceEvent",
    "RAW_EVENT_ADAPTER",
    # failures
    "SinkFailure",
]
