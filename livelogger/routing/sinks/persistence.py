"""Persistence sink — appends every canonical event to the event log."""

from __future__ import annotations

import logging

from livelogger.models.events import CanonicalEvent
from livelogger.storage.event_store import EventStore, PersistenceError

logger = logging.getLogger(__name__)


class PersistenceSink:
    """Writes events to an ``EventStore``.

    Any failure surfaces as ``PersistenceError``; the dispatcher reports
    it and keeps going.
    """

    def __init__(self, store: EventStore) -> None:
        self._store = store
        self._written = 0

    @property
    def sink_name(self) -> str:
        return "persistence"

    @property
    def written(self) -> int:
        """Number of events appended by this sink."""
        return self._written

    def handle(self, event: CanonicalEvent) -> None:
        try:
            stored = self._store.append(event)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError(f"failed to save event: {exc}") from exc
        self._written += 1
        logger.debug("PersistenceSink: stored event %d (%s)", stored.id, event.kind.value)
