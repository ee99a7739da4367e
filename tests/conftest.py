"""Shared test fixtures for livelogger."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from livelogger.models.events import CanonicalEvent, EventKind
from livelogger.storage.event_store import EventStore

FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def store(tmp_dir: Path) -> EventStore:
    """Provide a fresh EventStore backed by a temp SQLite database."""
    return EventStore(tmp_dir / "events.db")


@pytest.fixture
def subject() -> str:
    """Provide a deterministic tracked username."""
    return "streamer"


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """A receipt-time clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


# ---------------------------------------------------------------------------
# Event factories — shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_event(subject: str) -> Callable[..., CanonicalEvent]:
    """Factory fixture: build a CanonicalEvent with sensible defaults."""

    def _factory(
        content: str = "alice: hi",
        kind: EventKind = EventKind.CHAT,
        timestamp: datetime = FIXED_NOW,
        **overrides: Any,
    ) -> CanonicalEvent:
        data: dict[str, Any] = {
            "kind": kind,
            "content": content,
            "timestamp": timestamp,
            "subject": subject,
        }
        data.update(overrides)
        return CanonicalEvent(**data)

    return _factory
