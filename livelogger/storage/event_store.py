"""Durable event log backed by SQLite.

One row per canonical event, keyed by an auto-assigned monotonic id.
Timestamps are stored as fixed-width ISO-8601 UTC strings (always with
microseconds), so ordering and range comparisons on the text column
match chronological order.

Every ``sqlite3.Error`` is re-raised as ``PersistenceError``.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from livelogger.models.events import CanonicalEvent, EventKind, StoredEvent

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

_CREATE_EVENTS = """
CREATE TABLE IF NOT EXISTS events (
    id        INTEGER PRIMARY KEY AUTOINCREMENT,
    username  TEXT NOT NULL,
    type      TEXT NOT NULL,
    content   TEXT NOT NULL,
    timestamp TEXT NOT NULL
);
"""

_CREATE_IDX_USERNAME = """
CREATE INDEX IF NOT EXISTS idx_username ON events(username);
"""

_CREATE_IDX_TIMESTAMP = """
CREATE INDEX IF NOT EXISTS idx_timestamp ON events(timestamp);
"""

_SELECT_COLUMNS = "SELECT id, username, type, content, timestamp FROM events"


class PersistenceError(RuntimeError):
    """Raised when the event log cannot be written, read or exported."""


def format_timestamp(value: datetime) -> str:
    """Render *value* in the fixed-width UTC form used in the table."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


class EventStore:
    """Append/query/delete access to the event log.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.  Created (with parent
        directories) if it does not exist.
    """

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(
                f"Cannot create database directory {self._db_path.parent}: {exc}"
            ) from exc
        self._init_schema()

    @property
    def db_path(self) -> Path:
        return self._db_path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(str(self._db_path))
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot open event log {self._db_path}: {exc}") from exc
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise PersistenceError(f"Event log error: {exc}") from exc
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(_CREATE_EVENTS)
            conn.execute(_CREATE_IDX_USERNAME)
            conn.execute(_CREATE_IDX_TIMESTAMP)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def append(self, event: CanonicalEvent) -> StoredEvent:
        """Append an event; returns it with its storage-assigned id."""
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO events (username, type, content, timestamp) VALUES (?, ?, ?, ?)",
                (
                    event.subject,
                    event.kind.value,
                    event.content,
                    format_timestamp(event.timestamp),
                ),
            )
            row_id = cursor.lastrowid
        return StoredEvent(
            id=row_id,
            subject=event.subject,
            kind=event.kind,
            content=event.content,
            timestamp=event.timestamp,
        )

    def append_record(self, record: StoredEvent) -> StoredEvent:
        """Append a previously stored record (new id assigned)."""
        return self.append(
            CanonicalEvent(
                kind=record.kind,
                content=record.content,
                timestamp=record.timestamp,
                subject=record.subject,
            )
        )

    def delete_older_than(self, cutoff: datetime) -> int:
        """Delete every event with ``timestamp < cutoff``; returns the count."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM events WHERE timestamp < ?", (format_timestamp(cutoff),)
            )
            removed = cursor.rowcount
        logger.info("Deleted %d events older than %s", removed, cutoff.isoformat())
        return removed

    def purge_days(self, days: int, now: datetime | None = None) -> int:
        """Delete events older than *days* days before *now*."""
        if days < 0:
            raise ValueError(f"days must be >= 0, got {days}")
        now = now or datetime.now(timezone.utc)
        return self.delete_older_than(now - timedelta(days=days))

    # ------------------------------------------------------------------
    # Query methods (read-only)
    # ------------------------------------------------------------------

    def list_subjects(self) -> list[str]:
        """Return every distinct subject ever recorded, sorted."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT DISTINCT username FROM events ORDER BY username"
            ).fetchall()
        return [row[0] for row in rows]

    def events_for(self, subject: str) -> list[StoredEvent]:
        """Return all events for *subject*, newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                f"{_SELECT_COLUMNS} WHERE username = ? ORDER BY timestamp DESC, id DESC",
                (subject,),
            ).fetchall()
        return [self._row_to_event(row) for row in rows]

    def events_between(
        self, subject: str, start: datetime, end: datetime
    ) -> list[StoredEvent]:
        """Return events for *subject* with ``start <= timestamp <= end``, newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                f"{_SELECT_COLUMNS} WHERE username = ? AND timestamp BETWEEN ? AND ? "
                "ORDER BY timestamp DESC, id DESC",
                (subject, format_timestamp(start), format_timestamp(end)),
            ).fetchall()
        return [self._row_to_event(row) for row in rows]

    def count(self, subject: str | None = None) -> int:
        with self._connect() as conn:
            if subject is None:
                row = conn.execute("SELECT COUNT(*) FROM events").fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) FROM events WHERE username = ?", (subject,)
                ).fetchone()
        return row[0] if row else 0

    def session_days(self, subject: str) -> list[date]:
        """Distinct UTC calendar days on which *subject* has events, newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT DISTINCT substr(timestamp, 1, 10) AS day FROM events "
                "WHERE username = ? ORDER BY day DESC",
                (subject,),
            ).fetchall()
        return [date.fromisoformat(row[0]) for row in rows]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_event(row: tuple) -> StoredEvent:
        """Convert a SQLite row tuple to a StoredEvent."""
        row_id, username, kind, content, timestamp = row
        return StoredEvent(
            id=row_id,
            subject=username,
            kind=EventKind(kind),
            content=content,
            timestamp=datetime.fromisoformat(timestamp),
        )
