"""Exports of a subject's event log: JSON records, flat text, SQLite copy.

Every export uses the same order as ``EventStore.events_for`` (newest
first), so an export is a snapshot of that listing.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from livelogger.models.events import StoredEvent
from livelogger.storage.event_store import EventStore, PersistenceError

logger = logging.getLogger(__name__)

TEXT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_RECORDS_ADAPTER: TypeAdapter[list[StoredEvent]] = TypeAdapter(list[StoredEvent])


def format_text_line(record: StoredEvent) -> str:
    """``[YYYY-MM-DD HH:MM:SS] <kind>: <content>`` with the time in UTC."""
    stamp = record.timestamp.strftime(TEXT_TIMESTAMP_FORMAT)
    return f"[{stamp}] {record.kind.value}: {record.content}"


def _write(path: Path, data: bytes) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as exc:
        raise PersistenceError(f"Cannot write export {path}: {exc}") from exc


def export_json(store: EventStore, subject: str, path: Path | str) -> int:
    """Write all of *subject*'s records as a JSON array.  Returns the count."""
    path = Path(path)
    records = store.events_for(subject)
    _write(path, _RECORDS_ADAPTER.dump_json(records, indent=2))
    logger.info("Exported %d %s events to %s", len(records), subject, path)
    return len(records)


def load_json_export(path: Path | str) -> list[StoredEvent]:
    """Read a file written by ``export_json`` back into records."""
    path = Path(path)
    try:
        return _RECORDS_ADAPTER.validate_json(path.read_bytes())
    except OSError as exc:
        raise PersistenceError(f"Cannot read export {path}: {exc}") from exc
    except ValidationError as exc:
        raise PersistenceError(f"Malformed export {path}: {exc}") from exc


def export_text(store: EventStore, subject: str, path: Path | str) -> int:
    """Write one ``format_text_line`` per record.  Returns the count."""
    path = Path(path)
    records = store.events_for(subject)
    text = "".join(f"{format_text_line(record)}\n" for record in records)
    _write(path, text.encode("utf-8"))
    logger.info("Exported %d %s events to %s", len(records), subject, path)
    return len(records)


def export_sqlite(store: EventStore, subject: str, path: Path | str) -> int:
    """Copy *subject*'s records into a fresh event database at *path*."""
    path = Path(path)
    target = EventStore(path)
    records = store.events_for(subject)
    # Oldest first so the copy assigns ids in the same order.
    for record in reversed(records):
        target.append_record(record)
    logger.info("Exported %d %s events to %s", len(records), subject, path)
    return len(records)


EXPORTERS = {
    "json": export_json,
    "txt": export_text,
    "db": export_sqlite,
}
