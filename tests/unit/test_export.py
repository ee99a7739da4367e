"""Unit tests for the JSON, text and SQLite exports."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from livelogger.models.events import EventKind
from livelogger.storage.event_store import EventStore, PersistenceError
from livelogger.storage.export import (
    EXPORTERS,
    export_json,
    export_sqlite,
    export_text,
    format_text_line,
    load_json_export,
)

T0 = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def populated(store: EventStore, make_event) -> EventStore:
    store.append(make_event("alice: hi", timestamp=T0))
    store.append(make_event("bob sent rose (x3)", kind=EventKind.GIFT, timestamp=T0 + timedelta(seconds=1)))
    store.append(make_event("carol followed the streamer", kind=EventKind.FOLLOW, timestamp=T0 + timedelta(seconds=1)))
    store.append(make_event("someone else", subject="other", timestamp=T0))
    return store


class TestJsonExport:
    def test_records_equal_listing(self, populated: EventStore, subject: str, tmp_dir: Path):
        path = tmp_dir / "out.json"
        assert export_json(populated, subject, path) == 3
        assert load_json_export(path) == populated.events_for(subject)

    def test_field_names(self, populated: EventStore, subject: str, tmp_dir: Path):
        path = tmp_dir / "out.json"
        export_json(populated, subject, path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert set(data[0]) == {"id", "subject", "kind", "content", "timestamp"}
        assert data[-1]["content"] == "alice: hi"

    def test_empty_subject_writes_empty_array(self, store: EventStore, tmp_dir: Path):
        path = tmp_dir / "empty.json"
        assert export_json(store, "nobody", path) == 0
        assert json.loads(path.read_text(encoding="utf-8")) == []

    def test_load_missing_file(self, tmp_dir: Path):
        with pytest.raises(PersistenceError):
            load_json_export(tmp_dir / "missing.json")

    def test_load_malformed_file(self, tmp_dir: Path):
        path = tmp_dir / "bad.json"
        path.write_text('[{"id": "x"}]', encoding="utf-8")
        with pytest.raises(PersistenceError):
            load_json_export(path)


class TestTextExport:
    def test_one_line_per_record(self, populated: EventStore, subject: str, tmp_dir: Path):
        path = tmp_dir / "out.txt"
        assert export_text(populated, subject, path) == 3
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines == [
            "[2024-03-01 12:00:01] follow: carol followed the streamer",
            "[2024-03-01 12:00:01] gift: bob sent rose (x3)",
            "[2024-03-01 12:00:00] chat: alice: hi",
        ]

    def test_format_text_line(self, populated: EventStore, subject: str):
        record = populated.events_for(subject)[-1]
        assert format_text_line(record) == "[2024-03-01 12:00:00] chat: alice: hi"


class TestSqliteExport:
    def test_copy_keeps_listing(self, populated: EventStore, subject: str, tmp_dir: Path):
        path = tmp_dir / "copy.db"
        assert export_sqlite(populated, subject, path) == 3

        copy = EventStore(path)
        original = [(r.kind, r.content, r.timestamp) for r in populated.events_for(subject)]
        copied = [(r.kind, r.content, r.timestamp) for r in copy.events_for(subject)]
        assert copied == original
        assert copy.list_subjects() == [subject]


class TestExporters:
    def test_registry(self):
        assert set(EXPORTERS) == {"json", "txt", "db"}

    def test_unwritable_target(self, populated: EventStore, subject: str, tmp_dir: Path):
        blocker = tmp_dir / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(PersistenceError):
            export_json(populated, subject, blocker / "out.json")
