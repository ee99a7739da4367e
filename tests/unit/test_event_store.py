"""Unit tests for EventStore — append, queries, cleanup and error wrapping."""

from __future__ import annotations

import sqlite3
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

from livelogger.models.events import EventKind
from livelogger.storage.event_store import EventStore, PersistenceError, format_timestamp

T0 = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestAppend:
    def test_append_assigns_increasing_ids(self, store: EventStore, make_event):
        first = store.append(make_event("a: 1"))
        second = store.append(make_event("a: 2"))
        assert second.id > first.id

    def test_append_round_trips_fields(self, store: EventStore, make_event, subject: str):
        store.append(make_event("bob sent rose (x3)", kind=EventKind.GIFT, timestamp=T0))
        (record,) = store.events_for(subject)
        assert record.subject == subject
        assert record.kind is EventKind.GIFT
        assert record.content == "bob sent rose (x3)"
        assert record.timestamp == T0

    def test_schema_columns(self, store: EventStore):
        with sqlite3.connect(store.db_path) as conn:
            columns = [row[1] for row in conn.execute("PRAGMA table_info(events)")]
        assert columns == ["id", "username", "type", "content", "timestamp"]

    def test_creates_parent_directories(self, tmp_dir: Path):
        store = EventStore(tmp_dir / "nested" / "dir" / "events.db")
        assert store.db_path.exists()

    def test_timestamps_stored_in_utc(self, store: EventStore, make_event, subject: str):
        local = datetime(2024, 3, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        store.append(make_event(timestamp=local))
        (record,) = store.events_for(subject)
        assert record.timestamp == T0
        assert record.timestamp.utcoffset() == timedelta(0)


class TestQueries:
    def test_events_for_newest_first(self, store: EventStore, make_event, subject: str):
        for minutes in (0, 10, 5):
            store.append(make_event(f"m: {minutes}", timestamp=T0 + timedelta(minutes=minutes)))
        contents = [r.content for r in store.events_for(subject)]
        assert contents == ["m: 10", "m: 5", "m: 0"]

    def test_equal_timestamps_newest_id_first(self, store: EventStore, make_event, subject: str):
        store.append(make_event("first"))
        store.append(make_event("second"))
        assert [r.content for r in store.events_for(subject)] == ["second", "first"]

    def test_events_for_filters_subject(self, store: EventStore, make_event, subject: str):
        store.append(make_event("mine"))
        store.append(make_event("theirs", subject="other"))
        assert [r.content for r in store.events_for(subject)] == ["mine"]
        assert store.events_for("nobody") == []

    def test_events_between_is_inclusive(self, store: EventStore, make_event, subject: str):
        for minutes in range(5):
            store.append(make_event(f"m: {minutes}", timestamp=T0 + timedelta(minutes=minutes)))
        records = store.events_between(
            subject, T0 + timedelta(minutes=1), T0 + timedelta(minutes=3)
        )
        assert [r.content for r in records] == ["m: 3", "m: 2", "m: 1"]

    def test_list_subjects_sorted_distinct(self, store: EventStore, make_event):
        for name in ("zed", "alice", "zed", "bob"):
            store.append(make_event(subject=name))
        assert store.list_subjects() == ["alice", "bob", "zed"]

    def test_list_subjects_empty(self, store: EventStore):
        assert store.list_subjects() == []

    def test_count(self, store: EventStore, make_event, subject: str):
        store.append(make_event())
        store.append(make_event())
        store.append(make_event(subject="other"))
        assert store.count(subject) == 2
        assert store.count() == 3

    def test_session_days(self, store: EventStore, make_event, subject: str):
        store.append(make_event(timestamp=T0))
        store.append(make_event(timestamp=T0 + timedelta(hours=1)))
        store.append(make_event(timestamp=T0 + timedelta(days=2)))
        assert store.session_days(subject) == [date(2024, 3, 3), date(2024, 3, 1)]


class TestCleanup:
    def test_delete_older_than_uses_strict_cutoff(self, store: EventStore, make_event, subject: str):
        store.append(make_event("old", timestamp=T0 - timedelta(days=1)))
        store.append(make_event("edge", timestamp=T0))
        store.append(make_event("new", timestamp=T0 + timedelta(days=1)))

        assert store.delete_older_than(T0) == 1
        assert sorted(r.content for r in store.events_for(subject)) == ["edge", "new"]

    def test_delete_is_idempotent(self, store: EventStore, make_event):
        store.append(make_event(timestamp=T0 - timedelta(days=40)))
        assert store.delete_older_than(T0) == 1
        assert store.delete_older_than(T0) == 0

    def test_delete_applies_to_all_subjects(self, store: EventStore, make_event):
        store.append(make_event(timestamp=T0 - timedelta(days=1)))
        store.append(make_event(subject="other", timestamp=T0 - timedelta(days=1)))
        assert store.delete_older_than(T0) == 2
        assert store.list_subjects() == []

    def test_purge_days(self, store: EventStore, make_event, subject: str):
        store.append(make_event("stale", timestamp=T0 - timedelta(days=31)))
        store.append(make_event("fresh", timestamp=T0 - timedelta(days=29)))
        assert store.purge_days(30, now=T0) == 1
        assert [r.content for r in store.events_for(subject)] == ["fresh"]

    def test_purge_zero_days_deletes_everything_before_now(self, store: EventStore, make_event):
        store.append(make_event(timestamp=T0 - timedelta(seconds=1)))
        assert store.purge_days(0, now=T0) == 1

    def test_purge_negative_days_rejected(self, store: EventStore):
        with pytest.raises(ValueError):
            store.purge_days(-1)


class TestErrors:
    def test_unopenable_path_raises_persistence_error(self, tmp_dir: Path):
        # A directory cannot be opened as a database file.
        target = tmp_dir / "is_a_dir"
        target.mkdir()
        with pytest.raises(PersistenceError):
            EventStore(target)

    def test_query_on_dropped_table_raises_persistence_error(self, store: EventStore):
        with sqlite3.connect(store.db_path) as conn:
            conn.execute("DROP TABLE events")
        with pytest.raises(PersistenceError):
            store.list_subjects()

    def test_format_timestamp_is_fixed_width(self):
        assert format_timestamp(T0) == "2024-03-01T12:00:00.000000+00:00"
        assert format_timestamp(T0.replace(tzinfo=None)) == "2024-03-01T12:00:00.000000+00:00"
