"""Unit tests for FailureReporter and SinkFailure."""

from __future__ import annotations

from livelogger.core.failure_reporter import FailureReporter
from livelogger.models.failures import SinkFailure


def _failure(make_event, message: str = "disk full") -> SinkFailure:
    return SinkFailure.from_exception("persistence", make_event(), OSError(message))


class TestFailureReporter:
    def test_starts_empty(self):
        reporter = FailureReporter()
        assert reporter.last is None
        assert reporter.count == 0

    def test_last_write_wins(self, make_event):
        reporter = FailureReporter()
        reporter.report(_failure(make_event, "first"))
        reporter.report(_failure(make_event, "second"))
        assert reporter.last.message == "second"
        assert reporter.count == 2

    def test_observers_are_notified(self, make_event):
        reporter = FailureReporter()
        seen: list[SinkFailure] = []
        reporter.subscribe(seen.append)
        reporter.subscribe(seen.append)
        failure = _failure(make_event)
        reporter.report(failure)
        assert seen == [failure]

    def test_observer_errors_are_contained(self, make_event):
        reporter = FailureReporter()
        seen: list[SinkFailure] = []

        def broken(_failure: SinkFailure) -> None:
            raise RuntimeError("observer bug")

        reporter.subscribe(broken)
        reporter.subscribe(seen.append)
        reporter.report(_failure(make_event))
        assert len(seen) == 1
        assert reporter.count == 1

    def test_clear(self, make_event):
        reporter = FailureReporter()
        reporter.report(_failure(make_event))
        reporter.clear()
        assert reporter.last is None
        assert reporter.count == 0


class TestSinkFailure:
    def test_from_exception(self, make_event):
        failure = _failure(make_event)
        assert failure.sink_name == "persistence"
        assert failure.event_kind == "chat"
        assert failure.event_content == "alice: hi"
        assert failure.error_type == "OSError"
        assert failure.message == "disk full"
        assert failure.occurred_at.tzinfo is not None

    def test_empty_message_falls_back_to_type(self, make_event):
        failure = SinkFailure.from_exception("display", make_event(), ValueError())
        assert failure.message == "ValueError"

    def test_describe(self, make_event):
        assert _failure(make_event).describe() == "persistence failed on chat event: disk full"
