"""Unit tests for LiveView, DisplaySink and LiveViewRenderer."""

from __future__ import annotations

import asyncio

import pytest
from rich.console import Console
from rich.panel import Panel

from livelogger.models.events import EventKind
from livelogger.monitor.renderer import LiveViewRenderer
from livelogger.monitor.sink import DisplaySink
from livelogger.monitor.view import LiveView


def _render_text(renderer: LiveViewRenderer, view: LiveView) -> str:
    console = Console(record=True, width=100, force_terminal=False)
    console.print(renderer.render(view))
    return console.export_text()


# ---------------------------------------------------------------------------
# Test: LiveView
# ---------------------------------------------------------------------------


class TestLiveView:
    def test_append_keeps_order(self):
        view = LiveView("s")
        for text in ("a", "b", "c"):
            view.append(text)
        assert view.entries == ["a", "b", "c"]
        assert view.total_appended == 3

    def test_bounded_view_evicts_oldest(self):
        view = LiveView("s", max_entries=2)
        for text in ("a", "b", "c"):
            view.append(text)
        assert view.entries == ["b", "c"]
        assert view.total_appended == 3

    def test_invalid_max_entries(self):
        with pytest.raises(ValueError):
            LiveView("s", max_entries=0)

    def test_tail(self):
        view = LiveView("s")
        for i in range(5):
            view.append(str(i))
        assert view.tail(2) == ["3", "4"]
        assert view.tail(0) == []

    def test_summary_starts_at_zero(self):
        assert LiveView("s").summary == {"viewers": 0, "likes": 0, "shares": 0, "comments": 0}

    def test_update_summary_rejects_unknown_keys(self):
        with pytest.raises(KeyError):
            LiveView("s").update_summary({"gifts": 1})

    def test_summary_is_a_copy(self):
        view = LiveView("s")
        view.summary["viewers"] = 99
        assert view.summary["viewers"] == 0

    def test_revision_moves_on_every_change(self):
        view = LiveView("s")
        view.append("a")
        view.update_summary({"likes": 1})
        view.set_error("boom")
        assert view.revision == 3
        assert view.error == "boom"


# ---------------------------------------------------------------------------
# Test: DisplaySink
# ---------------------------------------------------------------------------


class TestDisplaySink:
    def test_appends_content(self, make_event):
        view = LiveView("s")
        sink = DisplaySink(view)
        sink.handle(make_event("alice: hi"))
        sink.handle(make_event("bob sent rose (x3)", kind=EventKind.GIFT, quantity=3))
        assert sink.sink_name == "display"
        assert view.entries == ["alice: hi", "bob sent rose (x3)"]

    def test_summary_derivation(self, make_event):
        view = LiveView("s")
        sink = DisplaySink(view)
        sink.handle(make_event("Viewer count: 10", kind=EventKind.STATS, quantity=10))
        sink.handle(make_event("Viewer count: 12", kind=EventKind.STATS, quantity=12))
        sink.handle(make_event("a sent 5 likes", kind=EventKind.LIKE, quantity=5))
        sink.handle(make_event("b sent 7 likes", kind=EventKind.LIKE, quantity=7))
        sink.handle(make_event("c shared the stream", kind=EventKind.SHARE))
        sink.handle(make_event("d: hello"))
        sink.handle(make_event("e: again"))

        assert view.summary == {"viewers": 12, "likes": 12, "shares": 1, "comments": 2}

    def test_gift_and_follow_leave_summary_alone(self, make_event):
        view = LiveView("s")
        sink = DisplaySink(view)
        sink.handle(make_event("b sent rose (x1)", kind=EventKind.GIFT, quantity=1))
        sink.handle(make_event("d followed the streamer", kind=EventKind.FOLLOW))
        assert view.summary == {"viewers": 0, "likes": 0, "shares": 0, "comments": 0}
        assert view.revision == 2


# ---------------------------------------------------------------------------
# Test: LiveViewRenderer
# ---------------------------------------------------------------------------


class TestLiveViewRenderer:
    def test_render_returns_panel(self):
        assert isinstance(LiveViewRenderer().render(LiveView("s")), Panel)

    def test_render_empty_view(self):
        text = _render_text(LiveViewRenderer(), LiveView("streamer"))
        assert "Live Stream: @streamer" in text
        assert "Waiting for events..." in text
        assert "Viewers" in text

    def test_render_feed_summary_and_error(self):
        view = LiveView("streamer")
        view.append("alice: hi")
        view.update_summary({"viewers": 118, "comments": 1})
        view.set_error("failed to save event: disk full")

        text = _render_text(LiveViewRenderer(), view)
        assert "alice: hi" in text
        assert "118" in text
        assert "Events (1)" in text
        assert "Error: failed to save event: disk full" in text

    def test_markup_in_content_is_shown_literally(self):
        view = LiveView("[red]name")
        view.append("[bold]x: [/bold] hi")
        text = _render_text(LiveViewRenderer(), view)
        assert "[bold]x: [/bold] hi" in text
        assert "@[red]name" in text

    def test_visible_entries_limits_feed(self):
        view = LiveView("s")
        for i in range(10):
            view.append(f"message-{i}")
        text = _render_text(LiveViewRenderer(visible_entries=3), view)
        assert "message-9" in text
        assert "message-6" not in text
        assert "Events (10)" in text

    def test_run_stops_when_event_set(self):
        console = Console(record=True, width=100, force_terminal=False)
        renderer = LiveViewRenderer(console=console)
        view = LiveView("s")

        async def scenario():
            stop = asyncio.Event()
            task = asyncio.create_task(renderer.run(view, stop, refresh_hz=50.0))
            await asyncio.sleep(0.05)
            view.append("late: message")
            stop.set()
            await asyncio.wait_for(task, timeout=2.0)

        asyncio.run(scenario())
        assert "late: message" in console.export_text()
