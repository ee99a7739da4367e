"""Display sink — feeds canonical events into a ``LiveView``."""

from __future__ import annotations

from livelogger.models.events import SUMMARY_KEYS, CanonicalEvent, EventKind
from livelogger.monitor.view import LiveView


class DisplaySink:
    """Appends each event's content to the view and keeps the summary current.

    Summary derivation:

    - ``viewers``  latest ``stats`` event's viewer count
    - ``likes``    running total of like counts
    - ``shares``   number of share events
    - ``comments`` number of chat events
    """

    def __init__(self, view: LiveView) -> None:
        self._view = view
        self._summary: dict[str, int] = {key: 0 for key in SUMMARY_KEYS}

    @property
    def sink_name(self) -> str:
        return "display"

    @property
    def view(self) -> LiveView:
        return self._view

    def handle(self, event: CanonicalEvent) -> None:
        self._view.append(event.content)

        changed = self._apply(event)
        if changed:
            self._view.update_summary(self._summary)

    def _apply(self, event: CanonicalEvent) -> bool:
        if event.kind is EventKind.STATS and event.quantity is not None:
            self._summary["viewers"] = event.quantity
        elif event.kind is EventKind.LIKE:
            self._summary["likes"] += event.quantity or 0
        elif event.kind is EventKind.SHARE:
            self._summary["shares"] += 1
        elif event.kind is EventKind.CHAT:
            self._summary["comments"] += 1
        else:
            return False
        return True
