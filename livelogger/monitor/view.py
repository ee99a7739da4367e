"""LiveView — the in-memory state behind the live terminal display.

This is the presentation boundary: the pipeline only ever calls
``append``, ``update_summary`` and ``set_error``.  Every change bumps
``revision``; the renderer redraws when the revision moves.
"""

from __future__ import annotations

import collections
from collections.abc import Mapping

from livelogger.models.events import SUMMARY_KEYS


class LiveView:
    """Ordered event feed, stats summary and error slot for one session.

    Parameters
    ----------
    subject:
        The tracked username, shown in the title.
    max_entries:
        Keep at most this many entries (oldest evicted).  ``None`` keeps
        everything.
    """

    def __init__(self, subject: str, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._subject = subject
        self._entries: collections.deque[str] = collections.deque(maxlen=max_entries)
        self._summary: dict[str, int] = {key: 0 for key in SUMMARY_KEYS}
        self._error: str | None = None
        self._revision = 0
        self._total = 0

    @property
    def subject(self) -> str:
        return self._subject

    @property
    def entries(self) -> list[str]:
        """Entries in arrival order, oldest first."""
        return list(self._entries)

    @property
    def total_appended(self) -> int:
        """Entries ever appended, including any evicted by ``max_entries``."""
        return self._total

    @property
    def summary(self) -> dict[str, int]:
        return dict(self._summary)

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def revision(self) -> int:
        return self._revision

    def tail(self, count: int) -> list[str]:
        """The newest *count* entries, oldest first (scrolled to the bottom)."""
        if count <= 0:
            return []
        entries = list(self._entries)
        return entries[-count:]

    # ------------------------------------------------------------------
    # Presentation boundary
    # ------------------------------------------------------------------

    def append(self, content: str) -> None:
        self._entries.append(content)
        self._total += 1
        self._revision += 1

    def update_summary(self, summary: Mapping[str, int]) -> None:
        unknown = set(summary) - set(SUMMARY_KEYS)
        if unknown:
            raise KeyError(f"Unknown summary keys: {sorted(unknown)}")
        self._summary.update({key: int(value) for key, value in summary.items()})
        self._revision += 1

    def set_error(self, message: str | None) -> None:
        self._error = message
        self._revision += 1
