"""Failure reporter — the single, last-write-wins slot for sink failures.

The dispatcher hands every captured sink failure to ``report``.  The
reporter never raises back into the dispatch loop; observers (e.g. the
live view's error line) are notified and their own errors are logged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from livelogger.models.failures import SinkFailure

logger = logging.getLogger(__name__)

FailureObserver = Callable[[SinkFailure], None]


class FailureReporter:
    """Records the most recent sink failure of a pipeline run."""

    def __init__(self) -> None:
        self._last: SinkFailure | None = None
        self._count = 0
        self._observers: list[FailureObserver] = []

    @property
    def last(self) -> SinkFailure | None:
        """The most recent failure, or ``None`` if nothing has failed."""
        return self._last

    @property
    def count(self) -> int:
        """Total failures reported since creation or the last ``clear``."""
        return self._count

    def subscribe(self, observer: FailureObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def report(self, failure: SinkFailure) -> None:
        self._last = failure
        self._count += 1
        for observer in list(self._observers):
            try:
                observer(failure)
            except Exception:  # noqa: BLE001
                logger.exception("Failure observer %r raised", observer)

    def clear(self) -> None:
        self._last = None
        self._count = 0
