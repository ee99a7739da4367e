"""Sink protocol for livelogger event routing.

All sinks implement the ``BaseSink`` protocol: a ``sink_name`` property
and a ``handle(event)`` method.  The dispatcher calls ``handle`` on
every registered sink for every canonical event.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from livelogger.models.events import CanonicalEvent


@runtime_checkable
class BaseSink(Protocol):
    """Protocol that every livelogger sink must implement.

    Attributes
    ----------
    sink_name : str
        A unique human-readable identifier for this sink instance
        (e.g. ``"display"``, ``"persistence"``).
    """

    @property
    def sink_name(self) -> str:
        """Return the unique name of this sink."""
        ...

    def handle(self, event: CanonicalEvent) -> None:
        """Process one canonical event.

        Raising is allowed: the dispatcher captures the error, reports it
        and carries on with the next sink.  Implementations must not
        mutate *event* (it is frozen) or rely on other sinks having run.
        """
        ...
