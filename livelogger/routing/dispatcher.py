"""SinkDispatcher — routes every canonical event to ALL registered sinks.

No event is silently dropped.  Sinks are called in registration order,
exactly once per event.  A sink failure is logged and handed to the
failure reporter, and never prevents delivery to the remaining sinks or
the dispatch of the next event.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from livelogger.models.events import CanonicalEvent
from livelogger.models.failures import SinkFailure

if TYPE_CHECKING:
    from livelogger.core.failure_reporter import FailureReporter
    from livelogger.routing.sinks import BaseSink

logger = logging.getLogger(__name__)


class SinkOutcome(BaseModel):
    """Result of one sink's ``handle`` call."""

    model_config = ConfigDict(frozen=True)

    sink_name: str
    ok: bool
    failure: SinkFailure | None = None


class DispatchOutcome(BaseModel):
    """Per-sink results of dispatching one event, in dispatch order."""

    model_config = ConfigDict(frozen=True)

    event: CanonicalEvent
    outcomes: tuple[SinkOutcome, ...] = ()

    @property
    def succeeded(self) -> list[str]:
        return [o.sink_name for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[str]:
        return [o.sink_name for o in self.outcomes if not o.ok]

    @property
    def all_ok(self) -> bool:
        return all(o.ok for o in self.outcomes)


class SinkDispatcher:
    """Routes canonical events to ALL configured sinks.

    A failure in one sink does not block the others.  The dispatcher
    holds no event state; it is a delivery loop driven by its caller.

    Parameters
    ----------
    reporter:
        Receives a ``SinkFailure`` for every failed ``handle`` call.
        Optional; failures are always logged.

    Usage
    -----
    >>> dispatcher = SinkDispatcher(reporter)
    >>> dispatcher.register_sink(display_sink)
    >>> dispatcher.register_sink(persistence_sink)
    >>> dispatcher.dispatch(event)
    """

    def __init__(self, reporter: FailureReporter | None = None) -> None:
        self._sinks: list[BaseSink] = []
        self._reporter = reporter

    # ------------------------------------------------------------------
    # Sink management
    # ------------------------------------------------------------------

    def register_sink(self, sink: BaseSink) -> None:
        """Register a sink to receive dispatched events.

        Sinks are called in registration order.  Duplicate registration
        of the same sink instance is silently ignored.
        """
        if sink not in self._sinks:
            self._sinks.append(sink)
            logger.info("Registered sink: %s", sink.sink_name)

    def unregister_sink(self, sink: BaseSink) -> None:
        """Remove a previously registered sink."""
        try:
            self._sinks.remove(sink)
            logger.info("Unregistered sink: %s", sink.sink_name)
        except ValueError:
            pass

    @property
    def registered_sinks(self) -> list[BaseSink]:
        """Return a copy of the registered sink list."""
        return list(self._sinks)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, event: CanonicalEvent) -> DispatchOutcome:
        """Dispatch an event to ALL registered sinks.

        Never raises because of a sink: every failure is captured in the
        returned outcome and passed to the reporter.
        """
        if not self._sinks:
            logger.warning("No sinks registered — %s event dropped", event.kind.value)
            return DispatchOutcome(event=event)

        outcomes: list[SinkOutcome] = []
        for sink in self._sinks:
            try:
                sink.handle(event)
                outcomes.append(SinkOutcome(sink_name=sink.sink_name, ok=True))
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "Sink %s failed for %s event %r: %s",
                    sink.sink_name,
                    event.kind.value,
                    event.content,
                    exc,
                )
                failure = SinkFailure.from_exception(sink.sink_name, event, exc)
                outcomes.append(
                    SinkOutcome(sink_name=sink.sink_name, ok=False, failure=failure)
                )
                if self._reporter is not None:
                    self._reporter.report(failure)

        result = DispatchOutcome(event=event, outcomes=tuple(outcomes))
        if not result.all_ok:
            logger.warning(
                "%s event: %d/%d sinks succeeded, failed: %s",
                event.kind.value,
                len(result.succeeded),
                len(outcomes),
                ", ".join(result.failed),
            )
        return result

    def dispatch_batch(self, events: Iterable[CanonicalEvent]) -> list[DispatchOutcome]:
        """Dispatch multiple events in order."""
        return [self.dispatch(event) for event in events]
