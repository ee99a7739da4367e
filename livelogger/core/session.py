"""LiveSession — one tracking session for one subject.

Wires the pipeline together and runs it:

    source ──(producer task)──> EventChannel ──(consumer task)──>
        EventNormalizer ──> SinkDispatcher ──> [display, persistence]

The producer task only pumps raw events from the source subscription
into the channel.  The consumer task owns normalization and dispatch;
it is the only code that touches the sinks.  A stop request takes effect
between events, so every event is either delivered to all sinks or to
none.

A source failure (cannot subscribe, connection lost) is fatal: the
consumer drains what was already received and ``run`` raises
``SourceError``.  Sink failures never end the session.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import aclosing
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict

from livelogger.core.channel import ChannelClosed, EventChannel, OverflowPolicy
from livelogger.core.failure_reporter import FailureReporter
from livelogger.core.normalizer import Clock, EventNormalizer
from livelogger.models.failures import SinkFailure
from livelogger.monitor.sink import DisplaySink
from livelogger.monitor.view import LiveView
from livelogger.routing.dispatcher import SinkDispatcher
from livelogger.routing.sinks import BaseSink
from livelogger.routing.sinks.persistence import PersistenceSink
from livelogger.sources import LiveSource, SourceError
from livelogger.storage.event_store import EventStore

logger = logging.getLogger(__name__)


class SessionStats(BaseModel):
    """Counters for a finished (or running) session."""

    model_config = ConfigDict(frozen=True)

    subject: str
    started_at: datetime
    received: int = 0
    dispatched: int = 0
    skipped: int = 0
    sink_failures: int = 0
    channel_dropped: int = 0


class LiveSession:
    """Tracks one subject: subscribes to the source and dispatches events.

    Parameters
    ----------
    subject:
        Username whose stream is tracked.
    source:
        The live-stream producer.
    sinks:
        Sinks in dispatch order.  Use ``LiveSession.create`` for the
        standard display-then-persistence wiring.
    reporter:
        Failure reporter shared with the dispatcher.
    channel_capacity / overflow:
        Channel configuration, see ``EventChannel``.
    clock:
        Receipt-time clock for the normalizer.
    """

    def __init__(
        self,
        subject: str,
        source: LiveSource,
        sinks: list[BaseSink],
        *,
        reporter: FailureReporter | None = None,
        channel_capacity: int = 0,
        overflow: OverflowPolicy = OverflowPolicy.GROW,
        clock: Clock | None = None,
    ) -> None:
        if not subject:
            raise ValueError("subject must not be empty")
        self._subject = subject
        self._source = source
        self._reporter = reporter or FailureReporter()
        self._dispatcher = SinkDispatcher(self._reporter)
        for sink in sinks:
            self._dispatcher.register_sink(sink)
        self._normalizer = EventNormalizer(subject, clock=clock)
        self._channel: EventChannel = EventChannel(channel_capacity, overflow)
        self._started_at = datetime.now(timezone.utc)
        self._stop_requested = False
        self._running = False
        self._received = 0
        self._dispatched = 0
        self._skipped = 0

    @classmethod
    def create(
        cls,
        subject: str,
        source: LiveSource,
        store: EventStore,
        view: LiveView | None = None,
        **kwargs,
    ) -> LiveSession:
        """Standard wiring: display sink first, then persistence.

        Sink failures are mirrored into the view's error slot.
        """
        view = view or LiveView(subject)
        reporter = kwargs.pop("reporter", None) or FailureReporter()

        def _show(failure: SinkFailure) -> None:
            if failure.sink_name == "persistence":
                view.set_error(f"failed to save event: {failure.message}")
            else:
                view.set_error(failure.describe())

        reporter.subscribe(_show)
        sinks: list[BaseSink] = [DisplaySink(view), PersistenceSink(store)]
        return cls(subject, source, sinks, reporter=reporter, **kwargs)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def subject(self) -> str:
        return self._subject

    @property
    def reporter(self) -> FailureReporter:
        return self._reporter

    @property
    def dispatcher(self) -> SinkDispatcher:
        return self._dispatcher

    @property
    def channel(self) -> EventChannel:
        return self._channel

    @property
    def running(self) -> bool:
        return self._running

    def stats(self) -> SessionStats:
        return SessionStats(
            subject=self._subject,
            started_at=self._started_at,
            received=self._received,
            dispatched=self._dispatched,
            skipped=self._skipped,
            sink_failures=self._reporter.count,
            channel_dropped=self._channel.dropped,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def run(self) -> SessionStats:
        """Run until the source ends or ``stop`` is called.

        Raises
        ------
        SourceError
            If the subscription fails.  Events already received are
            dispatched first.
        """
        if self._running:
            raise RuntimeError(f"Session for {self._subject} is already running")
        self._running = True
        self._started_at = datetime.now(timezone.utc)
        logger.info("Starting to track user: %s", self._subject)

        producer = asyncio.create_task(self._produce(), name=f"producer:{self._subject}")
        consumer = asyncio.create_task(self._consume(), name=f"consumer:{self._subject}")
        try:
            await consumer
            if self._stop_requested and not producer.done():
                # The source may be parked waiting for its next item.
                producer.cancel()
            (outcome,) = await asyncio.gather(producer, return_exceptions=True)
        except BaseException:
            await self._shutdown(producer, consumer)
            raise
        finally:
            self._running = False

        stats = self.stats()
        logger.info(
            "Stopped tracking %s: %d received, %d dispatched, %d skipped, %d sink failures",
            self._subject,
            stats.received,
            stats.dispatched,
            stats.skipped,
            stats.sink_failures,
        )
        if isinstance(outcome, SourceError):
            raise outcome
        return stats

    async def stop(self) -> None:
        """Unsubscribe from the source and let the consumer drain."""
        if self._stop_requested:
            return
        self._stop_requested = True
        logger.info("Stop requested for %s", self._subject)
        await self._source.close()
        await self._channel.close()

    async def _shutdown(self, producer: asyncio.Task, consumer: asyncio.Task) -> None:
        await self.stop()
        for task in (producer, consumer):
            if not task.done():
                task.cancel()
        await asyncio.gather(producer, consumer, return_exceptions=True)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def _produce(self) -> SourceError | None:
        """Pump raw events into the channel; returns the fatal source error, if any."""
        error: SourceError | None = None
        try:
            async with aclosing(self._source.subscribe(self._subject)) as events:
                async for raw in events:
                    if self._stop_requested:
                        break
                    self._received += 1
                    await self._channel.put(raw)
        except ChannelClosed:
            pass
        except SourceError as exc:
            logger.error("Source failed for %s: %s", self._subject, exc)
            error = exc
        except Exception as exc:  # noqa: BLE001
            logger.exception("Source failed for %s", self._subject)
            error = SourceError(f"failed to track user {self._subject}: {exc}")
            error.__cause__ = exc
        finally:
            await self._channel.close()
        return error

    async def _consume(self) -> None:
        """Normalize and dispatch every received event, in order."""
        async for raw in self._channel:
            try:
                event = self._normalizer.normalize(raw)
            except Exception:  # noqa: BLE001
                logger.exception("Cannot normalize %s event; skipped", type(raw).__name__)
                event = None
            if event is None:
                self._skipped += 1
                continue
            self._dispatcher.dispatch(event)
            self._dispatched += 1
