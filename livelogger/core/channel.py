"""Event channel — the single ordered hand-off between producer and consumer.

The channel's capacity and what happens when it is full are explicit
configuration:

- ``GROW``: unbounded buffer (capacity ignored).
- ``BLOCK``: bounded buffer; ``put`` waits until the consumer makes room.
- ``DROP_OLDEST``: bounded buffer; ``put`` evicts the oldest buffered
  item and counts it in ``dropped``.

Items come out in exactly the order they went in.  After ``close()`` the
consumer still receives everything that was buffered, then
``ChannelClosed``.
"""

from __future__ import annotations

import asyncio
import collections
import logging
from enum import Enum
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OverflowPolicy(str, Enum):
    GROW = "grow"
    BLOCK = "block"
    DROP_OLDEST = "drop_oldest"


class ChannelClosed(RuntimeError):
    """Raised by ``get`` once a closed channel is empty, and by ``put`` after close."""


class EventChannel(Generic[T]):
    """Single-producer, single-consumer FIFO with an explicit overflow policy.

    Parameters
    ----------
    capacity:
        Maximum number of buffered items.  ``0`` means unbounded and is
        only valid with ``OverflowPolicy.GROW``.
    overflow:
        What ``put`` does when the buffer is full.
    """

    def __init__(
        self,
        capacity: int = 0,
        overflow: OverflowPolicy = OverflowPolicy.GROW,
    ) -> None:
        overflow = OverflowPolicy(overflow)
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        if overflow is not OverflowPolicy.GROW and capacity == 0:
            raise ValueError(f"overflow policy {overflow.value!r} needs a capacity > 0")

        self._capacity = capacity if overflow is not OverflowPolicy.GROW else 0
        self._overflow = overflow
        self._items: collections.deque[T] = collections.deque()
        self._closed = False
        self._dropped = 0
        self._changed = asyncio.Condition()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def overflow(self) -> OverflowPolicy:
        return self._overflow

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dropped(self) -> int:
        """Items evicted under ``DROP_OLDEST``."""
        return self._dropped

    def __len__(self) -> int:
        return len(self._items)

    def _full(self) -> bool:
        return self._capacity > 0 and len(self._items) >= self._capacity

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    async def put(self, item: T) -> None:
        async with self._changed:
            if self._closed:
                raise ChannelClosed("put on a closed channel")

            if self._full():
                if self._overflow is OverflowPolicy.DROP_OLDEST:
                    self._items.popleft()
                    self._dropped += 1
                    logger.warning(
                        "Event channel full (capacity=%d); dropped oldest item (%d dropped so far)",
                        self._capacity,
                        self._dropped,
                    )
                else:
                    await self._changed.wait_for(lambda: not self._full() or self._closed)
                    if self._closed:
                        raise ChannelClosed("channel closed while waiting for room")

            self._items.append(item)
            self._changed.notify_all()

    async def close(self) -> None:
        """Mark end of stream.  Idempotent."""
        async with self._changed:
            self._closed = True
            self._changed.notify_all()

    # ------------------------------------------------------------------
    # Consumer side
    # ------------------------------------------------------------------

    async def get(self) -> T:
        async with self._changed:
            await self._changed.wait_for(lambda: bool(self._items) or self._closed)
            if not self._items:
                raise ChannelClosed("channel closed and drained")
            item = self._items.popleft()
            self._changed.notify_all()
            return item

    def __aiter__(self) -> EventChannel[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.get()
        except ChannelClosed:
            raise StopAsyncIteration from None
