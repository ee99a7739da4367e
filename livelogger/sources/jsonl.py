"""JSON-lines source — raw events decoded from one JSON object per line.

Example line::

    {"type": "gift", "nickname": "bob", "gift_name": "rose",
     "repeat_count": 3, "timestamp": 1001}

Blank lines are ignored.  Lines that are not valid JSON, or do not match
any known variant, are logged and skipped: decoding problems belong to
the source, not the pipeline.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import TextIO

from pydantic import ValidationError

from livelogger.models.source import RAW_EVENT_ADAPTER, RawSourceEvent
from livelogger.sources import SourceError

logger = logging.getLogger(__name__)


class JsonLinesSource:
    """Streams raw events from a JSON-lines file or text stream.

    Parameters
    ----------
    path:
        File to read.  Opened at ``subscribe`` time.
    stream:
        An already-open text stream (e.g. ``sys.stdin``).  Exactly one of
        *path* and *stream* must be given.
    """

    def __init__(self, path: Path | str | None = None, stream: TextIO | None = None) -> None:
        if (path is None) == (stream is None):
            raise ValueError("Provide exactly one of path or stream")
        self._path = Path(path) if path is not None else None
        self._stream = stream
        self._owns_stream = False
        self._closed = False
        self._skipped = 0

    @property
    def skipped(self) -> int:
        """Lines that could not be decoded into a raw event."""
        return self._skipped

    async def subscribe(self, subject: str) -> AsyncGenerator[RawSourceEvent, None]:
        if self._closed:
            raise SourceError("Source already closed")

        if self._path is not None:
            try:
                self._stream = self._path.open("r", encoding="utf-8")
            except OSError as exc:
                raise SourceError(f"Cannot open feed {self._path}: {exc}") from exc
            self._owns_stream = True

        logger.info("Reading raw events for %s from %s", subject, self._path or "stream")
        stream = self._stream
        assert stream is not None
        lineno = 0
        try:
            while not self._closed:
                try:
                    line = await asyncio.to_thread(stream.readline)
                except (OSError, ValueError) as exc:
                    if self._closed:
                        break
                    raise SourceError(f"Feed read failed: {exc}") from exc
                if not line:
                    break
                lineno += 1
                event = self._decode(line, lineno)
                if event is not None:
                    yield event
        finally:
            self._release()

    def _decode(self, line: str, lineno: int) -> RawSourceEvent | None:
        line = line.strip()
        if not line:
            return None
        try:
            return RAW_EVENT_ADAPTER.validate_python(json.loads(line))
        except json.JSONDecodeError as exc:
            logger.warning("Line %d: invalid JSON (%s); skipped", lineno, exc)
        except ValidationError as exc:
            logger.warning("Line %d: not a known source event (%s); skipped", lineno, exc.errors()[0]["msg"])
        self._skipped += 1
        return None

    def _release(self) -> None:
        if self._owns_stream and self._stream is not None:
            self._stream.close()
            self._stream = None
            self._owns_stream = False

    async def close(self) -> None:
        self._closed = True
