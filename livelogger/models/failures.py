"""Sink failure record handed to the failure reporter."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from livelogger.models.events import CanonicalEvent


class SinkFailure(BaseModel):
    """A single failed ``handle`` call on one sink."""

    model_config = ConfigDict(frozen=True)

    sink_name: str
    event_kind: str
    event_content: str
    error_type: str
    message: str
    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @classmethod
    def from_exception(
        cls, sink_name: str, event: CanonicalEvent, exc: BaseException
    ) -> SinkFailure:
        return cls(
            sink_name=sink_name,
            event_kind=event.kind.value,
            event_content=event.content,
            error_type=type(exc).__name__,
            message=str(exc) or type(exc).__name__,
        )

    def describe(self) -> str:
        """One-line text for the display's error slot."""
        return f"{self.sink_name} failed on {self.event_kind} event: {self.message}"
