"""livelogger: record a live stream's events to SQLite with a live terminal view.

Each raw event from the live-stream source (chat, gift, like, follow,
share, viewer count) is normalized into one canonical record and fanned
out to two independent sinks:

  - the display: an ordered feed plus a viewers/likes/shares/comments summary
  - the event log: an SQLite table with listing, range queries, age-based
    cleanup and JSON / text / SQLite exports

A failing sink never stops delivery to the other sink or the next event.
"""

__version__ = "0.1.0"
__description__ = "Live-stream event logger with a Rich terminal view"

from livelogger.core.session import LiveSession
from livelogger.storage.event_store import EventStore

__all__ = ["LiveSession", "EventStore", "__version__"]
