"""Event routing — fans canonical events out to every registered sink.

The SinkDispatcher delivers each event to the display sink and the
persistence sink in a fixed order.  A failing sink is reported and
skipped; no event is silently dropped from the others.
"""
