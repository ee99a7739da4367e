"""Live display — view state, display sink and Rich renderer.

Modules
-------
view
    ``LiveView`` holds the ordered feed, the stats summary and the error
    slot; it is the presentation boundary.
sink
    ``DisplaySink`` feeds canonical events into a ``LiveView``.
renderer
    ``LiveViewRenderer`` turns a ``LiveView`` into Rich renderables and
    runs the redraw loop.
"""
