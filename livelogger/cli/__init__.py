"""livelogger CLI — Typer-based command-line interface.

Provides the ``livelogger`` command with subcommands for tracking a live
stream, browsing and exporting recorded events, cleaning old events and
managing configuration.

All output uses Rich for formatted terminal display.
"""
