"""Durable event log (SQLite) and its export formats."""
