"""Core pipeline: normalizer, event channel, failure reporter, session."""
