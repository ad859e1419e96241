"""Trace-driven set-associative cache simulator."""

__version__ = "1.0.0"
