"""Ordered, all-or-nothing text edits for vault documents."""

__all__ = [
    "buffer",
    "edits",
    "errors",
    "host",
    "runtime",
    "config",
]

__version__ = "0.1.0"
