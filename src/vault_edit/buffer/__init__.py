"""Buffer value, occurrence search, and span validation."""

from .document import BufferDocument
from .locator import count_occurrences, locate
from .validation import ensure_needle, ensure_span

__all__ = [
    "BufferDocument",
    "count_occurrences",
    "locate",
    "ensure_needle",
    "ensure_span",
]
