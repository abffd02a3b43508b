"""File-backed callers of the edit engine."""

from .store import DocumentStore, Excerpt, ModifyReport

__all__ = ["DocumentStore", "Excerpt", "ModifyReport"]
