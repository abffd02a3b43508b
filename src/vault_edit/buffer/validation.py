"""Validation helpers shared across buffer services."""

from __future__ import annotations

from vault_edit.errors import EditValidationError

from .document import BufferDocument


def ensure_span(document: BufferDocument, start: int, end: int) -> tuple[int, int]:
    if start > end:
        raise EditValidationError(
            "replace_range startOffset must be less than or equal to endOffset",
            field="startOffset",
            bound="start",
        )
    if end > len(document):
        raise EditValidationError(
            f"replace_range endOffset exceeds document length ({end} > {len(document)})",
            field="endOffset",
            bound="end",
        )
    return start, end


def ensure_needle(needle: str, *, field: str, kind: str) -> str:
    if not needle:
        raise EditValidationError(
            f"{field} text must not be empty for {kind}", field=field
        )
    return needle
