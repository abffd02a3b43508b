"""Ordered, all-or-nothing application of edit operations to a text buffer."""

from __future__ import annotations

from typing import Iterable

from vault_edit.buffer import (
    BufferDocument,
    count_occurrences,
    ensure_needle,
    ensure_span,
    locate,
)
from vault_edit.errors import (
    EditError,
    EditValidationError,
    OccurrenceNotFoundError,
    OperationFailedError,
    UnsupportedOperationError,
)
from vault_edit.runtime.telemetry import record_event, record_step, span

from .models import (
    Append,
    Changed,
    EditOutcome,
    Failed,
    InsertAfter,
    InsertBefore,
    Operation,
    Prepend,
    Replace,
    ReplaceRange,
    Unchanged,
)

StepResult = tuple[BufferDocument, str]


def _resolve(
    document: BufferDocument, needle: str, occurrence: int, *, kind: str, label: str
) -> int:
    offset = locate(document.text, needle, occurrence)
    if offset is None:
        raise OccurrenceNotFoundError(
            f"{label} text not found for {kind} (occurrence {occurrence})",
            kind=kind,
            occurrence=occurrence,
        )
    return offset


def apply_step(document: BufferDocument, operation: Operation) -> StepResult:
    """Apply one operation, returning the next document and its audit note."""

    match operation:
        case Append(text=text):
            return document.append(text), f"appended {len(text)} characters"
        case Prepend(text=text):
            return document.prepend(text), f"prepended {len(text)} characters"
        case InsertAfter(anchor=anchor, text=text, occurrence=occurrence):
            ensure_needle(anchor, field="anchor", kind="insert_after")
            start = _resolve(
                document, anchor, occurrence, kind="insert_after", label="Anchor"
            )
            position = start + len(anchor)
            return (
                document.splice(position, position, text),
                f"inserted after occurrence {occurrence} of anchor",
            )
        case InsertBefore(anchor=anchor, text=text, occurrence=occurrence):
            ensure_needle(anchor, field="anchor", kind="insert_before")
            start = _resolve(
                document, anchor, occurrence, kind="insert_before", label="Anchor"
            )
            return (
                document.splice(start, start, text),
                f"inserted before occurrence {occurrence} of anchor",
            )
        case Replace(target=target, text=text, all_occurrences=True):
            ensure_needle(target, field="target", kind="replace")
            matches = count_occurrences(document.text, target)
            if not matches:
                raise OccurrenceNotFoundError(
                    "Target text not found for replace (all occurrences)",
                    kind="replace",
                )
            return (
                document.replace_all(target, text),
                f"replaced all occurrences of target ({matches} matches)",
            )
        case Replace(target=target, text=text, occurrence=occurrence):
            ensure_needle(target, field="target", kind="replace")
            start = _resolve(
                document, target, occurrence, kind="replace", label="Target"
            )
            return (
                document.splice(start, start + len(target), text),
                f"replaced occurrence {occurrence} of target",
            )
        case ReplaceRange(start_offset=start, end_offset=end, text=text):
            ensure_span(document, start, end)
            return document.splice(start, end, text), f"replaced characters {start}-{end}"
        case _:
            raise UnsupportedOperationError(_kind_of(operation))


def _kind_of(operation: object) -> str:
    kind = getattr(operation, "kind", None)
    if isinstance(kind, str):
        return kind
    if isinstance(operation, dict) and "type" in operation:
        return str(operation["type"])
    return type(operation).__name__


class EditEngine:
    """Stateless batch editor.

    Each operation sees the buffer produced by the operations before it, so
    later edits may anchor on text inserted earlier in the same batch. The
    first failing step aborts the batch and no partial buffer is returned.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._logger_name = logger_name

    def apply(
        self, text: str, operations: Iterable[Operation]
    ) -> Changed | Unchanged:
        batch = tuple(operations)
        if not batch:
            raise EditValidationError(
                "At least one operation is required", field="operations"
            )

        with span(
            "edits::apply",
            logger_name=self._logger_name,
            component="edits",
            context={"operations": len(batch), "length": len(text)},
        ) as handle:
            document = BufferDocument.from_text(text)
            notes: list[str] = []
            for index, operation in enumerate(batch, start=1):
                kind = _kind_of(operation)
                try:
                    document, note = apply_step(document, operation)
                except EditError as exc:
                    handle.add_metadata("failed_index", index)
                    record_step(
                        index,
                        kind,
                        status="failed",
                        level="warning",
                        logger_name=self._logger_name,
                        reason=str(exc),
                    )
                    raise OperationFailedError(index, kind, exc) from exc
                notes.append(f"Operation {index}: {note}")
                record_step(
                    index,
                    kind,
                    logger_name=self._logger_name,
                    version=document.version,
                )

            if document.text == text:
                handle.add_metadata("outcome", Unchanged.status)
                record_event(
                    "edits.unchanged",
                    data={"operations": len(batch)},
                    logger_name=self._logger_name,
                )
                return Unchanged(text=text, notes=tuple(notes))

            handle.add_metadata("outcome", Changed.status)
            return Changed(text=document.text, notes=tuple(notes))

    def run(self, text: str, operations: Iterable[Operation]) -> EditOutcome:
        """Like ``apply`` but reports failures as a ``Failed`` outcome."""

        try:
            return self.apply(text, operations)
        except OperationFailedError as exc:
            return Failed(
                reason=str(exc), index=exc.index, kind=str(exc.kind), cause=exc.cause
            )
        except EditError as exc:
            return Failed(reason=str(exc), cause=exc)


_DEFAULT_ENGINE = EditEngine()


def apply_operations(text: str, operations: Iterable[Operation]) -> Changed | Unchanged:
    return _DEFAULT_ENGINE.apply(text, operations)


def run_operations(text: str, operations: Iterable[Operation]) -> EditOutcome:
    return _DEFAULT_ENGINE.run(text, operations)


__all__ = [
    "EditEngine",
    "apply_step",
    "apply_operations",
    "run_operations",
]
