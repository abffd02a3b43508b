"""Dataclasses describing edit operations and batch outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from vault_edit.errors import EditError, EditValidationError


def _check_text(value: object, field: str = "text") -> None:
    if not isinstance(value, str):
        raise EditValidationError(f"{field} must be a string", field=field)


def _check_int(value: object, field: str, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EditValidationError(f"{field} must be an integer", field=field)
    if value < minimum:
        raise EditValidationError(
            f"{field} must be greater than or equal to {minimum}", field=field
        )


@dataclass(frozen=True, slots=True)
class Append:
    """Concatenate ``text`` at the end of the buffer."""

    kind: ClassVar[str] = "append"

    text: str

    def __post_init__(self) -> None:
        _check_text(self.text)


@dataclass(frozen=True, slots=True)
class Prepend:
    """Concatenate ``text`` at the start of the buffer."""

    kind: ClassVar[str] = "prepend"

    text: str

    def __post_init__(self) -> None:
        _check_text(self.text)


@dataclass(frozen=True, slots=True)
class InsertAfter:
    """Insert ``text`` right after the end of the N-th ``anchor`` match."""

    kind: ClassVar[str] = "insert_after"

    anchor: str
    text: str
    occurrence: int = 1

    def __post_init__(self) -> None:
        _check_text(self.anchor, "anchor")
        _check_text(self.text)
        _check_int(self.occurrence, "occurrence", 1)


@dataclass(frozen=True, slots=True)
class InsertBefore:
    """Insert ``text`` right before the start of the N-th ``anchor`` match."""

    kind: ClassVar[str] = "insert_before"

    anchor: str
    text: str
    occurrence: int = 1

    def __post_init__(self) -> None:
        _check_text(self.anchor, "anchor")
        _check_text(self.text)
        _check_int(self.occurrence, "occurrence", 1)


@dataclass(frozen=True, slots=True)
class Replace:
    """Replace the N-th match of ``target``, or all of them.

    ``occurrence`` is ignored when ``all_occurrences`` is set.
    """

    kind: ClassVar[str] = "replace"

    target: str
    text: str
    occurrence: int = 1
    all_occurrences: bool = False

    def __post_init__(self) -> None:
        _check_text(self.target, "target")
        _check_text(self.text)
        _check_int(self.occurrence, "occurrence", 1)
        if not isinstance(self.all_occurrences, bool):
            raise EditValidationError(
                "allOccurrences must be a boolean", field="allOccurrences"
            )


@dataclass(frozen=True, slots=True)
class ReplaceRange:
    """Replace the half-open character span ``[start_offset, end_offset)``."""

    kind: ClassVar[str] = "replace_range"

    start_offset: int
    end_offset: int
    text: str

    def __post_init__(self) -> None:
        _check_int(self.start_offset, "startOffset", 0)
        _check_int(self.end_offset, "endOffset", 0)
        _check_text(self.text)


Operation = Union[Append, Prepend, InsertAfter, InsertBefore, Replace, ReplaceRange]

OPERATION_TYPES: tuple[type, ...] = (
    Append,
    Prepend,
    InsertAfter,
    InsertBefore,
    Replace,
    ReplaceRange,
)


@dataclass(frozen=True, slots=True)
class Changed:
    """Batch succeeded and the buffer differs from the input."""

    status: ClassVar[str] = "changed"

    text: str
    notes: tuple[str, ...] = ()

    @property
    def summary(self) -> str:
        return "\n".join(self.notes)


@dataclass(frozen=True, slots=True)
class Unchanged:
    """Batch succeeded but left the buffer identical to the input."""

    status: ClassVar[str] = "unchanged"

    text: str
    notes: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Failed:
    """Batch aborted. ``index`` is 1-based and ``None`` when no step ran."""

    status: ClassVar[str] = "failed"

    reason: str
    index: int | None = None
    kind: str | None = None
    cause: EditError | None = None


EditOutcome = Union[Changed, Unchanged, Failed]


__all__ = [
    "Append",
    "Prepend",
    "InsertAfter",
    "InsertBefore",
    "Replace",
    "ReplaceRange",
    "Operation",
    "OPERATION_TYPES",
    "Changed",
    "Unchanged",
    "Failed",
    "EditOutcome",
]
