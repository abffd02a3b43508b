"""Exception hierarchy shared by the buffer, edit and host layers."""

from __future__ import annotations


class EditError(RuntimeError):
    """Base class for every failure raised while editing a buffer."""


class EditValidationError(EditError):
    """Raised for structurally invalid input: empty batches, empty anchors,
    bad field values, or range bounds that do not fit the buffer."""

    def __init__(
        self, message: str, *, field: str | None = None, bound: str | None = None
    ) -> None:
        super().__init__(message)
        self.field = field
        self.bound = bound


class OccurrenceNotFoundError(EditError):
    """Raised when an anchor or target cannot be resolved in the current buffer."""

    def __init__(
        self, message: str, *, kind: str, occurrence: int | None = None
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.occurrence = occurrence


class UnsupportedOperationError(EditError):
    """Raised for operation kinds outside the known variant set."""

    def __init__(self, kind: object) -> None:
        super().__init__(f"Unsupported operation type: {kind}")
        self.kind = kind


class OperationFailedError(EditError):
    """Wraps the failure of a single step with its 1-based index and kind."""

    def __init__(self, index: int, kind: object, cause: EditError) -> None:
        super().__init__(f"Failed to apply operation {index} ({kind}): {cause}")
        self.index = index
        self.kind = kind
        self.cause = cause


class DocumentStoreError(RuntimeError):
    """Base class for host-side document access failures."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class DocumentNotFoundError(DocumentStoreError):
    """Raised when a document does not exist under the store root."""


class DocumentPathError(DocumentStoreError):
    """Raised when a document path resolves outside the store root."""


class DocumentIOError(DocumentStoreError):
    """Raised when a document cannot be read, decoded, encoded or written."""


class ExcerptRangeError(DocumentStoreError):
    """Raised for line ranges that cannot be excerpted from a document."""


__all__ = [
    "EditError",
    "EditValidationError",
    "OccurrenceNotFoundError",
    "UnsupportedOperationError",
    "OperationFailedError",
    "DocumentStoreError",
    "DocumentNotFoundError",
    "DocumentPathError",
    "DocumentIOError",
    "ExcerptRangeError",
]
