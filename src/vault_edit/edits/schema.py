"""Parse wire-format operation mappings into typed operations.

The wire format is the JSON shape accepted by the editing tool: a ``type``
discriminator plus camelCase fields (``allOccurrences``, ``startOffset``,
``endOffset``). Unknown extra keys are ignored.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Sequence

from vault_edit.errors import (
    EditError,
    EditValidationError,
    OperationFailedError,
    UnsupportedOperationError,
)

from .models import (
    OPERATION_TYPES,
    Append,
    InsertAfter,
    InsertBefore,
    Operation,
    Prepend,
    Replace,
    ReplaceRange,
)

OperationParser = Callable[[Mapping[str, Any]], Operation]


def _string(data: Mapping[str, Any], key: str, *, non_empty: bool = False) -> str:
    if key not in data:
        raise EditValidationError(f"'{key}' is required", field=key)
    value = data[key]
    if not isinstance(value, str):
        raise EditValidationError(f"'{key}' must be a string", field=key)
    if non_empty and not value:
        raise EditValidationError(f"'{key}' must not be empty", field=key)
    return value


def _integer(
    data: Mapping[str, Any], key: str, *, minimum: int, default: int | None = None
) -> int:
    if key not in data:
        if default is None:
            raise EditValidationError(f"'{key}' is required", field=key)
        return default
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise EditValidationError(f"'{key}' must be an integer", field=key)
    if value < minimum:
        raise EditValidationError(
            f"'{key}' must be greater than or equal to {minimum}", field=key
        )
    return value


def _flag(data: Mapping[str, Any], key: str) -> bool:
    if key not in data:
        return False
    value = data[key]
    if not isinstance(value, bool):
        raise EditValidationError(f"'{key}' must be a boolean", field=key)
    return value


def _parse_append(data: Mapping[str, Any]) -> Operation:
    return Append(text=_string(data, "text"))


def _parse_prepend(data: Mapping[str, Any]) -> Operation:
    return Prepend(text=_string(data, "text"))


def _parse_insert_after(data: Mapping[str, Any]) -> Operation:
    return InsertAfter(
        anchor=_string(data, "anchor", non_empty=True),
        text=_string(data, "text"),
        occurrence=_integer(data, "occurrence", minimum=1, default=1),
    )


def _parse_insert_before(data: Mapping[str, Any]) -> Operation:
    return InsertBefore(
        anchor=_string(data, "anchor", non_empty=True),
        text=_string(data, "text"),
        occurrence=_integer(data, "occurrence", minimum=1, default=1),
    )


def _parse_replace(data: Mapping[str, Any]) -> Operation:
    return Replace(
        target=_string(data, "target", non_empty=True),
        text=_string(data, "text"),
        occurrence=_integer(data, "occurrence", minimum=1, default=1),
        all_occurrences=_flag(data, "allOccurrences"),
    )


def _parse_replace_range(data: Mapping[str, Any]) -> Operation:
    return ReplaceRange(
        start_offset=_integer(data, "startOffset", minimum=0),
        end_offset=_integer(data, "endOffset", minimum=0),
        text=_string(data, "text"),
    )


_PARSERS: Dict[str, OperationParser] = {
    "append": _parse_append,
    "prepend": _parse_prepend,
    "insert_after": _parse_insert_after,
    "insert_before": _parse_insert_before,
    "replace": _parse_replace,
    "replace_range": _parse_replace_range,
}


def parse_operation(data: Mapping[str, Any]) -> Operation:
    if not isinstance(data, Mapping):
        raise EditValidationError("Operation must be an object", field="type")
    kind = data.get("type")
    if kind is None:
        raise EditValidationError("'type' is required", field="type")
    parser = _PARSERS.get(kind) if isinstance(kind, str) else None
    if parser is None:
        raise UnsupportedOperationError(kind)
    return parser(data)


def parse_operations(items: Sequence[Operation | Mapping[str, Any]]) -> list[Operation]:
    """Parse a batch, passing already-typed operations through untouched.

    A failing item is reported as ``OperationFailedError`` with its 1-based
    index, matching how the engine reports a failing step.
    """

    if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
        raise EditValidationError("Operations must be a list", field="operations")
    operations: list[Operation] = []
    for index, item in enumerate(items, start=1):
        if isinstance(item, OPERATION_TYPES):
            operations.append(item)
            continue
        try:
            operations.append(parse_operation(item))
        except EditError as exc:
            kind = item.get("type") if isinstance(item, Mapping) else None
            raise OperationFailedError(index, kind or "unknown", exc) from exc
    if not operations:
        raise EditValidationError(
            "At least one operation is required", field="operations"
        )
    return operations


def operation_kinds() -> tuple[str, ...]:
    return tuple(_PARSERS)


__all__ = ["parse_operation", "parse_operations", "operation_kinds"]
