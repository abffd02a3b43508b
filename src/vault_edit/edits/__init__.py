"""Typed edit operations, the batch engine, and wire-format parsing."""

from .engine import EditEngine, apply_operations, apply_step, run_operations
from .models import (
    OPERATION_TYPES,
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
from .schema import operation_kinds, parse_operation, parse_operations

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
    "EditEngine",
    "apply_step",
    "apply_operations",
    "run_operations",
    "parse_operation",
    "parse_operations",
    "operation_kinds",
]
