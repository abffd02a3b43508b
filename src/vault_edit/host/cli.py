"""Command-line entry point for applying edit batches to documents."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Optional, Sequence

from vault_edit.config import StoreSettings
from vault_edit.errors import DocumentStoreError
from vault_edit.runtime import telemetry

from .store import DocumentStore


def _load_operations(source: str) -> Any:
    if source == "-":
        payload = json.load(sys.stdin)
    else:
        with open(source, encoding="utf-8") as handle:
            payload = json.load(handle)
    if isinstance(payload, dict) and "operations" in payload:
        return payload["operations"]
    return payload


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="vault-edit", description="Apply ordered text edits to vault documents."
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Directory documents are resolved against (default: $VAULT_EDIT_ROOT or .)",
    )
    parser.add_argument(
        "--encoding",
        default=None,
        help="Text encoding (default: $VAULT_EDIT_ENCODING or utf-8)",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "quiet"),
        default=None,
        help="telelog preset to use instead of the environment configuration",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    apply_cmd = commands.add_parser("apply", help="Apply an operations JSON file")
    apply_cmd.add_argument("path", help="Document path relative to the root")
    apply_cmd.add_argument(
        "operations",
        help="JSON file holding a list of operations (or {'operations': [...]}); '-' reads stdin",
    )
    apply_cmd.add_argument(
        "--dry-run",
        action="store_true",
        help="Report the outcome without writing the document",
    )

    excerpt_cmd = commands.add_parser("excerpt", help="Print a line range of a document")
    excerpt_cmd.add_argument("path", help="Document path relative to the root")
    excerpt_cmd.add_argument("--start", type=int, default=None, help="1-based first line")
    excerpt_cmd.add_argument(
        "--end", type=int, default=None, help="1-based last line (inclusive)"
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)

    settings = StoreSettings.from_env(root=args.root, encoding=args.encoding)
    store = DocumentStore.from_settings(settings)

    try:
        if args.command == "apply":
            try:
                operations = _load_operations(args.operations)
            except (OSError, json.JSONDecodeError) as exc:
                print(f"Error reading operations: {exc}", file=sys.stderr)
                return 1
            report = store.modify(args.path, operations, dry_run=args.dry_run)
            stream = sys.stdout if report.ok else sys.stderr
            print(report.message, file=stream)
            return 0 if report.ok else 1

        excerpt = store.excerpt(args.path, start_line=args.start, end_line=args.end)
        print(excerpt.header)
        print()
        print(excerpt.text)
        return 0
    except DocumentStoreError as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - manual entry
    sys.exit(main())
