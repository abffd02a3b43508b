"""Persistence-aware caller wrapping the edit engine around files on disk."""

from __future__ import annotations

import contextlib
import os
import re
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from vault_edit.config import StoreSettings
from vault_edit.edits import (
    Changed,
    EditEngine,
    EditOutcome,
    Failed,
    Operation,
    Unchanged,
    parse_operations,
)
from vault_edit.errors import (
    DocumentIOError,
    DocumentNotFoundError,
    DocumentPathError,
    EditError,
    ExcerptRangeError,
    OperationFailedError,
)
from vault_edit.runtime.telemetry import record_event, span

_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True, slots=True)
class Excerpt:
    path: str
    start_line: int
    end_line: int
    total_lines: int
    text: str

    @property
    def header(self) -> str:
        return (
            f"Content of {self.path} "
            f"(lines {self.start_line}-{self.end_line} of {self.total_lines}):"
        )


@dataclass(frozen=True, slots=True)
class ModifyReport:
    """What happened to a document after a batch of operations."""

    path: str
    outcome: EditOutcome
    persisted: bool

    @property
    def ok(self) -> bool:
        return not isinstance(self.outcome, Failed)

    @property
    def message(self) -> str:
        outcome = self.outcome
        if isinstance(outcome, Failed):
            return f"Error modifying {self.path}: {outcome.reason}"
        if isinstance(outcome, Unchanged):
            return (
                f"No changes applied to {self.path}; "
                "operations left content unchanged."
            )
        lines = [f"Document {self.path} modified successfully."]
        if not self.persisted:
            lines[0] = f"Document {self.path} would be modified (dry run)."
        lines.extend(outcome.notes)
        return "\n".join(lines)


class DocumentStore:
    """Reads and writes documents beneath a single root directory.

    Only a ``Changed`` outcome is ever written back; ``Unchanged`` and
    ``Failed`` leave the file untouched.
    """

    def __init__(
        self,
        root: str | Path,
        *,
        encoding: str = "utf-8",
        engine: Optional[EditEngine] = None,
        logger_name: str | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        self.encoding = encoding
        self.engine = engine or EditEngine(logger_name=logger_name)
        self._logger_name = logger_name

    @classmethod
    def from_settings(cls, settings: StoreSettings, **kwargs: Any) -> "DocumentStore":
        return cls(settings.root, encoding=settings.encoding, **kwargs)

    def resolve(self, path: str | Path) -> Path:
        candidate = (self.root / path).resolve()
        if not candidate.is_relative_to(self.root):
            raise DocumentPathError(
                f"Path escapes the store root: {path}", path=str(path)
            )
        return candidate

    def exists(self, path: str | Path) -> bool:
        return self.resolve(path).is_file()

    def read(self, path: str | Path) -> str:
        full_path = self.resolve(path)
        if not full_path.is_file():
            raise DocumentNotFoundError(f"File not found: {path}", path=str(path))
        with span(
            "store::read",
            logger_name=self._logger_name,
            component="store",
            context={"path": str(path)},
        ):
            # Decoding raw bytes keeps \r\n intact so character offsets match the file.
            try:
                return full_path.read_bytes().decode(self.encoding)
            except UnicodeDecodeError as exc:
                raise DocumentIOError(
                    f"Cannot decode {path} as {self.encoding}: {exc}", path=str(path)
                ) from exc
            except OSError as exc:
                raise DocumentIOError(
                    f"Cannot read {path}: {exc}", path=str(path)
                ) from exc

    def write(self, path: str | Path, text: str) -> None:
        """Replace the document atomically; on failure the old file is left as-is."""

        full_path = self.resolve(path)
        try:
            data = text.encode(self.encoding)
        except UnicodeEncodeError as exc:
            raise DocumentIOError(
                f"Cannot encode {path} as {self.encoding}: {exc}", path=str(path)
            ) from exc
        with span(
            "store::write",
            logger_name=self._logger_name,
            component="store",
            context={"path": str(path), "length": len(text)},
        ):
            temp_name: str | None = None
            try:
                full_path.parent.mkdir(parents=True, exist_ok=True)
                fd, temp_name = tempfile.mkstemp(
                    dir=full_path.parent, prefix=f".{full_path.name}.", suffix=".tmp"
                )
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                if full_path.exists():
                    os.chmod(temp_name, stat.S_IMODE(full_path.stat().st_mode))
                os.replace(temp_name, full_path)
                temp_name = None
            except OSError as exc:
                raise DocumentIOError(
                    f"Cannot write {path}: {exc}", path=str(path)
                ) from exc
            finally:
                if temp_name is not None:
                    with contextlib.suppress(OSError):
                        os.unlink(temp_name)

    def excerpt(
        self,
        path: str | Path,
        *,
        start_line: int | None = None,
        end_line: int | None = None,
    ) -> Excerpt:
        """Return 1-based inclusive lines; ``end_line`` is clamped to the document."""

        if start_line is not None and start_line < 1:
            raise ExcerptRangeError("start_line must be at least 1", path=str(path))
        if end_line is not None and end_line < 1:
            raise ExcerptRangeError("end_line must be at least 1", path=str(path))
        if start_line is not None and end_line is not None and end_line < start_line:
            raise ExcerptRangeError(
                "end_line must be greater than or equal to start_line", path=str(path)
            )

        content = self.read(path)
        lines = _LINE_BREAK.split(content)
        total = len(lines)
        if start_line is None and end_line is None:
            return Excerpt(str(path), 1, total, total, content)

        start = start_line or 1
        end = min(end_line, total) if end_line is not None else total
        if start > total:
            raise ExcerptRangeError(
                f"Start line {start} exceeds total lines ({total}) in {path}",
                path=str(path),
            )
        eol = "\r\n" if "\r\n" in content else "\n"
        return Excerpt(str(path), start, end, total, eol.join(lines[start - 1 : end]))

    def modify(
        self,
        path: str | Path,
        operations: Sequence[Operation | Mapping[str, Any]],
        *,
        dry_run: bool = False,
    ) -> ModifyReport:
        """Apply ``operations`` to the document and persist a ``Changed`` result.

        Raises ``DocumentStoreError`` subclasses when the file cannot be read or
        written; edit failures are reported through a ``Failed`` outcome instead.
        """

        original = self.read(path)
        try:
            batch = parse_operations(operations)
        except OperationFailedError as exc:
            outcome: EditOutcome = Failed(
                reason=str(exc), index=exc.index, kind=str(exc.kind), cause=exc.cause
            )
        except EditError as exc:
            outcome = Failed(reason=str(exc), cause=exc)
        else:
            outcome = self.engine.run(original, batch)

        persisted = False
        if isinstance(outcome, Changed) and not dry_run:
            self.write(path, outcome.text)
            persisted = True

        record_event(
            "store.modify",
            level="warning" if isinstance(outcome, Failed) else "info",
            data={"path": str(path), "status": outcome.status, "persisted": persisted},
            logger_name=self._logger_name,
        )
        return ModifyReport(path=str(path), outcome=outcome, persisted=persisted)


__all__ = ["DocumentStore", "Excerpt", "ModifyReport"]
