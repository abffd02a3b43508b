"""Immutable text value threaded through an edit batch."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BufferDocument:
    """Plain-string document storage.

    Every mutation returns a fresh document with a bumped ``version`` so each
    step of a batch consumes one value and produces the next. A rope or piece
    table can replace the string later without changing this API.
    """

    text: str = ""
    version: int = 0

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(text=text, version=0)

    def __len__(self) -> int:
        return len(self.text)

    def splice(self, start: int, end: int, text: str) -> "BufferDocument":
        """Return a document with ``[start:end]`` replaced by ``text``."""

        return BufferDocument(
            text=self.text[:start] + text + self.text[end:],
            version=self.version + 1,
        )

    def append(self, text: str) -> "BufferDocument":
        return BufferDocument(text=self.text + text, version=self.version + 1)

    def prepend(self, text: str) -> "BufferDocument":
        return BufferDocument(text=text + self.text, version=self.version + 1)

    def replace_all(self, target: str, text: str) -> "BufferDocument":
        """Return a document with every non-overlapping ``target`` swapped for ``text``."""

        return BufferDocument(
            text=text.join(self.text.split(target)), version=self.version + 1
        )
