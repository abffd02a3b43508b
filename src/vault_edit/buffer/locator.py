"""Literal occurrence search over a text buffer."""

from __future__ import annotations


def locate(haystack: str, needle: str, occurrence: int = 1) -> int | None:
    """Return the start offset of the ``occurrence``-th match of ``needle``.

    Matching is literal and case-sensitive. Matches never overlap: after a hit
    at offset ``o`` the scan resumes at ``o + len(needle)``. ``None`` is
    returned for an empty needle, a non-positive occurrence, or when fewer
    than ``occurrence`` matches exist.
    """

    if not needle or occurrence < 1:
        return None
    index = -1
    start = 0
    for _ in range(occurrence):
        index = haystack.find(needle, start)
        if index == -1:
            return None
        start = index + len(needle)
    return index


def count_occurrences(haystack: str, needle: str) -> int:
    """Count non-overlapping matches of ``needle``; 0 for an empty needle."""

    if not needle:
        return 0
    return haystack.count(needle)


__all__ = ["locate", "count_occurrences"]
