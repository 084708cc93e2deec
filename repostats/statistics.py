"""Aggregation of size, line and commit statistics."""

from __future__ import annotations

from typing import Iterable

from .hashing import content_size
from .models import SourceFileChangeFrequency, SourceFileInfo, Statistics


def percentage(part: float, whole: float) -> float:
    """Return ``part / whole * 100`` clamped to ``[0, 100]``; 0 when ``whole`` is 0."""
    if whole <= 0 or part <= 0:
        return 0.0
    return min(100.0, part * 100.0 / whole)


def change_frequency(file_commits: int, total_commits: int) -> SourceFileChangeFrequency:
    return SourceFileChangeFrequency(
        file_commits=file_commits,
        total_commits=total_commits,
        frequency=percentage(file_commits, total_commits),
    )


def file_statistics(
    content: bytes,
    loc: int,
    change: SourceFileChangeFrequency,
    *,
    path: str | None = None,
) -> Statistics:
    """Build the statistics for one file.

    ``loc`` comes from the code metrics collaborator and ``change`` from the
    history miner; the size is the byte length of the content.
    """
    return Statistics(
        size=content_size(content, path=path),
        loc=loc,
        num_files=1,
        num_commits=change.file_commits,
        frequency=change.frequency,
    )


def repository_statistics(
    source_files: Iterable[SourceFileInfo], total_commits: int
) -> Statistics:
    """Sum file statistics into a repository record.

    The repository-level ``frequency`` has no denominator and stays 0.
    """
    size = 0
    loc = 0
    num_files = 0
    for source_file in source_files:
        size += source_file.statistics.size
        loc += source_file.statistics.loc
        num_files += 1
    return Statistics(
        size=size,
        loc=loc,
        num_files=num_files,
        num_commits=total_commits,
        frequency=0.0,
    )


__all__ = [
    "change_frequency",
    "file_statistics",
    "percentage",
    "repository_statistics",
]
