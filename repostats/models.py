"""Core data models shared across repostats components."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .errors import SerializationError


@dataclass
class Statistics:
    """Size, line and commit statistics for a file, language or repository.

    ``frequency`` is the commit-change ratio in percent. It is only meaningful
    for files; repository and language records leave it at ``0.0``.
    """

    size: int = 0
    loc: int = 0
    num_files: int = 0
    num_commits: int = 0
    frequency: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "loc": self.loc,
            "num_files": self.num_files,
            "num_commits": self.num_commits,
            "frequency": self.frequency,
        }


@dataclass
class LanguageType:
    """A language with the file extensions seen for it.

    ``line_share`` holds the percentage of the repository's lines of code
    written in this language.
    """

    name: str = ""
    extensions: List[str] = field(default_factory=list)
    statistics: Optional[Statistics] = None
    line_share: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "extensions": sorted(set(self.extensions)),
            "line_share": self.line_share,
        }
        if self.statistics is not None:
            data["statistics"] = self.statistics.to_dict()
        return data


@dataclass
class SourceFileInfo:
    """A single source file discovered during a mining pass."""

    name: str
    relative_path: str
    content_hash: str
    content: bytes = field(repr=False)
    statistics: Statistics = field(default_factory=Statistics)
    language: Optional[LanguageType] = None

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "relative_path": self.relative_path,
            "content_hash": self.content_hash,
            "statistics": self.statistics.to_dict(),
        }
        if self.language is not None:
            data["language"] = self.language.to_dict()
        return data


@dataclass
class Contributor:
    """Commit attribution for a single author."""

    name: str
    last_contribution: datetime
    percentage_contribution: float
    statistics: Statistics = field(default_factory=Statistics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "last_contribution": _format_timestamp(self.last_contribution),
            "percentage_contribution": self.percentage_contribution,
            "statistics": self.statistics.to_dict(),
        }


@dataclass(frozen=True)
class SourceFileChangeFrequency:
    """How often a file changed relative to the whole history."""

    file_commits: int
    total_commits: int
    frequency: float


@dataclass(frozen=True)
class RepositoryInfo:
    """Aggregate root produced by one mining pass."""

    name: str
    predominant_language: Optional[LanguageType]
    statistics: Statistics
    languages: List[LanguageType] = field(default_factory=list)
    contributors: List[Contributor] = field(default_factory=list)
    source_files: List[SourceFileInfo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "statistics": self.statistics.to_dict(),
            "languages": [language.to_dict() for language in self.languages],
            "contributors": [contributor.to_dict() for contributor in self.contributors],
            "source_files": [source.to_dict() for source in self.source_files],
        }
        if self.predominant_language is not None:
            data["predominant_language"] = self.predominant_language.to_dict()
        return data

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialize the repository as a self-contained JSON document."""
        try:
            return json.dumps(self.to_dict(), indent=indent, sort_keys=True, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Failed to serialize repository {self.name}: {exc}") from exc


def _format_timestamp(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


__all__ = [
    "Contributor",
    "LanguageType",
    "RepositoryInfo",
    "SourceFileChangeFrequency",
    "SourceFileInfo",
    "Statistics",
]
