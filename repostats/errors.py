"""Exception types raised by repostats."""

from __future__ import annotations


class RepoStatsError(RuntimeError):
    """Base class for every error raised by repostats."""


class ConfigError(RepoStatsError):
    """Raised when the configuration file cannot be parsed."""


class MiningError(RepoStatsError):
    """A mining pass failed; no repository model was produced."""

    stage = "mining"

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class RepositoryOpenError(MiningError):
    stage = "open"


class CommitTraversalError(MiningError):
    stage = "traversal"


class TreeDiffError(MiningError):
    stage = "diff"


class FileReadError(MiningError):
    stage = "read"


class SizeOverflowError(MiningError):
    stage = "size"


class PathNormalizationError(MiningError):
    stage = "path"


class SerializationError(RepoStatsError):
    """Raised when the repository model cannot be encoded."""


class EmbeddingError(RepoStatsError):
    """Raised when the embedding provider fails."""


class VectorStoreError(RepoStatsError):
    """Raised when token vectors cannot be written to the store."""


__all__ = [
    "CommitTraversalError",
    "ConfigError",
    "EmbeddingError",
    "FileReadError",
    "MiningError",
    "PathNormalizationError",
    "RepoStatsError",
    "RepositoryOpenError",
    "SerializationError",
    "SizeOverflowError",
    "TreeDiffError",
    "VectorStoreError",
]
