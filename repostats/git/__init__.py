"""Git collaborators."""

from .history import CommitRecord, GitHistory, GitHistoryMiner

__all__ = ["CommitRecord", "GitHistory", "GitHistoryMiner"]
