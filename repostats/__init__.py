"""Mine git repositories into statistics models and embedding tokens."""

from .errors import MiningError, RepoStatsError
from .miner import RepositoryMiner, mine_repository
from .models import (
    Contributor,
    LanguageType,
    RepositoryInfo,
    SourceFileChangeFrequency,
    SourceFileInfo,
    Statistics,
)

__version__ = "0.1.0"

__all__ = [
    "Contributor",
    "LanguageType",
    "MiningError",
    "RepoStatsError",
    "RepositoryInfo",
    "RepositoryMiner",
    "SourceFileChangeFrequency",
    "SourceFileInfo",
    "Statistics",
    "mine_repository",
]
