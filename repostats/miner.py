"""Mining pass orchestration: one repository in, one RepositoryInfo out."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from .config import RepoStatsConfig, load_config
from .git.history import GitHistoryMiner
from .languages import aggregate_languages, predominant_language
from .logging import get_logger
from .metrics import CodeMetricsProvider, LineCounter
from .models import RepositoryInfo
from .registry import SourceFileRegistry
from .statistics import repository_statistics


class RepositoryMiner:
    """Coordinates metrics collection, history mining and aggregation."""

    def __init__(
        self,
        metrics: CodeMetricsProvider | None = None,
        history_miner: GitHistoryMiner | None = None,
        config: RepoStatsConfig | None = None,
    ) -> None:
        self.metrics = metrics or LineCounter()
        self._history_miner = history_miner
        self._config = config
        self.logger = get_logger("miner")

    def mine(
        self,
        path: str | Path,
        *,
        name: str | None = None,
        exclude: Sequence[str] = (),
    ) -> RepositoryInfo:
        """Run a full mining pass over the repository at ``path``.

        Any failure raises a ``MiningError`` subtype; there is no partial
        result.
        """
        history_miner = self._history_miner or GitHistoryMiner()
        repo_path = history_miner.open(path)
        config = self._config or load_config(repo_path)
        if self._history_miner is None:
            history_miner.max_workers = max(1, config.history.max_workers)
        self.logger.info("Mining repository %s", repo_path)

        excluded = [*config.exclude_paths, *exclude]
        language_reports = self.metrics.collect([repo_path], excluded)
        self.logger.debug(
            "Collected %d languages", len(language_reports), extra={"stage": "metrics"}
        )
        history = history_miner.mine(repo_path)
        self.logger.debug(
            "Walked %d commits", history.total_commits, extra={"stage": "traversal"}
        )
        registry = SourceFileRegistry.build(
            repo_path,
            language_reports,
            history,
            max_workers=config.registry.max_workers,
        )
        self.logger.debug("Read %d files", len(registry), extra={"stage": "read"})

        source_files = registry.source_files
        languages = aggregate_languages(source_files)
        repository = RepositoryInfo(
            name=name or config.name or repo_path.name,
            predominant_language=predominant_language(languages),
            statistics=repository_statistics(source_files, history.total_commits),
            languages=languages,
            contributors=history.contributors,
            source_files=source_files,
        )
        self.logger.info(
            "Mined %s: %d files, %d lines, %d commits",
            repository.name,
            repository.statistics.num_files,
            repository.statistics.loc,
            repository.statistics.num_commits,
        )
        return repository


def mine_repository(
    path: str | Path, *, name: str | None = None, exclude: Sequence[str] = ()
) -> RepositoryInfo:
    """Convenience wrapper around ``RepositoryMiner().mine``."""
    return RepositoryMiner().mine(path, name=name, exclude=exclude)


__all__ = ["RepositoryMiner", "mine_repository"]
