"""Commit graph traversal: commit totals, per-file churn and contributors."""

from __future__ import annotations

import subprocess
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Sequence, Set, Tuple

from ..errors import CommitTraversalError, RepositoryOpenError, TreeDiffError
from ..logging import get_logger
from ..models import Contributor, SourceFileChangeFrequency, Statistics
from ..statistics import change_frequency, percentage

_FIELD_SEP = "\x1f"
_LOG_FORMAT = "%H%x1f%P%x1f%an%x1f%at"


@dataclass(frozen=True)
class CommitRecord:
    """A commit reachable from HEAD."""

    sha: str
    parents: Tuple[str, ...]
    author_name: str
    author_time: datetime

    @property
    def is_root(self) -> bool:
        return not self.parents


@dataclass
class GitHistory:
    """Result of one walk over the commit graph."""

    total_commits: int = 0
    file_commits: Dict[str, int] = field(default_factory=dict)
    contributors: List[Contributor] = field(default_factory=list)

    def change_frequency(self, path: str) -> SourceFileChangeFrequency:
        """Return how often ``path`` (repository-relative, posix) changed."""
        return change_frequency(self.file_commits.get(path, 0), self.total_commits)


class GitHistoryMiner:
    """Walks the git history of a repository through the ``git`` executable."""

    def __init__(
        self,
        runner: Callable[..., str] | None = None,
        *,
        max_workers: int = 1,
    ) -> None:
        self._runner = runner or self._default_runner
        self.max_workers = max(1, max_workers)
        self.logger = get_logger("git.history")

    def mine(self, repo_path: str | Path) -> GitHistory:
        """Walk every commit reachable from HEAD once."""
        repo = self.open(repo_path)
        commits = self.walk(repo)
        file_commits = self._count_file_commits(repo, commits)
        contributors = aggregate_contributors(commits)
        self.logger.info(
            "Walked %d commits touching %d paths by %d contributors",
            len(commits),
            len(file_commits),
            len(contributors),
        )
        return GitHistory(
            total_commits=len(commits),
            file_commits=file_commits,
            contributors=contributors,
        )

    def open(self, repo_path: str | Path) -> Path:
        """Return the resolved work tree root, failing when it is not one."""
        repo = Path(repo_path).expanduser().resolve()
        if not repo.is_dir():
            raise RepositoryOpenError(f"Repository path not found: {repo_path}", path=str(repo))
        try:
            toplevel = self._run(["git", "rev-parse", "--show-toplevel"], cwd=repo).strip()
        except (subprocess.CalledProcessError, OSError) as exc:
            raise RepositoryOpenError(
                f"{repo} is not a Git repository: {exc}", path=str(repo)
            ) from exc
        if not toplevel or Path(toplevel).resolve() != repo:
            raise RepositoryOpenError(
                f"{repo} is not the root of a Git work tree", path=str(repo)
            )
        return repo

    def walk(self, repo: Path) -> List[CommitRecord]:
        """Enumerate every commit reachable from HEAD; empty for an unborn HEAD."""
        if not self._has_head(repo):
            self.logger.debug("HEAD of %s has no commits", repo)
            return []
        try:
            output = self._run(["git", "log", f"--format={_LOG_FORMAT}", "HEAD"], cwd=repo)
        except (subprocess.CalledProcessError, OSError) as exc:
            raise CommitTraversalError(
                f"Failed to walk commits of {repo}: {exc}", path=str(repo)
            ) from exc
        try:
            return [parse_commit_line(line) for line in output.splitlines() if line.strip()]
        except ValueError as exc:
            raise CommitTraversalError(
                f"Unreadable commit entry in {repo}: {exc}", path=str(repo)
            ) from exc

    def changed_paths(self, repo: Path, commit: CommitRecord) -> Set[str]:
        """Return the paths changed by ``commit`` relative to its first parent."""
        if commit.is_root:
            return set()
        args = [
            "git",
            "diff-tree",
            "-r",
            "-z",
            "--no-renames",
            "--name-only",
            commit.parents[0],
            commit.sha,
        ]
        try:
            output = self._run(args, cwd=repo)
        except (subprocess.CalledProcessError, OSError) as exc:
            raise TreeDiffError(
                f"Failed to diff {commit.sha} against {commit.parents[0]}: {exc}",
                path=str(repo),
            ) from exc
        return {path for path in output.split("\0") if path}

    # ------------------------------------------------------------------
    # Internals

    def _has_head(self, repo: Path) -> bool:
        try:
            self._run(["git", "rev-parse", "--verify", "--quiet", "HEAD^{commit}"], cwd=repo)
        except subprocess.CalledProcessError:
            return False
        except OSError as exc:
            raise CommitTraversalError(f"Failed to resolve HEAD of {repo}: {exc}") from exc
        return True

    def _count_file_commits(
        self, repo: Path, commits: Sequence[CommitRecord]
    ) -> Dict[str, int]:
        candidates = [commit for commit in commits if not commit.is_root]
        counts: Counter[str] = Counter()
        if self.max_workers > 1 and len(candidates) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                for paths in executor.map(lambda commit: self.changed_paths(repo, commit), candidates):
                    counts.update(paths)
        else:
            for commit in candidates:
                counts.update(self.changed_paths(repo, commit))
        return dict(sorted(counts.items()))

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        return self._runner(args, cwd=cwd, capture_output=True)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            capture_output=capture_output,
            encoding="utf-8",
            errors="replace",
        )
        return completed.stdout if capture_output else ""


def parse_commit_line(line: str) -> CommitRecord:
    sha, parents, author_name, author_time = line.split(_FIELD_SEP)
    return CommitRecord(
        sha=sha,
        parents=tuple(parents.split()),
        author_name=author_name,
        author_time=datetime.fromtimestamp(int(author_time), tz=UTC),
    )


def aggregate_contributors(commits: Iterable[CommitRecord]) -> List[Contributor]:
    """Group commits by author name.

    Contributors come back ordered by commit count (descending) then name.
    """
    counts: Counter[str] = Counter()
    latest: Dict[str, datetime] = {}
    total = 0
    for commit in commits:
        counts[commit.author_name] += 1
        previous = latest.get(commit.author_name)
        if previous is None or commit.author_time > previous:
            latest[commit.author_name] = commit.author_time
        total += 1

    contributors = [
        Contributor(
            name=name,
            last_contribution=latest[name],
            percentage_contribution=percentage(count, total),
            statistics=Statistics(num_commits=count),
        )
        for name, count in counts.items()
    ]
    contributors.sort(key=lambda contributor: (-contributor.statistics.num_commits, contributor.name))
    return contributors


__all__ = [
    "CommitRecord",
    "GitHistory",
    "GitHistoryMiner",
    "aggregate_contributors",
    "parse_commit_line",
]
