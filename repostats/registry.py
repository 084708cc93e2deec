"""Source file registry built once per mining pass."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from .errors import FileReadError, PathNormalizationError
from .git.history import GitHistory
from .hashing import content_digest
from .languages import classify
from .logging import get_logger
from .metrics import FileReport, LanguageReport
from .models import SourceFileInfo
from .statistics import file_statistics


@dataclass(frozen=True)
class _PendingFile:
    path: Path
    relative_path: str
    language: str
    loc: int


class SourceFileRegistry:
    """Owns the per-file records for one repository snapshot."""

    def __init__(self, source_files: Sequence[SourceFileInfo]) -> None:
        self._files: List[SourceFileInfo] = list(source_files)
        self._by_path: Dict[str, SourceFileInfo] = {
            source_file.relative_path: source_file for source_file in self._files
        }

    @classmethod
    def build(
        cls,
        root: Path,
        languages: Sequence[LanguageReport],
        history: GitHistory,
        *,
        max_workers: int = 1,
    ) -> "SourceFileRegistry":
        """Read, hash and classify every file reported by the metrics collaborator.

        A single unreadable file aborts the whole build.
        """
        logger = get_logger("registry")
        root_path = Path(root).expanduser().resolve()

        pending: List[_PendingFile] = []
        for language in languages:
            for report in language.reports:
                relative_path = _relativize(root_path, report)
                pending.append(
                    _PendingFile(
                        path=root_path / relative_path,
                        relative_path=relative_path,
                        language=language.name,
                        loc=report.code,
                    )
                )
        pending.sort(key=lambda item: item.relative_path)

        def _load(item: _PendingFile) -> SourceFileInfo:
            return _load_source_file(item, history)

        if max_workers > 1 and len(pending) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                files = list(executor.map(_load, pending))
        else:
            files = [_load(item) for item in pending]

        logger.debug("Registered %d source files under %s", len(files), root_path)
        return cls(files)

    @property
    def source_files(self) -> List[SourceFileInfo]:
        return list(self._files)

    def get(self, relative_path: str) -> Optional[SourceFileInfo]:
        return self._by_path.get(relative_path)

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[SourceFileInfo]:
        return iter(self._files)


def _relativize(root: Path, report: FileReport) -> str:
    path = Path(report.path).expanduser()
    if not path.is_absolute():
        path = root / path
    # Resolve the directory only; a symlinked file keeps its own name.
    path = Path(os.path.realpath(path.parent)) / path.name
    try:
        return path.relative_to(root).as_posix()
    except ValueError as exc:
        raise PathNormalizationError(
            f"{report.path} is not inside repository {root}", path=str(report.path)
        ) from exc


def _load_source_file(item: _PendingFile, history: GitHistory) -> SourceFileInfo:
    try:
        content = item.path.read_bytes()
    except OSError as exc:
        raise FileReadError(f"Failed to read {item.path}: {exc}", path=str(item.path)) from exc

    statistics = file_statistics(
        content,
        item.loc,
        history.change_frequency(item.relative_path),
        path=item.relative_path,
    )
    return SourceFileInfo(
        name=item.path.name,
        relative_path=item.relative_path,
        content_hash=content_digest(content),
        content=content,
        statistics=statistics,
        language=classify(item.language, item.relative_path),
    )


__all__ = ["SourceFileRegistry"]
