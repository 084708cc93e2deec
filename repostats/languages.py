"""Language classification, distribution and predominance."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, Iterable, List, Sequence, Set

from .models import LanguageType, SourceFileInfo, Statistics
from .statistics import percentage


def classify(language_name: str, path: str) -> LanguageType:
    """Return the language record for a single file."""
    suffix = PurePosixPath(path).suffix
    extensions = [suffix[1:]] if suffix else []
    return LanguageType(name=language_name, extensions=extensions)


def aggregate_languages(source_files: Iterable[SourceFileInfo]) -> List[LanguageType]:
    """Merge per-file languages by name, summing their file statistics."""
    totals: Dict[str, Statistics] = {}
    extensions: Dict[str, Set[str]] = {}
    for source_file in source_files:
        language = source_file.language
        if language is None:
            continue
        statistics = totals.setdefault(language.name, Statistics())
        statistics.size += source_file.statistics.size
        statistics.loc += source_file.statistics.loc
        statistics.num_files += source_file.statistics.num_files
        statistics.num_commits += source_file.statistics.num_commits
        extensions.setdefault(language.name, set()).update(language.extensions)

    languages = [
        LanguageType(name=name, extensions=sorted(extensions[name]), statistics=totals[name])
        for name in sorted(totals)
    ]
    calculate_percentage_distribution(languages)
    return languages


def sum_lines_of_code(languages: Iterable[LanguageType]) -> int:
    return sum(language.statistics.loc for language in languages if language.statistics is not None)


def calculate_percentage_distribution(languages: Sequence[LanguageType]) -> None:
    """Set ``line_share`` on every language to its share of the total lines."""
    total_loc = sum_lines_of_code(languages)
    for language in languages:
        loc = language.statistics.loc if language.statistics is not None else 0
        language.line_share = percentage(loc, total_loc)


def predominant_language(languages: Iterable[LanguageType]) -> LanguageType:
    """Return the language with the largest line share.

    Ties go to the larger size, then to the name that sorts first. When no
    language has a positive share an empty ``LanguageType`` is returned.
    """
    best = LanguageType()
    best_share = 0.0
    best_size = 0
    for language in sorted(languages, key=lambda item: item.name):
        if language.statistics is None:
            continue
        share = language.line_share
        size = language.statistics.size
        if share > best_share or (share == best_share and share > 0 and size > best_size):
            best = language
            best_share = share
            best_size = size
    return best


__all__ = [
    "aggregate_languages",
    "calculate_percentage_distribution",
    "classify",
    "predominant_language",
    "sum_lines_of_code",
]
