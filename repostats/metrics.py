"""Code metrics collection: language detection and line counting."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Protocol, Sequence, Tuple

from .errors import FileReadError
from .logging import get_logger

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    ".repostats",
    "target",
}

_LANGUAGE_BY_SUFFIX = {
    ".py": "Python",
    ".pyi": "Python",
    ".js": "JavaScript",
    ".mjs": "JavaScript",
    ".jsx": "JSX",
    ".ts": "TypeScript",
    ".tsx": "TSX",
    ".java": "Java",
    ".kt": "Kotlin",
    ".kts": "Kotlin",
    ".go": "Go",
    ".rs": "Rust",
    ".rb": "Ruby",
    ".php": "PHP",
    ".cs": "C#",
    ".c": "C",
    ".h": "C Header",
    ".cpp": "C++",
    ".cc": "C++",
    ".hpp": "C++ Header",
    ".hh": "C++ Header",
    ".swift": "Swift",
    ".scala": "Scala",
    ".sh": "Shell",
    ".bash": "Shell",
    ".sql": "SQL",
    ".html": "HTML",
    ".css": "CSS",
    ".md": "Markdown",
    ".yaml": "YAML",
    ".yml": "YAML",
    ".json": "JSON",
    ".toml": "TOML",
    ".xml": "XML",
}

_LANGUAGE_BY_NAME = {
    "Dockerfile": "Dockerfile",
    "Makefile": "Makefile",
    "CMakeLists.txt": "CMake",
}

_C_STYLE = (("//",), (("/*", "*/"),))
_HASH_STYLE = (("#",), ())

# language -> (line comment prefixes, (block start, block end) pairs)
_COMMENT_SYNTAX: Dict[str, Tuple[Tuple[str, ...], Tuple[Tuple[str, str], ...]]] = {
    "Python": (("#",), (('"""', '"""'), ("'''", "'''"))),
    "Ruby": (("#",), (("=begin", "=end"),)),
    "Shell": _HASH_STYLE,
    "YAML": _HASH_STYLE,
    "TOML": _HASH_STYLE,
    "Dockerfile": _HASH_STYLE,
    "Makefile": _HASH_STYLE,
    "CMake": _HASH_STYLE,
    "PHP": (("//", "#"), (("/*", "*/"),)),
    "SQL": (("--",), (("/*", "*/"),)),
    "HTML": ((), (("<!--", "-->"),)),
    "XML": ((), (("<!--", "-->"),)),
    "Markdown": ((), (("<!--", "-->"),)),
    "CSS": ((), (("/*", "*/"),)),
    "JSON": ((), ()),
}


@dataclass(frozen=True)
class FileReport:
    """Line counts for a single file."""

    path: Path
    code: int
    blanks: int
    comments: int


@dataclass
class LanguageReport:
    """Aggregate line counts for a language plus its per-file reports."""

    name: str
    blanks: int = 0
    code: int = 0
    comments: int = 0
    reports: List[FileReport] = field(default_factory=list)

    def add(self, report: FileReport) -> None:
        self.reports.append(report)
        self.blanks += report.blanks
        self.code += report.code
        self.comments += report.comments


class CodeMetricsProvider(Protocol):
    """Contract for engines reporting per-file code line counts."""

    def collect(self, paths: Sequence[Path], excluded: Sequence[str]) -> List[LanguageReport]:
        """Return per-language reports for every recognized file under ``paths``."""


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or an exclusion glob."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield current_dir / filename


def detect_language(path: Path) -> Optional[str]:
    """Return the language name for ``path`` or None when unrecognized."""
    by_name = _LANGUAGE_BY_NAME.get(path.name)
    if by_name is not None:
        return by_name
    return _LANGUAGE_BY_SUFFIX.get(path.suffix.lower())


def count_lines(text: str, language: str) -> Tuple[int, int, int]:
    """Return ``(code, blanks, comments)`` for ``text`` written in ``language``."""
    line_markers, block_markers = _COMMENT_SYNTAX.get(language, _C_STYLE)
    code = blanks = comments = 0
    block_end: Optional[str] = None

    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if block_end is not None:
            comments += 1
            if block_end in stripped:
                block_end = None
            continue
        if not stripped:
            blanks += 1
            continue
        if any(stripped.startswith(marker) for marker in line_markers):
            comments += 1
            continue
        opened = _opening_block(stripped, block_markers)
        if opened is not None:
            start, end = opened
            comments += 1
            if end not in stripped[len(start):]:
                block_end = end
            continue
        code += 1

    return code, blanks, comments


def _opening_block(
    line: str, block_markers: Sequence[Tuple[str, str]]
) -> Optional[Tuple[str, str]]:
    for start, end in block_markers:
        if line.startswith(start):
            return start, end
    return None


class LineCounter:
    """Walks repositories and counts code, blank and comment lines per file."""

    def __init__(self) -> None:
        self.logger = get_logger("metrics")

    def collect(self, paths: Sequence[Path], excluded: Sequence[str]) -> List[LanguageReport]:
        languages: Dict[str, LanguageReport] = {}
        for root in paths:
            root_path = Path(root).expanduser().resolve()
            rules = _parse_gitignore(root_path / ".gitignore")
            for pattern in excluded:
                rule = build_ignore_rule(pattern)
                if rule is not None:
                    rules.append(rule)

            for path in _iter_files(root_path, rules):
                language = detect_language(path)
                if language is None:
                    continue
                report = self._count_file(path, language)
                languages.setdefault(language, LanguageReport(name=language)).add(report)

        ordered = [languages[name] for name in sorted(languages)]
        self.logger.debug(
            "Counted %d files across %d languages",
            sum(len(language.reports) for language in ordered),
            len(ordered),
        )
        return ordered

    @staticmethod
    def _count_file(path: Path, language: str) -> FileReport:
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise FileReadError(f"Failed to read {path}: {exc}", path=str(path)) from exc
        code, blanks, comments = count_lines(text, language)
        return FileReport(path=path, code=code, blanks=blanks, comments=comments)


__all__ = [
    "CodeMetricsProvider",
    "FileReport",
    "IgnoreRule",
    "LanguageReport",
    "LineCounter",
    "build_ignore_rule",
    "count_lines",
    "detect_language",
]
