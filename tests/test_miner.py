"""End-to-end tests for the mining pass."""

from __future__ import annotations

from pathlib import Path

import pytest

from repostats.config import RepoStatsConfig
from repostats.errors import FileReadError, RepositoryOpenError
from repostats.metrics import FileReport, LanguageReport
from repostats.miner import RepositoryMiner
from repostats.models import LanguageType
from tests._fixtures.repo_builder import RepoBuilder


def _seed(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "README.md": "# Sample\n",
            "src/app.py": """
                import sys


                def main():
                    return sys.argv
                """,
        }
    )
    repo_builder.commit("initial", author="Alice")
    repo_builder.write({"src/app.py": "import sys\n\nprint(sys.argv)\n", "src/lib.rs": "fn f() {}\n"})
    repo_builder.commit("rust", author="Bob")
    repo_builder.write({"src/app.py": "import os\n\nprint(os.sep)\n"})
    repo_builder.commit("tweak", author="Alice")


def test_mine_builds_repository_model(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)

    repository = RepositoryMiner().mine(repo_builder.path())

    paths = [source.relative_path for source in repository.source_files]
    assert paths == ["README.md", "src/app.py", "src/lib.rs"]
    assert repository.name == "repo"
    assert repository.statistics.num_commits == 3
    assert repository.statistics.num_files == 3
    assert repository.statistics.size == sum(s.statistics.size for s in repository.source_files)
    assert repository.statistics.loc == sum(s.statistics.loc for s in repository.source_files)

    app = next(s for s in repository.source_files if s.relative_path == "src/app.py")
    assert app.statistics.num_commits == 2
    assert app.statistics.frequency == pytest.approx(66.67, abs=0.01)

    assert [c.name for c in repository.contributors] == ["Alice", "Bob"]
    assert repository.predominant_language is not None
    assert repository.predominant_language.name == "Python"
    shares = [language.line_share for language in repository.languages]
    assert sum(shares) == pytest.approx(100.0, abs=0.01)
    for source in repository.source_files:
        assert 0.0 <= source.statistics.frequency <= 100.0


def test_mine_twice_serializes_identically(repo_builder: RepoBuilder) -> None:
    _seed(repo_builder)
    miner = RepositoryMiner()

    first = miner.mine(repo_builder.path()).to_json()
    second = miner.mine(repo_builder.path()).to_json()

    assert first == second


def test_mine_repository_without_commits(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"main.py": "print('draft')\n"})

    repository = RepositoryMiner().mine(repo_builder.path())

    assert repository.statistics.num_commits == 0
    assert repository.contributors == []
    assert [s.statistics.frequency for s in repository.source_files] == [0.0]


def test_mine_applies_exclusions_and_name(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"keep.py": "a = 1\n", "vendor/dep.py": "b = 2\n"})
    repo_builder.commit("initial")

    repository = RepositoryMiner().mine(repo_builder.path(), name="custom", exclude=["vendor/"])

    assert repository.name == "custom"
    assert [s.relative_path for s in repository.source_files] == ["keep.py"]


def test_mine_reads_exclusions_from_config(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".repostats.yml": "name: configured\nexclude_paths:\n  - generated/\n",
            "keep.py": "a = 1\n",
            "generated/out.py": "b = 2\n",
        }
    )
    repo_builder.commit("initial")

    repository = RepositoryMiner().mine(repo_builder.path())

    paths = [s.relative_path for s in repository.source_files]
    assert repository.name == "configured"
    assert "keep.py" in paths
    assert "generated/out.py" not in paths


def test_mine_without_recognized_files_uses_sentinel_language(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"notes.unknownext": "hello\n"})
    repo_builder.commit("initial")

    repository = RepositoryMiner().mine(repo_builder.path())

    assert repository.source_files == []
    assert repository.predominant_language == LanguageType()


def test_mine_rejects_non_repository(tmp_path: Path) -> None:
    plain = tmp_path / "plain"
    plain.mkdir()

    with pytest.raises(RepositoryOpenError):
        RepositoryMiner(config=RepoStatsConfig(root=plain)).mine(plain)


class _VanishingMetrics:
    """Reports a file that does not exist on disk."""

    def collect(self, paths, excluded):  # type: ignore[no-untyped-def]
        root = Path(paths[0])
        report = LanguageReport(name="Python")
        report.add(FileReport(path=root / "ghost.py", code=1, blanks=0, comments=0))
        return [report]


def test_mine_aborts_on_unreadable_file(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"real.py": "x = 1\n"})
    repo_builder.commit("initial")

    with pytest.raises(FileReadError):
        RepositoryMiner(metrics=_VanishingMetrics()).mine(repo_builder.path())


def test_mine_reports_open_error_before_reading_config(tmp_path: Path) -> None:
    (tmp_path / ".repostats.yml").write_text("name: [unclosed\n", encoding="utf-8")

    with pytest.raises(RepositoryOpenError):
        RepositoryMiner().mine(tmp_path / "missing")


def test_mine_keeps_symlinked_file_under_its_own_path(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"real.py": "x = 1\n"})
    repo_builder.commit("initial")
    (repo_builder.path() / "alias.py").symlink_to("real.py")
    repo_builder.commit("alias")
    repo_builder.write({"real.py": "x = 2\n"})
    repo_builder.commit("tweak")

    repository = RepositoryMiner().mine(repo_builder.path())

    by_path = {source.relative_path: source for source in repository.source_files}
    assert sorted(by_path) == ["alias.py", "real.py"]
    assert by_path["alias.py"].name == "alias.py"
    assert by_path["alias.py"].statistics.num_commits == 1
    assert by_path["real.py"].statistics.num_commits == 1
