"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from repostats.cli import _build_parser, main
from repostats.logging import configure_logging
from tests._fixtures.repo_builder import RepoBuilder


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()

    assert parser.parse_args(["--verbose", "mine"]).verbose is True
    assert parser.parse_args(["mine", "--verbose"]).verbose is True


def test_cli_collects_repeated_excludes() -> None:
    args = _build_parser().parse_args(["mine", "repo", "--exclude", "a/", "--exclude", "*.gen"])

    assert args.path == "repo"
    assert args.exclude == ["a/", "*.gen"]


def test_cli_mine_writes_document(repo_builder: RepoBuilder, tmp_path: Path) -> None:
    repo_builder.write({"app.py": "print('hi')\n"})
    repo_builder.commit("initial")
    output = tmp_path / "stats.json"

    main(["mine", str(repo_builder.path()), "--output", str(output)])

    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["name"] == "repo"
    assert document["source_files"][0]["relative_path"] == "app.py"


def test_cli_embed_reports_token_count(
    repo_builder: RepoBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"app.py": "print('hi')\n"})
    repo_builder.commit("initial")
    store = tmp_path / "vectors.json"

    main(["embed", str(repo_builder.path()), "--store", str(store)])

    assert "Embedded 6 tokens for repo" in capsys.readouterr().out
    assert store.exists()


def test_cli_exits_on_mining_failure(tmp_path: Path) -> None:
    plain = tmp_path / "plain"
    plain.mkdir()

    with pytest.raises(SystemExit) as excinfo:
        main(["mine", str(plain)])
    assert excinfo.value.code == 1


def test_cli_exits_on_malformed_config(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"app.py": "print('hi')\n", ".repostats.yml": "name: [unclosed\n"})
    repo_builder.commit("initial")

    with pytest.raises(SystemExit) as excinfo:
        main(["mine", str(repo_builder.path())])

    assert excinfo.value.code == 1
    assert "Failed to parse .repostats.yml" in capsys.readouterr().err


def test_cli_writes_configured_log_file(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {"app.py": "print('hi')\n", ".repostats.yml": "logging:\n  file: out/mining.log\n"}
    )
    repo_builder.commit("initial")

    try:
        main(["mine", str(repo_builder.path()), "--exclude", "out/"])
    finally:
        configure_logging()

    contents = (repo_builder.path() / "out" / "mining.log").read_text(encoding="utf-8")
    assert "[traversal] Walked 1 commits" in contents
