from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a git repo builder rooted at the pytest tmp_path."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    return RepoBuilder(tmp_path)
