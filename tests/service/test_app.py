"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from repostats.errors import FileReadError, RepositoryOpenError
from repostats.models import RepositoryInfo, SourceFileInfo, Statistics
from repostats.service import create_app


class _StubMiner:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[dict[str, object]] = []
        self.error = error

    def mine(self, path, *, name=None, exclude=()):  # type: ignore[no-untyped-def]
        self.calls.append({"path": path, "name": name, "exclude": list(exclude)})
        if self.error is not None:
            raise self.error
        return RepositoryInfo(
            name=name or "stub",
            predominant_language=None,
            statistics=Statistics(size=4, loc=1, num_files=1),
            source_files=[
                SourceFileInfo(
                    name="a.py",
                    relative_path="a.py",
                    content_hash="d" * 64,
                    content=b"x=1\n",
                    statistics=Statistics(size=4, loc=1, num_files=1),
                )
            ],
        )


def _client(miner: _StubMiner) -> TestClient:
    return TestClient(create_app(lambda: miner))  # type: ignore[arg-type, return-value]


def test_health_endpoint() -> None:
    response = _client(_StubMiner()).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_mine_endpoint_returns_document() -> None:
    miner = _StubMiner()

    response = _client(miner).post("/mine", json={"path": "/repo", "exclude": ["vendor/"]})

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "stub"
    assert "content" not in data["source_files"][0]
    assert miner.calls == [{"path": "/repo", "name": None, "exclude": ["vendor/"]}]


def test_embed_endpoint_reports_tokens(tmp_path: Path) -> None:
    store_path = tmp_path / "vectors.json"

    response = _client(_StubMiner()).post(
        "/embed", json={"path": "/repo", "name": "demo", "store_path": str(store_path)}
    )

    assert response.status_code == 200
    assert response.json() == {"repository": "demo", "tokens": 6, "store_path": str(store_path)}
    assert store_path.exists()


@pytest.mark.parametrize(
    ("error", "status_code", "stage"),
    [
        (RepositoryOpenError("not a repository"), 404, "open"),
        (FileReadError("unreadable"), 422, "read"),
    ],
)
def test_mining_errors_map_to_status(error: Exception, status_code: int, stage: str) -> None:
    response = _client(_StubMiner(error)).post("/mine", json={"path": "/repo"})

    assert response.status_code == status_code
    assert response.json()["stage"] == stage
