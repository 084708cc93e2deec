"""Tests for the JSON vector store and local embedder."""

from __future__ import annotations

import math
from pathlib import Path

import pytest

from repostats.features import EmbeddingStore, LocalEmbedder


def test_store_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    store = EmbeddingStore(path)
    store.add(
        "repo",
        entry_id="repo#0",
        vector={"fn": 1.0},
        text='main.rs: /language/"Rust"',
        metadata={"path": "src/main.rs", "hash": "abc"},
    )
    store.persist()

    reloaded = EmbeddingStore(path)

    assert list(reloaded.repositories()) == ["repo"]
    assert reloaded.entries("repo")[0]["metadata"] == {"path": "src/main.rs", "hash": "abc"}


def test_store_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")

    assert list(EmbeddingStore(path).repositories()) == []


def test_store_replace_repository_only_drops_one(tmp_path: Path) -> None:
    store = EmbeddingStore(tmp_path / "store.json")
    for repository in ("a", "b"):
        store.add(repository, entry_id=f"{repository}#0", vector={}, text="t", metadata={})

    store.replace_repository("a")

    assert store.entries("a") == []
    assert len(store.entries("b")) == 1


def test_local_embedder_returns_unit_vectors() -> None:
    vectors = LocalEmbedder().embed_many(['app.py: /language/"Python"', ""])

    assert len(vectors) == 2
    norm = math.sqrt(sum(value * value for value in vectors[0].values()))
    assert norm == pytest.approx(1.0)
    assert vectors[1] == {}
