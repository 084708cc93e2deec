"""JSON-backed vector store for token embeddings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List

_STORE_VERSION = 1


class EmbeddingStore:
    """Persists token vectors grouped by repository name."""

    def __init__(self, path: Path | None = None, *, load_existing: bool = True) -> None:
        self._path = path
        self._store: Dict[str, List[Dict[str, object]]] = {}
        if path is not None and load_existing:
            self._load(path)

    @property
    def path(self) -> Path | None:
        return self._path

    def replace_repository(self, repository: str) -> None:
        """Drop every entry stored for ``repository``."""
        self._store.pop(repository, None)

    def add(
        self,
        repository: str,
        *,
        entry_id: str,
        vector: Dict[str, float],
        text: str,
        metadata: Dict[str, object],
    ) -> None:
        entry = {
            "id": entry_id,
            "vector": vector,
            "text": text,
            "metadata": metadata,
        }
        self._store.setdefault(repository, []).append(entry)

    def entries(self, repository: str) -> List[Dict[str, object]]:
        return list(self._store.get(repository, []))

    def repositories(self) -> Iterable[str]:
        return self._store.keys()

    def persist(self) -> None:
        """Write the store to disk; raises OSError when the file cannot be written."""
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "version": _STORE_VERSION,
            "repositories": {
                repository: [self._prepare_entry(entry) for entry in entries]
                for repository, entries in self._store.items()
            },
        }
        self._path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError):
            return
        if not isinstance(data, dict) or data.get("version") != _STORE_VERSION:
            return
        repositories = data.get("repositories")
        if not isinstance(repositories, dict):
            return
        for repository, entries in repositories.items():
            if not isinstance(entries, list):
                continue
            valid_entries = [
                entry
                for entry in entries
                if isinstance(entry, dict) and "text" in entry and "vector" in entry
            ]
            if valid_entries:
                self._store[repository] = valid_entries

    @staticmethod
    def _prepare_entry(entry: Dict[str, object]) -> Dict[str, object]:
        vector = entry.get("vector", {})
        if isinstance(vector, dict):
            vector = {str(key): float(value) for key, value in vector.items() if isinstance(value, (int, float))}
        prepared = dict(entry)
        prepared["vector"] = vector
        return prepared


__all__ = ["EmbeddingStore"]
