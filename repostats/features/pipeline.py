"""Feature preparation: repository model -> embedding tokens -> vectors."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import List, Sequence, Tuple

from ..errors import EmbeddingError, VectorStoreError
from ..logging import get_logger
from ..models import RepositoryInfo, SourceFileInfo
from .embedder import EmbeddingProvider, LocalEmbedder, Vector
from .flatten import flatten
from .sentiment import negative_log_sentiment, negative_log_sentiment_float
from .store import EmbeddingStore


@dataclass(frozen=True)
class FileData:
    """The embedded view of one source file."""

    language: str
    id_hash: str
    contents: str
    size_sentiment: float
    loc_sentiment: float
    frequency_sentiment: float


@dataclass(frozen=True)
class FileFeatures:
    name: str
    data: FileData


@dataclass
class EmbeddingResult:
    """Tokens handed to the embedding provider and the vectors it returned."""

    tokens: List[str] = field(default_factory=list)
    vectors: List[Vector] = field(default_factory=list)


def prepare_file_features(source_file: SourceFileInfo) -> FileFeatures:
    statistics = source_file.statistics
    language = source_file.language.name if source_file.language is not None else ""
    return FileFeatures(
        name=source_file.name,
        data=FileData(
            language=language,
            id_hash=source_file.content_hash,
            contents=source_file.text,
            size_sentiment=negative_log_sentiment(statistics.size),
            loc_sentiment=negative_log_sentiment(statistics.loc),
            frequency_sentiment=negative_log_sentiment_float(statistics.frequency),
        ),
    )


def file_tokens(source_file: SourceFileInfo) -> List[str]:
    """Return ``"<file-name>: <path>/<value>"`` tokens for one file."""
    features = prepare_file_features(source_file)
    return [f"{features.name}: {token}" for token in flatten(asdict(features.data))]


def tokenize(repository: RepositoryInfo) -> List[str]:
    """Flatten every source file of ``repository`` into embedding tokens."""
    return [token for token, _ in _tokens_with_sources(repository)]


def _tokens_with_sources(repository: RepositoryInfo) -> List[Tuple[str, SourceFileInfo]]:
    return [
        (token, source_file)
        for source_file in repository.source_files
        for token in file_tokens(source_file)
    ]


class FeaturePipeline:
    """Embeds a finished repository snapshot in a single provider call."""

    def __init__(
        self,
        embedder: EmbeddingProvider | None = None,
        store: EmbeddingStore | None = None,
    ) -> None:
        self.embedder = embedder or LocalEmbedder()
        self.store = store
        self.logger = get_logger("features")

    def run(self, repository: RepositoryInfo) -> EmbeddingResult:
        pairs = _tokens_with_sources(repository)
        tokens = [token for token, _ in pairs]
        self.logger.info("Embedding %d tokens for %s", len(tokens), repository.name)

        vectors = self._embed(tokens)
        if self.store is not None:
            self._store(repository.name, pairs, vectors)
        return EmbeddingResult(tokens=tokens, vectors=vectors)

    def _embed(self, tokens: Sequence[str]) -> List[Vector]:
        try:
            vectors = list(self.embedder.embed_many(tokens))
        except Exception as exc:
            raise EmbeddingError(f"Embedding provider failed: {exc}") from exc
        if len(vectors) != len(tokens):
            raise EmbeddingError(
                f"Embedding provider returned {len(vectors)} vectors for {len(tokens)} tokens"
            )
        return vectors

    def _store(
        self,
        repository: str,
        pairs: Sequence[Tuple[str, SourceFileInfo]],
        vectors: Sequence[Vector],
    ) -> None:
        store = self.store
        if store is None:
            return
        store.replace_repository(repository)
        for index, ((token, source_file), vector) in enumerate(zip(pairs, vectors)):
            store.add(
                repository,
                entry_id=f"{repository}#{index}",
                vector=vector,
                text=token,
                metadata={
                    "path": source_file.relative_path,
                    "hash": source_file.content_hash,
                },
            )
        try:
            store.persist()
        except OSError as exc:
            raise VectorStoreError(f"Failed to persist embeddings for {repository}: {exc}") from exc
        self.logger.debug("Stored %d vectors at %s", len(vectors), store.path)


__all__ = [
    "EmbeddingResult",
    "FeaturePipeline",
    "FileData",
    "FileFeatures",
    "file_tokens",
    "prepare_file_features",
    "tokenize",
]
