"""Feature preparation for embedding providers."""

from .embedder import EmbeddingProvider, LocalEmbedder
from .flatten import flatten
from .pipeline import (
    EmbeddingResult,
    FeaturePipeline,
    FileData,
    FileFeatures,
    file_tokens,
    prepare_file_features,
    tokenize,
)
from .sentiment import negative_log_sentiment, negative_log_sentiment_float
from .store import EmbeddingStore

__all__ = [
    "EmbeddingProvider",
    "EmbeddingResult",
    "EmbeddingStore",
    "FeaturePipeline",
    "FileData",
    "FileFeatures",
    "LocalEmbedder",
    "file_tokens",
    "flatten",
    "negative_log_sentiment",
    "negative_log_sentiment_float",
    "prepare_file_features",
    "tokenize",
]
