"""Embedding providers used by the feature pipeline."""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Dict, List, Protocol, Sequence

Vector = Dict[str, float]

_WORD_PATTERN = re.compile(r"[A-Za-z0-9_]+")


class EmbeddingProvider(Protocol):
    """Turns an ordered sequence of tokens into one vector per token."""

    def embed_many(self, texts: Sequence[str]) -> List[Vector]:
        """Return vectors in the same order as ``texts``."""


class LocalEmbedder:
    """Bag-of-words unit vectors computed in process."""

    def __init__(self, *, lowercase: bool = True) -> None:
        self.lowercase = lowercase

    def embed(self, text: str) -> Vector:
        tokens = _WORD_PATTERN.findall(text)
        if self.lowercase:
            tokens = [token.lower() for token in tokens]
        if not tokens:
            return {}
        counts = Counter(tokens)
        norm = math.sqrt(sum(value * value for value in counts.values())) or 1.0
        return {token: counts[token] / norm for token in sorted(counts)}

    def embed_many(self, texts: Sequence[str]) -> List[Vector]:
        return [self.embed(text) for text in texts]


__all__ = ["EmbeddingProvider", "LocalEmbedder", "Vector"]
