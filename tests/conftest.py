"""Shared fixtures: a deterministic embedder that needs no model download."""

import re
import zlib

import pytest

from docsearch.embedding.provider import EmbeddingProvider
from docsearch.models.index import EmbeddingResult

WORD_PATTERN = re.compile(r"[a-z0-9]+")


class HashingEmbedder(EmbeddingProvider):
    """Bag-of-words embedder: each word bumps one of ``dimension`` buckets.

    Texts sharing words get a high cosine similarity, which is enough to
    exercise ranking end to end.
    """

    def __init__(self, dimension: int = 256, model: str = "hashing-bow", provider: str = "test"):
        self._dimension = dimension
        self._model = model
        self._provider = provider
        self.calls: list[list[str]] = []

    def embed(self, texts: list[str]) -> list[EmbeddingResult]:
        if not texts:
            raise ValueError("texts must not be empty")
        self.calls.append(list(texts))
        results = []
        for text in texts:
            vector = [0.0] * self._dimension
            for word in WORD_PATTERN.findall(text.lower()):
                vector[zlib.crc32(word.encode()) % self._dimension] += 1.0
            results.append(
                EmbeddingResult(
                    vector=tuple(vector),
                    dimensions=self._dimension,
                    model=self._model,
                    provider=self._provider,
                )
            )
        return results

    @property
    def dimension(self) -> int:
        return self._dimension


@pytest.fixture
def fake_embedder():
    return HashingEmbedder()


@pytest.fixture
def make_embedder():
    """Factory for embedders with a custom dimension or model name."""
    return HashingEmbedder
