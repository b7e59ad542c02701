"""Embedder interface consumed by ingestion and retrieval."""

from abc import ABC, abstractmethod

from docsearch.models.index import EmbeddingResult


class EmbeddingProvider(ABC):
    """Turns text into ``EmbeddingResult`` vectors.

    The index only stores what a provider returns, so the model name and
    provider label on each result end up in search metadata and stats.
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> list[EmbeddingResult]:
        """Embed ``texts`` and return one result per input, in input order.

        Raises ValueError for an empty batch and EmbedderUnavailableError
        when the backing model cannot produce vectors.
        """
        ...

    def embed_query(self, texts: list[str]) -> list[EmbeddingResult]:
        """Embed search queries. Same as ``embed`` unless a provider needs a query prefix."""
        return self.embed(texts)

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Length of the vectors this provider produces."""
        ...
