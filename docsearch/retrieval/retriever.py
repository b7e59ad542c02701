"""Query-time retrieval: embed the query, search the index, assemble context."""

import asyncio
import logging
from collections.abc import Iterable

from docsearch.embedding.provider import EmbeddingProvider
from docsearch.errors import EmbeddingFailureError, InvalidParameterError
from docsearch.models.enums import RetrievalStatus
from docsearch.models.index import EmbeddingResult, SearchResult
from docsearch.models.retrieval import ContextItem, RetrievalResult
from docsearch.vectorstore.memory_store import InMemoryVectorIndex

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\n\n"


def build_context(results: list[SearchResult], separator: str = CONTEXT_SEPARATOR) -> tuple[list[ContextItem], str]:
    """Tag ranked hits with their 1-based rank and join them in rank order."""
    items = [
        ContextItem(rank=rank, chunk=result.chunk, score=result.score)
        for rank, result in enumerate(results, start=1)
    ]
    return items, separator.join(item.render() for item in items)


class Retriever:
    """Retrieval pipeline over an explicitly supplied index and embedder.

    The embedder is called outside of any index operation, so a slow
    embedding call never blocks writers or other readers.
    """

    def __init__(self, index: InMemoryVectorIndex, embedder: EmbeddingProvider):
        self._index = index
        self._embedder = embedder

    @property
    def index(self) -> InMemoryVectorIndex:
        return self._index

    def retrieve(
        self,
        query_text: str,
        top_k: int = 5,
        min_score: float = 0.1,
        source_filter: Iterable[str] | None = None,
    ) -> RetrievalResult:
        """Retrieve ranked context for a query.

        Returns a result with status ``NO_DATA`` when the index holds no
        entries at all (the embedder is not called), ``NO_MATCHES`` when
        nothing clears ``min_score`` and ``OK`` otherwise.

        Raises:
            InvalidParameterError: If query_text is blank.
            EmbeddingFailureError: If the embedder returns no usable vector.
            EmbedderUnavailableError: Propagated from the embedder.
        """
        self._check_query(query_text)
        if self._index.is_empty:
            logger.info("Vector index is empty; no data available for retrieval")
            return RetrievalResult(query=query_text, status=RetrievalStatus.NO_DATA)

        embedding = self._extract_embedding(self._embedder.embed_query([query_text]))
        return self._search(query_text, embedding, top_k, min_score, source_filter)

    async def aretrieve(
        self,
        query_text: str,
        top_k: int = 5,
        min_score: float = 0.1,
        source_filter: Iterable[str] | None = None,
    ) -> RetrievalResult:
        """Async variant of ``retrieve``; the embedder runs in a worker thread."""
        self._check_query(query_text)
        if self._index.is_empty:
            logger.info("Vector index is empty; no data available for retrieval")
            return RetrievalResult(query=query_text, status=RetrievalStatus.NO_DATA)

        embeddings = await asyncio.to_thread(self._embedder.embed_query, [query_text])
        embedding = self._extract_embedding(embeddings)
        return self._search(query_text, embedding, top_k, min_score, source_filter)

    @staticmethod
    def _check_query(query_text: str) -> None:
        if not query_text or not query_text.strip():
            raise InvalidParameterError("query_text must not be empty")

    @staticmethod
    def _extract_embedding(embeddings: list[EmbeddingResult] | None) -> EmbeddingResult:
        if not embeddings:
            raise EmbeddingFailureError("Embedder returned no embedding for the query")
        embedding = embeddings[0]
        if embedding is None or not embedding.vector:
            raise EmbeddingFailureError("Embedder returned an empty query vector")
        return embedding

    def _search(
        self,
        query_text: str,
        embedding: EmbeddingResult,
        top_k: int,
        min_score: float,
        source_filter: Iterable[str] | None,
    ) -> RetrievalResult:
        results = self._index.search(
            embedding.vector,
            top_k=top_k,
            min_score=min_score,
            source_filter=source_filter,
        )
        if not results:
            logger.info("No chunks above min_score=%.2f for query", min_score)
            return RetrievalResult(query=query_text, status=RetrievalStatus.NO_MATCHES)

        items, context = build_context(results)
        logger.info("Retrieved %d chunks (top score %.3f)", len(results), results[0].score)
        return RetrievalResult(
            query=query_text,
            status=RetrievalStatus.OK,
            results=results,
            items=items,
            context=context,
        )
