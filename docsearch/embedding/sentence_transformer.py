"""Sentence Transformer embedding provider implementation."""

import logging

from sentence_transformers import SentenceTransformer

from docsearch.embedding.provider import EmbeddingProvider
from docsearch.errors import EmbedderUnavailableError
from docsearch.models.index import EmbeddingResult

logger = logging.getLogger(__name__)

PROVIDER_NAME = "sentence-transformers"
DEFAULT_MODEL = "all-MiniLM-L6-v2"


class SentenceTransformerEmbeddingProvider(EmbeddingProvider):
    """Embedding provider wrapping sentence-transformers models.

    Default model: all-MiniLM-L6-v2 (384 dimensions, ~80MB). Embeddings are
    mean-pooled and L2-normalized.
    """

    def __init__(self, model_name: str = DEFAULT_MODEL, query_prefix: str = ""):
        logger.info("Loading embedding model: %s", model_name)
        try:
            try:
                self._model = SentenceTransformer(model_name, local_files_only=True)
            except OSError:
                self._model = SentenceTransformer(model_name)
        except (OSError, ValueError, ImportError) as e:
            raise EmbedderUnavailableError(f"Could not load embedding model {model_name}: {e}") from e
        self._model_name = model_name
        self._query_prefix = query_prefix
        self._dimension = self._model.get_sentence_embedding_dimension()

    @property
    def model_name(self) -> str:
        return self._model_name

    def embed(self, texts: list[str]) -> list[EmbeddingResult]:
        if not texts:
            raise ValueError("texts must not be empty")
        try:
            embeddings = self._model.encode(
                texts,
                show_progress_bar=False,
                normalize_embeddings=True,
            )
        except (RuntimeError, ValueError) as e:
            raise EmbedderUnavailableError(f"Embedding generation failed: {e}") from e

        return [
            EmbeddingResult(
                vector=tuple(vector.tolist()),
                dimensions=len(vector),
                model=self._model_name,
                provider=PROVIDER_NAME,
            )
            for vector in embeddings
        ]

    def embed_query(self, texts: list[str]) -> list[EmbeddingResult]:
        if self._query_prefix:
            texts = [self._query_prefix + t for t in texts]
        return self.embed(texts)

    @property
    def dimension(self) -> int:
        return self._dimension
