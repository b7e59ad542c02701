"""Ingestion pipeline orchestrator.

Wires together: cleaner → chunker → embedding provider → vector index.
"""

import logging

from docsearch.embedding.provider import EmbeddingProvider
from docsearch.errors import DocSearchError, EmbeddingFailureError
from docsearch.ingestion.chunker import chunk_text
from docsearch.models.chunk import Chunk
from docsearch.models.document import SourceDocument
from docsearch.vectorstore.memory_store import InMemoryVectorIndex

logger = logging.getLogger(__name__)


def ingest_document(
    document: SourceDocument,
    index: InMemoryVectorIndex,
    embedder: EmbeddingProvider,
    chunk_size: int = 1200,
    chunk_overlap: int = 200,
    min_chunk_size: int = 100,
    replace_existing: bool = True,
) -> list[Chunk]:
    """Chunk, embed and index a single document.

    With ``replace_existing`` any entries already indexed for the same
    source are removed first, so reprocessing a document does not leave
    stale chunks behind. Embedding happens before the index is touched.

    Returns the chunks that were indexed.

    Raises:
        InvalidParameterError: For malformed chunking parameters.
        EmbeddingFailureError: If the embedder returns too few or empty vectors.
        EmbedderUnavailableError: Propagated from the embedder.
    """
    chunks = chunk_text(
        document.text,
        chunk_size=chunk_size,
        overlap=chunk_overlap,
        min_chunk_size=min_chunk_size,
        source_id=document.source_id,
        source_type=document.source_type,
    )
    if not chunks:
        logger.warning("No chunks produced for %s", document.title)
        return []

    embeddings = embedder.embed([c.text for c in chunks])
    if len(embeddings) != len(chunks) or any(not e.vector for e in embeddings):
        raise EmbeddingFailureError(
            f"Embedder returned {len(embeddings)} usable vectors for {len(chunks)} chunks of {document.source_id}"
        )

    if replace_existing:
        removed = index.remove_by_source(document.source_id)
        if removed:
            logger.info("Replaced %d existing chunks for %s", removed, document.source_id)

    index.insert(chunks, embeddings)
    logger.info("Ingested %s: %d chunks", document.title, len(chunks))
    return chunks


def ingest_documents(
    documents: list[SourceDocument],
    index: InMemoryVectorIndex,
    embedder: EmbeddingProvider,
    chunk_size: int = 1200,
    chunk_overlap: int = 200,
    min_chunk_size: int = 100,
) -> dict:
    """Ingest a batch of documents, continuing past per-document failures.

    Returns a summary dict with counts.
    """
    documents_ingested = 0
    documents_skipped = 0
    chunks_stored = 0
    errors = 0

    for doc in documents:
        try:
            chunks = ingest_document(
                doc,
                index,
                embedder,
                chunk_size=chunk_size,
                chunk_overlap=chunk_overlap,
                min_chunk_size=min_chunk_size,
            )
        except DocSearchError as e:
            logger.error("Error ingesting %s: %s", doc.title, e)
            errors += 1
            continue

        if not chunks:
            documents_skipped += 1
            continue
        documents_ingested += 1
        chunks_stored += len(chunks)

    return {
        "documents_ingested": documents_ingested,
        "documents_skipped": documents_skipped,
        "chunks_stored": chunks_stored,
        "errors": errors,
        "total_documents": len(documents),
    }
