"""In-memory vector index with cosine-similarity search.

Entries are kept in a primary map keyed by chunk id, with two secondary
indices that prune the candidate set before scoring:

- source index: source_id -> ids of the entries from that source
- dimension index: dimensions -> ids of the entries with that vector length

Neither secondary index ever holds a key mapped to an empty set, and both
always hold exactly the ids present in the primary map.

State lives in an immutable snapshot. Writers serialize on a lock, build
the next snapshot and publish it with a single assignment; readers work on
whichever snapshot was current when they started and never lock.
"""

import logging
import threading
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np

from docsearch.errors import DimensionMismatchError
from docsearch.models.chunk import Chunk
from docsearch.models.index import EmbeddingResult, IndexEntry, IndexStats, SearchResult
from docsearch.vectorstore.similarity import as_vector, cosine_scores, vector_norm

logger = logging.getLogger(__name__)

# Rough per-entry bookkeeping overhead used by the storage estimate
_ENTRY_OVERHEAD_BYTES = 200


@dataclass(frozen=True)
class _Snapshot:
    entries: dict[str, IndexEntry] = field(default_factory=dict)
    source_index: dict[str, frozenset[str]] = field(default_factory=dict)
    dimension_index: dict[int, frozenset[str]] = field(default_factory=dict)
    next_sequence: int = 0


def _add_key(index: dict, key, entry_id: str) -> None:
    index.setdefault(key, set()).add(entry_id)


def _discard_key(index: dict, key, entry_id: str) -> None:
    ids = index.get(key)
    if ids is None:
        return
    ids.discard(entry_id)
    if not ids:
        del index[key]


def _thaw(index: dict) -> dict:
    return {key: set(ids) for key, ids in index.items()}


def _freeze(index: dict) -> dict:
    return {key: frozenset(ids) for key, ids in index.items()}


class InMemoryVectorIndex:
    """Brute-force vector index over chunk embeddings.

    Embeddings from different models may coexist; a search only ever
    compares the query with entries of the same dimensionality.
    """

    def __init__(self):
        self._snapshot = _Snapshot()
        self._write_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._snapshot.entries)

    def __contains__(self, entry_id: str) -> bool:
        return entry_id in self._snapshot.entries

    @property
    def is_empty(self) -> bool:
        return not self._snapshot.entries

    def insert(self, chunks: Sequence[Chunk], embeddings: Sequence[EmbeddingResult]) -> int:
        """Add chunks with their embeddings.

        Re-inserting an existing chunk id replaces that entry but keeps its
        original insertion position for tie-breaking.

        Returns the number of entries written.

        Raises:
            DimensionMismatchError: If the chunk and embedding counts differ,
                or an embedding's vector length differs from its declared
                dimensions. Nothing is written in either case.
        """
        if len(chunks) != len(embeddings):
            raise DimensionMismatchError(
                f"Mismatch between chunks ({len(chunks)}) and embeddings ({len(embeddings)})"
            )
        if not chunks:
            return 0

        vectors = []
        for chunk, embedding in zip(chunks, embeddings):
            if len(embedding.vector) != embedding.dimensions:
                raise DimensionMismatchError(
                    f"Embedding for chunk {chunk.id} declares {embedding.dimensions} dimensions "
                    f"but has {len(embedding.vector)} values"
                )
            vectors.append(as_vector(embedding.vector))

        with self._write_lock:
            snapshot = self._snapshot
            entries = dict(snapshot.entries)
            source_index = _thaw(snapshot.source_index)
            dimension_index = _thaw(snapshot.dimension_index)
            sequence = snapshot.next_sequence

            for chunk, embedding, vector in zip(chunks, embeddings, vectors):
                previous = entries.get(chunk.id)
                if previous is not None:
                    _discard_key(source_index, previous.source_id, chunk.id)
                    _discard_key(dimension_index, previous.dimensions, chunk.id)
                    entry_sequence = previous.sequence
                else:
                    entry_sequence = sequence
                    sequence += 1

                entries[chunk.id] = IndexEntry(
                    chunk=chunk,
                    vector=vector,
                    norm=vector_norm(vector),
                    dimensions=embedding.dimensions,
                    model=embedding.model,
                    provider=embedding.provider,
                    sequence=entry_sequence,
                )
                _add_key(source_index, chunk.source_id, chunk.id)
                _add_key(dimension_index, embedding.dimensions, chunk.id)

            self._snapshot = _Snapshot(
                entries=entries,
                source_index=_freeze(source_index),
                dimension_index=_freeze(dimension_index),
                next_sequence=sequence,
            )

        logger.info("Added %d chunks to vector index (%d total)", len(chunks), len(entries))
        return len(chunks)

    def remove_by_source(self, source_id: str) -> int:
        """Remove every entry belonging to ``source_id``.

        Returns the number of entries removed, 0 for an unknown source.
        """
        with self._write_lock:
            snapshot = self._snapshot
            entry_ids = snapshot.source_index.get(source_id)
            if not entry_ids:
                return 0

            entries = dict(snapshot.entries)
            dimension_index = _thaw(snapshot.dimension_index)
            source_index = dict(snapshot.source_index)
            del source_index[source_id]

            for entry_id in entry_ids:
                entry = entries.pop(entry_id)
                _discard_key(dimension_index, entry.dimensions, entry_id)

            self._snapshot = _Snapshot(
                entries=entries,
                source_index=source_index,
                dimension_index=_freeze(dimension_index),
                next_sequence=snapshot.next_sequence,
            )

        logger.info("Removed %d chunks from source: %s", len(entry_ids), source_id)
        return len(entry_ids)

    def clear(self) -> None:
        """Discard all entries and secondary indices."""
        with self._write_lock:
            self._snapshot = _Snapshot()
        logger.info("Vector index cleared")

    def search(
        self,
        query_embedding: Sequence[float],
        top_k: int = 5,
        min_score: float = 0.1,
        source_filter: Iterable[str] | None = None,
    ) -> list[SearchResult]:
        """Find the chunks most similar to a query embedding.

        Only entries whose dimensionality equals ``len(query_embedding)``
        and, when ``source_filter`` is non-empty, whose source is listed
        are scored. Results have ``score >= min_score``, are sorted by score
        (best first, earlier insertions first on ties) and number at most
        ``top_k``. An empty list is a normal outcome, never an error.
        """
        if top_k <= 0:
            return []

        snapshot = self._snapshot
        candidate_ids = snapshot.dimension_index.get(len(query_embedding), frozenset())

        if isinstance(source_filter, str):
            source_filter = [source_filter]
        sources = set(source_filter) if source_filter else None
        if sources is not None:
            allowed: set[str] = set()
            for source_id in sources:
                allowed |= snapshot.source_index.get(source_id, frozenset())
            candidate_ids = candidate_ids & allowed

        if not candidate_ids:
            logger.debug("No matching entries for %d-dim query", len(query_embedding))
            return []

        candidates = sorted(
            (snapshot.entries[entry_id] for entry_id in candidate_ids),
            key=lambda entry: entry.sequence,
        )
        logger.debug("Scoring %d candidate chunks", len(candidates))

        matrix = np.vstack([entry.vector for entry in candidates])
        norms = np.array([entry.norm for entry in candidates], dtype=np.float64)
        scores = cosine_scores(as_vector(query_embedding), matrix, norms)

        ranked = sorted(
            (
                (float(score), entry)
                for score, entry in zip(scores, candidates)
                if score >= min_score
            ),
            key=lambda pair: (-pair[0], pair[1].sequence),
        )[:top_k]

        if ranked:
            logger.debug(
                "Found %d similar chunks, score range %.3f - %.3f",
                len(ranked), ranked[0][0], ranked[-1][0],
            )
        return [
            SearchResult(chunk=entry.chunk, score=score, metadata=entry.metadata)
            for score, entry in ranked
        ]

    def stats(self) -> IndexStats:
        """Aggregate counts over the current entries."""
        snapshot = self._snapshot
        entries = list(snapshot.entries.values())
        if not entries:
            return IndexStats()

        providers = Counter(entry.provider for entry in entries)
        models = Counter(entry.model for entry in entries)
        total_dimensions = sum(entry.dimensions for entry in entries)
        approximate_bytes = sum(
            entry.dimensions * 8 + len(entry.chunk.text) * 2 + _ENTRY_OVERHEAD_BYTES
            for entry in entries
        )

        return IndexStats(
            total_entries=len(entries),
            total_sources=len(snapshot.source_index),
            average_dimensions=round(total_dimensions / len(entries)),
            provider_counts=dict(providers),
            model_counts=dict(models),
            approximate_bytes=approximate_bytes,
        )

    def get(self, entry_id: str) -> IndexEntry | None:
        return self._snapshot.entries.get(entry_id)

    def get_chunks_by_source(self, source_id: str) -> list[Chunk]:
        """All chunks of a source, ordered by chunk index."""
        snapshot = self._snapshot
        chunks = [snapshot.entries[entry_id].chunk for entry_id in snapshot.source_index.get(source_id, ())]
        return sorted(chunks, key=lambda c: c.chunk_index)

    def sources(self) -> list[str]:
        """Source ids currently present, sorted."""
        return sorted(self._snapshot.source_index)
