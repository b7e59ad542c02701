"""Vector index data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

import numpy as np

from docsearch.models.chunk import Chunk


@dataclass(frozen=True)
class EmbeddingResult:
    """One embedding produced by an embedding provider."""

    vector: tuple[float, ...]
    dimensions: int
    model: str
    provider: str

    def __post_init__(self):
        if not isinstance(self.vector, tuple):
            object.__setattr__(self, "vector", tuple(float(v) for v in self.vector))


@dataclass(frozen=True, eq=False)
class IndexEntry:
    """A chunk stored in the vector index together with its embedding.

    ``vector`` is a read-only float64 array and ``norm`` its L2 norm,
    both computed once at insert time.
    """

    chunk: Chunk
    vector: np.ndarray
    norm: float
    dimensions: int
    model: str
    provider: str
    sequence: int
    inserted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def id(self) -> str:
        return self.chunk.id

    @property
    def source_id(self) -> str:
        return self.chunk.source_id

    @property
    def metadata(self) -> dict:
        return {
            "dimensions": self.dimensions,
            "model": self.model,
            "provider": self.provider,
            "inserted_at": self.inserted_at,
        }


@dataclass(frozen=True)
class SearchResult:
    """A ranked search hit."""

    chunk: Chunk
    score: float
    metadata: dict


@dataclass(frozen=True)
class IndexStats:
    """Aggregate view over the vector index."""

    total_entries: int = 0
    total_sources: int = 0
    average_dimensions: int = 0
    provider_counts: dict[str, int] = field(default_factory=dict)
    model_counts: dict[str, int] = field(default_factory=dict)
    approximate_bytes: int = 0
