"""Retrieval result data models."""

from dataclasses import dataclass, field

from docsearch.models.chunk import Chunk
from docsearch.models.enums import RetrievalStatus
from docsearch.models.index import SearchResult


@dataclass(frozen=True)
class ContextItem:
    """A chunk placed in the assembled context at a 1-based rank."""

    rank: int
    chunk: Chunk
    score: float

    def render(self) -> str:
        return f"[{self.rank}] {self.chunk.text}"


@dataclass(frozen=True)
class RetrievalResult:
    """Outcome of a retrieval call.

    ``status`` tells an empty index (``NO_DATA``) apart from an index with
    nothing above the score threshold (``NO_MATCHES``).
    """

    query: str
    status: RetrievalStatus
    results: list[SearchResult] = field(default_factory=list)
    items: list[ContextItem] = field(default_factory=list)
    context: str = ""

    @property
    def has_context(self) -> bool:
        return self.status is RetrievalStatus.OK

    @property
    def source_ids(self) -> list[str]:
        """Distinct source ids of the hits, in rank order."""
        seen: list[str] = []
        for item in self.items:
            if item.chunk.source_id not in seen:
                seen.append(item.chunk.source_id)
        return seen
