"""Chunk data model."""

import uuid
from dataclasses import dataclass, field

from docsearch.models.enums import SourceType


@dataclass(frozen=True)
class Chunk:
    """A position-tagged, trimmed substring of a cleaned source document."""

    text: str
    source_id: str
    source_type: SourceType
    chunk_index: int
    start_char: int
    end_char: int
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if not isinstance(self.source_type, SourceType):
            object.__setattr__(self, "source_type", SourceType(self.source_type))
        if not self.text or not self.text.strip():
            raise ValueError("text must not be empty")
        if self.text != self.text.strip():
            raise ValueError("text must be trimmed")
        if self.chunk_index < 0:
            raise ValueError("chunk_index must be >= 0")
        if self.start_char < 0:
            raise ValueError("start_char must be >= 0")
        if self.end_char <= self.start_char:
            raise ValueError(
                f"end_char must be greater than start_char, got [{self.start_char}, {self.end_char})"
            )

    def __len__(self) -> int:
        return len(self.text)
