"""Source document data model."""

from dataclasses import dataclass

from docsearch.models.enums import SourceType


@dataclass
class SourceDocument:
    """Extracted document text handed over by a document source (PDF reader, URL fetcher)."""

    source_id: str
    source_type: SourceType
    text: str
    title: str = ""

    def __post_init__(self):
        if not isinstance(self.source_type, SourceType):
            self.source_type = SourceType(self.source_type)
        if not self.source_id:
            raise ValueError("source_id must not be empty")
        if not self.title:
            self.title = self.source_id
