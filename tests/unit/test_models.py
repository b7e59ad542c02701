"""Unit tests for data model validation."""

from dataclasses import FrozenInstanceError

import pytest

from docsearch.models.chunk import Chunk
from docsearch.models.document import SourceDocument
from docsearch.models.enums import RetrievalStatus, SourceType
from docsearch.models.index import EmbeddingResult
from docsearch.models.retrieval import ContextItem, RetrievalResult


def _chunk(**overrides):
    fields = dict(
        text="Some chunk text.",
        source_id="doc1",
        source_type=SourceType.PDF,
        chunk_index=0,
        start_char=0,
        end_char=16,
    )
    fields.update(overrides)
    return Chunk(**fields)


class TestChunk:
    def test_valid_chunk(self):
        chunk = _chunk()
        assert len(chunk) == 16
        assert chunk.id

    def test_ids_are_unique(self):
        assert _chunk().id != _chunk().id

    def test_source_type_coerced_from_string(self):
        assert _chunk(source_type="url").source_type is SourceType.URL

    def test_unknown_source_type_rejected(self):
        with pytest.raises(ValueError):
            _chunk(source_type="docx")

    @pytest.mark.parametrize("text", ["", "   ", " padded "])
    def test_rejects_empty_or_untrimmed_text(self, text):
        with pytest.raises(ValueError):
            _chunk(text=text)

    def test_rejects_negative_index(self):
        with pytest.raises(ValueError):
            _chunk(chunk_index=-1)

    def test_rejects_empty_range(self):
        with pytest.raises(ValueError):
            _chunk(start_char=5, end_char=5)

    def test_is_immutable(self):
        chunk = _chunk()
        with pytest.raises(FrozenInstanceError):
            chunk.text = "changed"


class TestSourceDocument:
    def test_title_defaults_to_source_id(self):
        doc = SourceDocument(source_id="report.pdf", source_type="pdf", text="body")
        assert doc.title == "report.pdf"
        assert doc.source_type is SourceType.PDF

    def test_requires_source_id(self):
        with pytest.raises(ValueError):
            SourceDocument(source_id="", source_type=SourceType.URL, text="body")


class TestEmbeddingResult:
    def test_vector_converted_to_tuple(self):
        result = EmbeddingResult(vector=[1, 2.5], dimensions=2, model="m", provider="p")
        assert result.vector == (1.0, 2.5)


class TestRetrievalResult:
    def test_source_ids_in_rank_order_without_duplicates(self):
        items = [
            ContextItem(rank=1, chunk=_chunk(source_id="b"), score=0.9),
            ContextItem(rank=2, chunk=_chunk(source_id="a"), score=0.8),
            ContextItem(rank=3, chunk=_chunk(source_id="b"), score=0.7),
        ]
        result = RetrievalResult(query="q", status=RetrievalStatus.OK, items=items)
        assert result.source_ids == ["b", "a"]
        assert result.has_context

    def test_no_data_has_no_context(self):
        result = RetrievalResult(query="q", status=RetrievalStatus.NO_DATA)
        assert not result.has_context
        assert result.context == ""
