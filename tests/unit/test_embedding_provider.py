"""Tests for the sentence-transformers embedding provider."""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from docsearch.embedding.sentence_transformer import PROVIDER_NAME, SentenceTransformerEmbeddingProvider
from docsearch.errors import EmbedderUnavailableError


@pytest.fixture
def mock_provider():
    """Create a provider with a mocked SentenceTransformer model."""
    with patch("docsearch.embedding.sentence_transformer.SentenceTransformer") as MockST:
        mock_model = MagicMock()
        mock_model.get_sentence_embedding_dimension.return_value = 3
        MockST.return_value = mock_model
        provider = SentenceTransformerEmbeddingProvider(model_name="test-model", query_prefix="query: ")
        yield provider, mock_model, MockST


class TestSentenceTransformerEmbeddingProvider:
    def test_embed_returns_one_result_per_text(self, mock_provider):
        provider, mock_model, _ = mock_provider
        mock_model.encode.return_value = np.array([[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]])

        results = provider.embed(["first", "second"])

        assert len(results) == 2
        assert results[0].vector == pytest.approx((0.1, 0.2, 0.3))
        assert results[1].dimensions == 3
        assert results[1].model == "test-model"
        assert results[1].provider == PROVIDER_NAME

    def test_embed_requests_normalized_vectors(self, mock_provider):
        provider, mock_model, _ = mock_provider
        mock_model.encode.return_value = np.array([[1.0, 0.0, 0.0]])

        provider.embed(["text"])

        kwargs = mock_model.encode.call_args.kwargs
        assert kwargs["normalize_embeddings"] is True
        assert kwargs["show_progress_bar"] is False

    def test_embed_empty_raises(self, mock_provider):
        provider, mock_model, _ = mock_provider
        with pytest.raises(ValueError):
            provider.embed([])
        mock_model.encode.assert_not_called()

    def test_encode_failure_becomes_unavailable(self, mock_provider):
        provider, mock_model, _ = mock_provider
        mock_model.encode.side_effect = RuntimeError("CUDA out of memory")
        with pytest.raises(EmbedderUnavailableError):
            provider.embed(["text"])

    def test_embed_query_applies_prefix(self, mock_provider):
        provider, mock_model, _ = mock_provider
        mock_model.encode.return_value = np.array([[1.0, 0.0, 0.0]])

        provider.embed_query(["what is chunking"])

        assert mock_model.encode.call_args.args[0] == ["query: what is chunking"]

    def test_dimension_and_model_name(self, mock_provider):
        provider, _, _ = mock_provider
        assert provider.dimension == 3
        assert provider.model_name == "test-model"

    def test_prefers_local_files(self, mock_provider):
        _, _, MockST = mock_provider
        MockST.assert_called_once_with("test-model", local_files_only=True)


class TestModelLoading:
    def test_falls_back_to_download(self):
        with patch("docsearch.embedding.sentence_transformer.SentenceTransformer") as MockST:
            mock_model = MagicMock()
            mock_model.get_sentence_embedding_dimension.return_value = 384
            MockST.side_effect = [OSError("not cached"), mock_model]

            provider = SentenceTransformerEmbeddingProvider()

            assert provider.dimension == 384
            assert MockST.call_count == 2

    def test_unloadable_model_is_unavailable(self):
        with patch("docsearch.embedding.sentence_transformer.SentenceTransformer") as MockST:
            MockST.side_effect = OSError("no such model")
            with pytest.raises(EmbedderUnavailableError):
                SentenceTransformerEmbeddingProvider(model_name="missing/model")

    @pytest.mark.parametrize(
        "error",
        [ValueError("malformed model name"), ImportError("torch extras missing")],
    )
    def test_other_load_failures_are_unavailable(self, error):
        with patch("docsearch.embedding.sentence_transformer.SentenceTransformer") as MockST:
            MockST.side_effect = error
            with pytest.raises(EmbedderUnavailableError, match="Could not load embedding model"):
                SentenceTransformerEmbeddingProvider(model_name="bad::name")
