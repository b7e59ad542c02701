"""Unit tests for cosine similarity."""

import numpy as np
import pytest

from docsearch.errors import DimensionMismatchError
from docsearch.vectorstore.similarity import as_vector, cosine_scores, cosine_similarity, vector_norm


class TestCosineSimilarity:
    def test_self_similarity_is_one(self):
        v = [0.3, -1.2, 4.0, 0.01]
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_symmetric(self):
        a = [0.1, 0.7, -0.2]
        b = [0.9, -0.4, 0.3]
        assert cosine_similarity(a, b) == cosine_similarity(b, a)

    def test_orthogonal_is_zero(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0

    def test_opposite_is_minus_one(self):
        assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)

    def test_zero_vector_scores_zero(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0
        assert cosine_similarity([1.0, 1.0], [0.0, 0.0]) == 0.0

    def test_scale_invariant(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [10.0, 20.0, 30.0]) == pytest.approx(1.0)

    def test_result_is_clamped(self):
        v = [1e-3] * 7
        score = cosine_similarity(v, v)
        assert -1.0 <= score <= 1.0

    def test_length_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError):
            cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])


class TestCosineScores:
    def test_matches_pairwise_similarity(self):
        rng = np.random.default_rng(7)
        matrix = rng.normal(size=(5, 8))
        query = rng.normal(size=8)
        norms = np.linalg.norm(matrix, axis=1)

        scores = cosine_scores(query, matrix, norms)

        for row, score in zip(matrix, scores):
            assert score == pytest.approx(cosine_similarity(query.tolist(), row.tolist()))

    def test_zero_rows_and_zero_query(self):
        matrix = np.array([[0.0, 0.0], [1.0, 0.0]])
        norms = np.linalg.norm(matrix, axis=1)
        assert cosine_scores(np.array([1.0, 0.0]), matrix, norms).tolist() == [0.0, 1.0]
        assert cosine_scores(np.array([0.0, 0.0]), matrix, norms).tolist() == [0.0, 0.0]

    def test_identical_rows_score_identically(self):
        rng = np.random.default_rng(11)
        row = rng.normal(size=1536)
        matrix = np.tile(row, (24, 1))
        norms = np.full(24, vector_norm(row))

        scores = cosine_scores(rng.normal(size=1536), matrix, norms)

        assert len(set(scores.tolist())) == 1

    def test_empty_matrix(self):
        assert cosine_scores(np.array([1.0]), np.zeros((0, 1)), np.zeros(0)).size == 0

    def test_width_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError):
            cosine_scores(np.array([1.0, 2.0]), np.ones((2, 3)), np.ones(2))


class TestAsVector:
    def test_read_only(self):
        vector = as_vector([1, 2, 3])
        assert vector.dtype == np.float64
        with pytest.raises(ValueError):
            vector[0] = 5.0

    def test_rejects_nested_input(self):
        with pytest.raises(DimensionMismatchError):
            as_vector([[1.0, 2.0], [3.0, 4.0]])
