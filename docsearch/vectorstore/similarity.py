"""Cosine similarity helpers.

Scores are clamped to [-1, 1] to absorb floating-point drift, and any
comparison involving a zero-magnitude vector scores 0.
"""

from collections.abc import Sequence

import numpy as np

from docsearch.errors import DimensionMismatchError


def as_vector(values: Sequence[float]) -> np.ndarray:
    """Return a read-only float64 copy of ``values``."""
    vector = np.array(values, dtype=np.float64)
    if vector.ndim != 1:
        raise DimensionMismatchError(f"Expected a 1-D vector, got shape {vector.shape}")
    vector.setflags(write=False)
    return vector


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Compute cosine similarity between two vectors of equal length."""
    if len(a) != len(b):
        raise DimensionMismatchError(f"Vector dimension mismatch: {len(a)} vs {len(b)}")

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    similarity = float(np.dot(va, vb)) / (norm_a * norm_b)
    return max(-1.0, min(1.0, similarity))


def cosine_scores(query: np.ndarray, matrix: np.ndarray, norms: np.ndarray) -> np.ndarray:
    """Score every row of ``matrix`` against ``query``.

    ``norms`` holds the precomputed L2 norm of each row. Rows with a zero
    norm, or every row when the query itself has zero norm, score 0.
    """
    if matrix.shape[0] == 0:
        return np.zeros(0, dtype=np.float64)
    if matrix.shape[1] != query.shape[0]:
        raise DimensionMismatchError(
            f"Vector dimension mismatch: {query.shape[0]} vs {matrix.shape[1]}"
        )

    query_norm = float(np.linalg.norm(query))
    if query_norm == 0.0:
        return np.zeros(matrix.shape[0], dtype=np.float64)

    denominators = norms * query_norm
    # Row-wise reduction, so identical rows score bit-identically wherever they sit
    dots = np.sum(matrix * query, axis=1)
    scores = np.divide(dots, denominators, out=np.zeros_like(dots), where=denominators != 0)
    return np.clip(scores, -1.0, 1.0)


def vector_norm(vector: np.ndarray) -> float:
    """L2 norm computed with the same reduction ``cosine_scores`` uses."""
    return float(np.sqrt(np.sum(vector * vector)))
