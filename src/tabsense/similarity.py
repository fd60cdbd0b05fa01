"""Cosine similarity and the similarity-to-distance proxy used by clustering."""

from typing import Sequence

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as _sk_cosine_similarity

from .errors import DimensionMismatchError, InvalidInputError


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors.

    Returns 0.0 when either vector has zero magnitude. Raises
    DimensionMismatchError when the lengths differ.
    """
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    sim = float(np.dot(va, vb) / (norm_a * norm_b))
    # Rounding can push |sim| a hair past 1
    return max(-1.0, min(1.0, sim))


def to_distance(similarity: float) -> float:
    """Map a similarity onto a dissimilarity for ordering. Not a metric."""
    return 1.0 - similarity


def pairwise_similarities(vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """Full symmetric cosine similarity matrix of a list of vectors.

    Zero vectors get similarity 0 against everything, matching
    cosine_similarity().
    """
    if len(vectors) == 0:
        return np.zeros((0, 0))

    dims = {len(v) for v in vectors}
    if len(dims) > 1:
        lengths = sorted(dims)
        raise DimensionMismatchError(lengths[0], lengths[-1])

    matrix = np.asarray(vectors, dtype=np.float64)
    if matrix.ndim != 2:
        raise InvalidInputError(f"Expected a list of vectors, got array of shape {matrix.shape}")

    return np.clip(_sk_cosine_similarity(matrix), -1.0, 1.0)
