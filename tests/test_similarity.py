"""Tests for cosine similarity."""

import numpy as np
import pytest

from tabsense.errors import DimensionMismatchError, InvalidInputError
from tabsense.similarity import cosine_similarity, pairwise_similarities, to_distance


def test_identical_vectors():
    v = [0.3, -1.2, 4.0]
    assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_orthogonal_and_opposite():
    assert cosine_similarity([1, 0], [0, 1]) == 0.0
    assert cosine_similarity([1, 2], [-1, -2]) == pytest.approx(-1.0)


def test_zero_vector_is_zero_similarity():
    assert cosine_similarity([0, 0, 0], [1, 2, 3]) == 0.0
    assert cosine_similarity([0, 0], [0, 0]) == 0.0


def test_bounds_on_random_vectors():
    rng = np.random.default_rng(0)
    for _ in range(200):
        a = rng.normal(size=16)
        b = rng.normal(size=16)
        assert -1.0 <= cosine_similarity(a, b) <= 1.0
        assert cosine_similarity(a, a) == pytest.approx(1.0)


def test_dimension_mismatch():
    with pytest.raises(DimensionMismatchError):
        cosine_similarity([1, 2, 3], [1, 2])
    with pytest.raises(InvalidInputError):
        cosine_similarity([1], [1, 2])


def test_to_distance():
    assert to_distance(1.0) == 0.0
    assert to_distance(0.25) == 0.75
    assert to_distance(-1.0) == 2.0


def test_pairwise_similarities_matches_pairwise_calls():
    vectors = [[1, 0, 0], [1, 1, 0], [0, 0, 2], [0, 0, 0]]
    matrix = pairwise_similarities(vectors)
    assert matrix.shape == (4, 4)
    np.testing.assert_allclose(matrix, matrix.T)
    for i in range(4):
        for j in range(4):
            if i != j:
                assert matrix[i, j] == pytest.approx(cosine_similarity(vectors[i], vectors[j]))


def test_pairwise_similarities_rejects_ragged_input():
    with pytest.raises(DimensionMismatchError):
        pairwise_similarities([[1, 2], [1, 2, 3]])
    assert pairwise_similarities([]).shape == (0, 0)
