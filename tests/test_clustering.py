"""Tests for DBSCAN, K-means and similarity edges."""

import numpy as np
import pytest
from sklearn.cluster import DBSCAN

from tabsense.clustering.cluster import dbscan, default_k, distance_matrix, kmeans, run_clustering
from tabsense.clustering.relationships import find_similar, similarity_edges
from tabsense.errors import InvalidInputError
from tabsense.models import Item
from tabsense.similarity import cosine_similarity

# Two tight groups with disjoint support, so cross-group similarity is exactly 0
GROUP_A = [[1.0, 0.0, 0.0, 0.0], [0.9, 0.1, 0.0, 0.0], [1.0, 0.1, 0.0, 0.0]]
GROUP_B = [[0.0, 0.0, 1.0, 0.0], [0.0, 0.0, 0.9, 0.1], [0.0, 0.0, 1.0, 0.1]]
LONER = [0.0, 1.0, 0.0, 0.0]


def _line_similarity(a, b):
    """Similarity on a number line: distance is |a - b|."""
    return 1 - abs(a[0] - b[0])


def test_distance_matrix():
    vectors = GROUP_A + [LONER]
    matrix = distance_matrix(vectors, cosine_similarity)
    assert matrix.shape == (4, 4)
    np.testing.assert_array_equal(np.diag(matrix), 0)
    np.testing.assert_allclose(matrix, matrix.T)
    assert matrix[0, 1] == pytest.approx(1 - cosine_similarity(GROUP_A[0], GROUP_A[1]))


def test_dbscan_two_clusters():
    labels = dbscan(GROUP_A + GROUP_B, epsilon=0.1, min_points=2)
    assert labels == [0, 0, 0, 1, 1, 1]


def test_dbscan_isolated_point_is_noise():
    labels = dbscan(GROUP_A + [LONER], epsilon=0.1, min_points=2)
    assert labels == [0, 0, 0, -1]


def test_dbscan_min_points_one_has_no_noise():
    labels = dbscan(GROUP_A + [LONER], epsilon=0.1, min_points=1)
    assert labels == [0, 0, 0, 1]


def test_dbscan_picks_up_border_points():
    # Only the middle point is core; both ends are borders of its cluster
    points = [[0.0], [0.1], [0.2]]
    labels = dbscan(points, epsilon=0.15, min_points=3, similarity_fn=_line_similarity)
    assert labels == [0, 0, 0]


def test_dbscan_chains_through_core_points():
    points = [[0.0], [0.1], [0.2], [0.3], [0.9]]
    labels = dbscan(points, epsilon=0.15, min_points=2, similarity_fn=_line_similarity)
    assert labels == [0, 0, 0, 0, -1]


def test_dbscan_matches_sklearn():
    vectors = GROUP_A + [LONER] + GROUP_B
    ours = dbscan(vectors, epsilon=0.1, min_points=2)
    reference = DBSCAN(eps=0.1, min_samples=2, metric="precomputed").fit_predict(
        distance_matrix(vectors, cosine_similarity)
    )
    assert ours == [int(label) for label in reference]


def test_dbscan_edge_cases():
    assert dbscan([]) == []
    assert dbscan([[1.0, 0.0]], min_points=2) == [-1]
    with pytest.raises(InvalidInputError):
        dbscan(GROUP_A, epsilon=-0.1)
    with pytest.raises(InvalidInputError):
        dbscan(GROUP_A, min_points=0)


def test_kmeans_fewer_points_than_k():
    assert kmeans(GROUP_A[:2], 3) == [0, 1]
    assert kmeans(GROUP_A, 3) == [0, 1, 2]
    assert kmeans([], 2) == []


def test_kmeans_labels_in_range():
    rng = np.random.default_rng(1)
    vectors = rng.normal(size=(20, 8))
    labels = kmeans(list(vectors), 4, rng=3)
    assert len(labels) == 20
    assert all(0 <= label < 4 for label in labels)


def test_kmeans_separates_groups():
    for seed in range(5):
        labels = kmeans(GROUP_A + GROUP_B, 2, rng=seed)
        assert len(set(labels[:3])) == 1
        assert len(set(labels[3:])) == 1
        assert labels[0] != labels[3]


def test_kmeans_seed_is_reproducible():
    rng = np.random.default_rng(7)
    vectors = list(rng.normal(size=(15, 5)))
    assert kmeans(vectors, 3, rng=11) == kmeans(vectors, 3, rng=11)
    assert kmeans(vectors, 3, rng=np.random.default_rng(5)) == kmeans(
        vectors, 3, rng=np.random.default_rng(5)
    )


def test_kmeans_reseeds_empty_cluster():
    # Identical points tie every time, so cluster 1 always ends up empty
    labels = kmeans([[1.0, 0.0]] * 4, 2, rng=0)
    assert labels == [0, 0, 0, 0]


def test_kmeans_invalid_k():
    with pytest.raises(InvalidInputError):
        kmeans(GROUP_A, 0)


def test_default_k():
    assert default_k(2) == 1
    assert default_k(5) == 3
    assert default_k(40) == 4


def test_run_clustering_dispatch():
    vectors = GROUP_A + GROUP_B
    assert run_clustering(vectors, "dbscan", {"epsilon": 0.1}) == [0, 0, 0, 1, 1, 1]
    labels = run_clustering(vectors, "kmeans", {"k": 2, "random_state": 0})
    assert set(labels) == {0, 1}
    with pytest.raises(InvalidInputError):
        run_clustering(vectors, "spectral")


def test_similarity_edges_are_deduplicated():
    ids = ["a1", "a2", "a3", "b1"]
    edges = similarity_edges(ids, GROUP_A + [GROUP_B[0]], threshold=0.5)
    pairs = [(e.from_id, e.to_id) for e in edges]
    assert len(pairs) == 3
    assert len({frozenset(p) for p in pairs}) == 3
    assert all(e.from_id != e.to_id for e in edges)
    assert all("b1" not in p for p in pairs)
    assert ("a1", "a2") in pairs
    similarities = [e.similarity for e in edges]
    assert similarities == sorted(similarities, reverse=True)


def test_similarity_edges_threshold_is_strict():
    edges = similarity_edges(["x", "y"], [[1.0, 0.0], [1.0, 0.0]], threshold=1.0)
    assert edges == []
    assert similarity_edges(["x"], [[1.0]], threshold=0.0) == []


def test_find_similar():
    items = [
        Item(id="a1", text=None, vector=np.array(GROUP_A[0])),
        Item(id="a2", text=None, vector=np.array(GROUP_A[1])),
        Item(id="b1", text=None, vector=np.array(GROUP_B[0])),
        Item(id="none", text="not embedded"),
    ]
    matches = find_similar("a1", items, threshold=0.5)
    assert [m[0] for m in matches] == ["a2"]
    assert matches[0][1] == pytest.approx(cosine_similarity(GROUP_A[0], GROUP_A[1]))
    assert find_similar("none", items, threshold=0.5) == []
    assert find_similar("missing", items, threshold=0.5) == []


def test_run_clustering_kmeans_rejects_zero_k():
    with pytest.raises(InvalidInputError):
        run_clustering(GROUP_A + GROUP_B, "kmeans", {"k": 0})
    labels = run_clustering(GROUP_A + GROUP_B, "kmeans", {"k": None, "random_state": 0})
    assert max(labels) < default_k(6)
