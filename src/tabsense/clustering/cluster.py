"""DBSCAN and K-means clustering over an injected similarity function."""

import logging
import math
from typing import Any, Callable, Sequence

import numpy as np

from ..errors import DimensionMismatchError, InvalidInputError
from ..models import NOISE
from ..similarity import cosine_similarity, to_distance

logger = logging.getLogger(__name__)

SimilarityFn = Callable[[Sequence[float], Sequence[float]], float]

METHODS = ("dbscan", "kmeans", "semantic")
DEFAULT_EPSILON = 0.4
DEFAULT_MIN_POINTS = 2
DEFAULT_MAX_ITERATIONS = 100


def distance_matrix(vectors: Sequence[Sequence[float]], similarity_fn: SimilarityFn) -> np.ndarray:
    """Symmetric n x n matrix of 1 - similarity, zero on the diagonal."""
    n = len(vectors)
    matrix = np.zeros((n, n))
    for i in range(n):
        for j in range(i + 1, n):
            d = to_distance(similarity_fn(vectors[i], vectors[j]))
            matrix[i, j] = d
            matrix[j, i] = d
    return matrix


def check_dbscan_params(epsilon: float, min_points: int) -> None:
    if epsilon < 0:
        raise InvalidInputError(f"epsilon must be >= 0, got {epsilon}")
    if min_points < 1:
        raise InvalidInputError(f"min_points must be >= 1, got {min_points}")


def dbscan(
    vectors: Sequence[Sequence[float]],
    epsilon: float = DEFAULT_EPSILON,
    min_points: int = DEFAULT_MIN_POINTS,
    similarity_fn: SimilarityFn = cosine_similarity,
) -> list[int]:
    """Density-based clustering.

    A point is a core point when at least ``min_points`` points (itself
    included) lie within ``epsilon`` distance. Clusters grow from core points;
    points reachable from a core point but not core themselves join the first
    cluster that reaches them, so labels depend on input order.

    Args:
        vectors: Points to cluster, aligned with the caller's items.
        epsilon: Maximum distance (1 - similarity) between neighbours.
        min_points: Neighbourhood size that makes a point a core point.
        similarity_fn: Similarity between two vectors.

    Returns:
        One label per vector: a cluster id >= 0, or -1 for noise.
    """
    check_dbscan_params(epsilon, min_points)

    n = len(vectors)
    if n == 0:
        return []

    distances = distance_matrix(vectors, similarity_fn)
    neighbourhoods = [np.flatnonzero(distances[i] <= epsilon) for i in range(n)]

    labels = np.full(n, NOISE, dtype=int)
    visited = np.zeros(n, dtype=bool)
    queued = np.zeros(n, dtype=bool)
    frontier = np.empty(n, dtype=int)
    cluster_id = 0

    for i in range(n):
        if visited[i]:
            continue
        visited[i] = True

        if len(neighbourhoods[i]) < min_points:
            # Noise for now; may become a border point of a later cluster
            continue

        labels[i] = cluster_id
        queued[:] = False
        queued[i] = True
        head = tail = 0
        for q in neighbourhoods[i]:
            if not queued[q]:
                queued[q] = True
                frontier[tail] = q
                tail += 1

        while head < tail:
            p = frontier[head]
            head += 1

            if not visited[p]:
                visited[p] = True
                if len(neighbourhoods[p]) >= min_points:
                    for q in neighbourhoods[p]:
                        if not queued[q]:
                            queued[q] = True
                            frontier[tail] = q
                            tail += 1

            if labels[p] == NOISE:
                labels[p] = cluster_id

        cluster_id += 1

    logger.debug(f"DBSCAN found {cluster_id} cluster(s), {int((labels == NOISE).sum())} noise point(s)")
    return [int(label) for label in labels]


def kmeans(
    vectors: Sequence[Sequence[float]],
    k: int,
    similarity_fn: SimilarityFn = cosine_similarity,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    rng: np.random.Generator | int | None = None,
) -> list[int]:
    """Centroid-based clustering that maximizes similarity to the centroid.

    Centroids are plain means of their members and are not re-normalized.
    An empty cluster is reseeded with a random input vector.

    Args:
        vectors: Points to cluster.
        k: Number of clusters.
        similarity_fn: Similarity between a point and a centroid.
        max_iterations: Upper bound on assignment rounds.
        rng: Random source (Generator or seed). None draws fresh entropy,
            so results differ between runs.

    Returns:
        One label in [0, k) per vector. With n <= k each point is its own cluster.
    """
    if k < 1:
        raise InvalidInputError(f"k must be >= 1, got {k}")

    n = len(vectors)
    if n == 0:
        return []
    if n <= k:
        return list(range(n))

    dims = {len(v) for v in vectors}
    if len(dims) > 1:
        lengths = sorted(dims)
        raise DimensionMismatchError(lengths[0], lengths[-1])

    rng = np.random.default_rng(rng)
    data = np.asarray(vectors, dtype=np.float64)
    centroids = data[rng.choice(n, size=k, replace=False)].copy()
    labels = np.full(n, -1, dtype=int)

    for iteration in range(max_iterations):
        previous = labels.copy()

        for i in range(n):
            best_cluster = 0
            best_similarity = -math.inf
            for j in range(k):
                similarity = similarity_fn(data[i], centroids[j])
                if similarity > best_similarity:
                    best_similarity = similarity
                    best_cluster = j
            labels[i] = best_cluster

        sums = np.zeros_like(centroids)
        counts = np.zeros(k, dtype=int)
        for i in range(n):
            sums[labels[i]] += data[i]
            counts[labels[i]] += 1

        for j in range(k):
            if counts[j] == 0:
                centroids[j] = data[rng.integers(n)]
            else:
                centroids[j] = sums[j] / counts[j]

        if np.array_equal(labels, previous):
            logger.debug(f"K-means converged after {iteration + 1} iteration(s)")
            break

    return [int(label) for label in labels]


def default_k(n: int) -> int:
    """Cluster count used when the caller gives none."""
    return max(1, min(4, math.ceil(n / 2)))


def run_clustering(
    vectors: Sequence[Sequence[float]],
    method: str = "dbscan",
    options: dict[str, Any] | None = None,
    similarity_fn: SimilarityFn = cosine_similarity,
    texts: Sequence[str] | None = None,
    categories: dict[str, dict[str, Any]] | None = None,
) -> list[int]:
    """Dispatch to the requested clustering algorithm.

    ``texts`` and ``categories`` are only read by the semantic method, which
    needs the text behind each vector for keyword matching.
    """
    options = options or {}

    if method == "dbscan":
        return dbscan(
            vectors,
            epsilon=options.get("epsilon", DEFAULT_EPSILON),
            min_points=options.get("min_points", DEFAULT_MIN_POINTS),
            similarity_fn=similarity_fn,
        )
    elif method == "kmeans":
        k = options.get("k")
        if k is None:
            k = default_k(len(vectors))
        return kmeans(
            vectors,
            k,
            similarity_fn=similarity_fn,
            max_iterations=options.get("max_iterations", DEFAULT_MAX_ITERATIONS),
            rng=options.get("random_state"),
        )
    elif method == "semantic":
        from .categories import MAX_UNSPLIT_CATEGORY, MIN_CATEGORY_SCORE, SEMANTIC_EPSILON, semantic_clustering

        if texts is None:
            raise InvalidInputError("Semantic clustering needs the text of every vector")
        return semantic_clustering(
            texts,
            vectors,
            categories,
            epsilon=options.get("epsilon", SEMANTIC_EPSILON),
            min_points=options.get("min_points", DEFAULT_MIN_POINTS),
            min_score=options.get("min_score", MIN_CATEGORY_SCORE),
            max_unsplit=options.get("max_unsplit", MAX_UNSPLIT_CATEGORY),
            similarity_fn=similarity_fn,
        )
    else:
        raise InvalidInputError(f"Unsupported clustering method: {method}. Choose one of {METHODS}")
