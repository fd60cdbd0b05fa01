"""Keyword categories and the category-first semantic clustering method.

A category is a dict with ``keywords`` and optional ``label`` and
``description``. A text scores the fraction of a category's keywords that
occur in it as substrings, case-insensitively.
"""

import logging
from typing import Any, Sequence

from ..config import DEFAULT_CATEGORIES
from ..errors import InvalidInputError
from ..models import NOISE
from ..similarity import cosine_similarity
from .cluster import DEFAULT_MIN_POINTS, SimilarityFn, check_dbscan_params, dbscan

logger = logging.getLogger(__name__)

SEMANTIC_EPSILON = 0.3
MIN_CATEGORY_SCORE = 0.1
# Categories with at most this many items are never split
MAX_UNSPLIT_CATEGORY = 3
MIXED_CONTENT_LABEL = "Mixed Content"


def category_score(text: str, keywords: Sequence[str]) -> float:
    """Fraction of ``keywords`` found in ``text``."""
    if not keywords:
        return 0.0
    text = text.lower()
    return sum(1 for kw in keywords if kw.lower() in text) / len(keywords)


def detect_category(
    text: str,
    categories: dict[str, dict[str, Any]] | None = None,
    min_score: float = MIN_CATEGORY_SCORE,
) -> str | None:
    """Best-scoring category for one text, or None when nothing beats ``min_score``.

    Ties go to the category listed first.
    """
    if categories is None:
        categories = DEFAULT_CATEGORIES

    best, best_score = None, 0.0
    for name, category in categories.items():
        score = category_score(text, category.get("keywords", []))
        if score > best_score and score > min_score:
            best, best_score = name, score
    return best


def detect_cluster_category(
    texts: Sequence[str],
    categories: dict[str, dict[str, Any]] | None = None,
    min_score: float = MIN_CATEGORY_SCORE,
) -> str | None:
    """Category whose score averaged over ``texts`` is highest and above ``min_score``."""
    if not texts:
        return None
    if categories is None:
        categories = DEFAULT_CATEGORIES

    best, best_score = None, 0.0
    for name, category in categories.items():
        keywords = category.get("keywords", [])
        average = sum(category_score(text, keywords) for text in texts) / len(texts)
        if average > best_score and average > min_score:
            best, best_score = name, average
    return best


def category_label(name: str | None, categories: dict[str, dict[str, Any]] | None = None) -> str:
    """Display name of a category; None means uncategorized content."""
    if name is None:
        return MIXED_CONTENT_LABEL
    if categories is None:
        categories = DEFAULT_CATEGORIES
    return categories.get(name, {}).get("label") or name


def category_description(name: str | None, categories: dict[str, dict[str, Any]] | None = None) -> str | None:
    if name is None:
        return None
    if categories is None:
        categories = DEFAULT_CATEGORIES
    return categories.get(name, {}).get("description")


def sub_cluster(
    vectors: Sequence[Sequence[float]],
    epsilon: float = SEMANTIC_EPSILON,
    min_points: int = DEFAULT_MIN_POINTS,
    similarity_fn: SimilarityFn = cosine_similarity,
) -> list[list[int]]:
    """Split a set of vectors into similarity sub-clusters with DBSCAN.

    Every index ends up in exactly one part. Two or fewer vectors stay
    together. A single noise point joins the largest part; more noise points
    form a part of their own.

    Returns:
        Lists of positions into ``vectors``.
    """
    n = len(vectors)
    if n <= 2:
        return [list(range(n))] if n else []

    labels = dbscan(vectors, epsilon=epsilon, min_points=min_points, similarity_fn=similarity_fn)

    parts: dict[int, list[int]] = {}
    noise = []
    for i, label in enumerate(labels):
        if label == NOISE:
            noise.append(i)
        else:
            parts.setdefault(label, []).append(i)

    result = [parts[label] for label in sorted(parts)]
    if noise:
        if len(noise) == 1 and result:
            max(result, key=len).append(noise[0])
        else:
            result.append(noise)
    return result


def semantic_clustering(
    texts: Sequence[str],
    vectors: Sequence[Sequence[float]],
    categories: dict[str, dict[str, Any]] | None = None,
    epsilon: float = SEMANTIC_EPSILON,
    min_points: int = DEFAULT_MIN_POINTS,
    min_score: float = MIN_CATEGORY_SCORE,
    max_unsplit: int = MAX_UNSPLIT_CATEGORY,
    similarity_fn: SimilarityFn = cosine_similarity,
) -> list[int]:
    """Group by keyword category first, then by similarity inside each category.

    Categories are visited in order of first appearance in ``texts``. A
    category with more than ``max_unsplit`` items is split with
    :func:`sub_cluster`; smaller ones stay whole. Uncategorized texts are
    sub-clustered last. Every cluster holds items of a single category, and
    no item is labelled noise.

    Args:
        texts: Text used for keyword matching, aligned with ``vectors``.
        vectors: Embeddings used for sub-clustering.
        categories: Category table; defaults to the built-in one.
        epsilon: DBSCAN distance for sub-clustering.
        min_points: DBSCAN core size for sub-clustering.
        min_score: Score a category must beat to claim a text.
        max_unsplit: Largest category kept as a single cluster.
        similarity_fn: Similarity between two vectors.

    Returns:
        One cluster id >= 0 per text.
    """
    if len(texts) != len(vectors):
        raise InvalidInputError(f"Got {len(texts)} texts for {len(vectors)} vectors")
    check_dbscan_params(epsilon, min_points)

    by_category: dict[str, list[int]] = {}
    uncategorized = []
    for i, text in enumerate(texts):
        category = detect_category(text, categories, min_score)
        if category is None:
            uncategorized.append(i)
        else:
            by_category.setdefault(category, []).append(i)

    logger.debug(f"Categorized into {len(by_category)} categories, {len(uncategorized)} uncategorized")

    labels = [NOISE] * len(texts)

    def split(members: list[int]) -> list[list[int]]:
        parts = sub_cluster([vectors[i] for i in members], epsilon, min_points, similarity_fn)
        return [[members[p] for p in part] for part in parts]

    groups = [
        part
        for members in by_category.values()
        for part in (split(members) if len(members) > max_unsplit else [members])
    ]
    if uncategorized:
        groups.extend(split(uncategorized))

    for cluster_id, part in enumerate(groups):
        for i in part:
            labels[i] = cluster_id

    return labels
