"""Similarity edges between items for graph visualization and lookup."""

import logging
from typing import Sequence

from ..models import Edge, Item
from ..similarity import pairwise_similarities

logger = logging.getLogger(__name__)


def similarity_edges(
    ids: Sequence[str],
    vectors: Sequence[Sequence[float]],
    threshold: float,
) -> list[Edge]:
    """One edge per unordered pair whose similarity exceeds the threshold.

    Edges point from the earlier item to the later one and are sorted by
    similarity, highest first.
    """
    if len(ids) < 2:
        return []

    matrix = pairwise_similarities(vectors)
    edges = []
    for i in range(len(ids)):
        for j in range(i + 1, len(ids)):
            sim = float(matrix[i, j])
            if sim > threshold:
                edges.append(Edge(from_id=ids[i], to_id=ids[j], similarity=sim))

    # Stable sort keeps input order among ties
    edges.sort(key=lambda e: e.similarity, reverse=True)
    logger.debug(f"Found {len(edges)} edge(s) above {threshold}")
    return edges


def find_similar(item_id: str, items: Sequence[Item], threshold: float) -> list[tuple[str, float]]:
    """Embedded items at least ``threshold`` similar to ``item_id``, most similar first."""
    embedded = [item for item in items if item.vector is not None]
    index = next((i for i, item in enumerate(embedded) if item.id == item_id), None)
    if index is None or len(embedded) < 2:
        return []

    matrix = pairwise_similarities([item.vector for item in embedded])
    matches = [
        (item.id, float(matrix[index, i]))
        for i, item in enumerate(embedded)
        if i != index and matrix[index, i] >= threshold
    ]
    matches.sort(key=lambda m: m[1], reverse=True)
    return matches
