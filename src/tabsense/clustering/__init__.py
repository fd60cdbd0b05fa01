"""Clustering algorithms and similarity relationships."""

from .categories import detect_category, detect_cluster_category, semantic_clustering, sub_cluster
from .cluster import dbscan, default_k, distance_matrix, kmeans, run_clustering
from .relationships import find_similar, similarity_edges

__all__ = [
    "dbscan",
    "default_k",
    "detect_category",
    "detect_cluster_category",
    "distance_matrix",
    "find_similar",
    "kmeans",
    "run_clustering",
    "semantic_clustering",
    "similarity_edges",
    "sub_cluster",
]
