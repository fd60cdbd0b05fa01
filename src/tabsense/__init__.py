"""tabsense - local text fingerprints and content-similarity grouping."""

from .clustering import dbscan, find_similar, kmeans, semantic_clustering, similarity_edges
from .config import DEFAULT_CONFIG, load_config
from .embeddings import EmbeddingGenerator, NullTextAnalyzer, TextAnalyzer
from .errors import CapabilityUnavailableError, DimensionMismatchError, InvalidInputError
from .grouping import GroupingCoordinator
from .models import Edge, Group, GroupingResult, Item
from .naming import NullThemeNamer, ThemeNamer
from .similarity import cosine_similarity, to_distance

__version__ = "0.1.0"

__all__ = [
    "CapabilityUnavailableError",
    "DEFAULT_CONFIG",
    "DimensionMismatchError",
    "Edge",
    "EmbeddingGenerator",
    "Group",
    "GroupingCoordinator",
    "GroupingResult",
    "InvalidInputError",
    "Item",
    "NullTextAnalyzer",
    "NullThemeNamer",
    "TextAnalyzer",
    "ThemeNamer",
    "cosine_similarity",
    "dbscan",
    "find_similar",
    "kmeans",
    "load_config",
    "semantic_clustering",
    "similarity_edges",
    "to_distance",
]
