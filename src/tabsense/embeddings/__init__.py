"""Local embedding generation."""

from .analysis import NullTextAnalyzer, SpacyTextAnalyzer, TextAnalyzer, get_text_analyzer
from .embedder import EmbeddingGenerator

__all__ = [
    "EmbeddingGenerator",
    "NullTextAnalyzer",
    "SpacyTextAnalyzer",
    "TextAnalyzer",
    "get_text_analyzer",
]
