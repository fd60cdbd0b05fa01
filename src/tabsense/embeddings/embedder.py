"""Local text embedding without any external embedding API."""

import hashlib
import logging
from typing import Any

import numpy as np

from ..errors import InvalidInputError
from ..models import TextAnalysis
from .analysis import NullTextAnalyzer, TextAnalyzer, get_text_analyzer
from .features import (
    EMPTY_TEXT_PLACEHOLDER,
    RESERVED_HEAD,
    RESERVED_TAIL,
    SHORT_TEXT_PLACEHOLDER,
    auxiliary_band,
    clean_text,
    hash_embedding,
    normalize,
    term_frequency_band,
    trigram_band,
)

logger = logging.getLogger(__name__)

DEFAULT_DIMENSIONS = 384


def compute_cache_key(text: str) -> str:
    """SHA256 of the text, used as the embedding cache key."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class EmbeddingGenerator:
    """Turns text into unit-length feature vectors and caches them by content hash.

    The cache lives as long as the generator. Writes for a given key always
    store equal vectors, so sharing one generator between callers is safe.
    """

    def __init__(self, analyzer: TextAnalyzer | None = None, dimensions: int = DEFAULT_DIMENSIONS):
        if dimensions <= 0 or dimensions % 3 != 0:
            raise InvalidInputError(f"Dimensions must be a positive multiple of 3, got {dimensions}")
        if dimensions // 3 <= RESERVED_HEAD + RESERVED_TAIL:
            raise InvalidInputError(f"Dimensions too small for the auxiliary band: {dimensions}")

        self.analyzer = analyzer or NullTextAnalyzer()
        self._dimensions = dimensions
        self._band_size = dimensions // 3
        self._cache: dict[str, np.ndarray] = {}

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "EmbeddingGenerator":
        embedding_cfg = config.get("embedding", {})
        return cls(
            analyzer=get_text_analyzer(config),
            dimensions=embedding_cfg.get("dimensions", DEFAULT_DIMENSIONS),
        )

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def generate(self, text: str) -> np.ndarray:
        """Embed one text.

        Args:
            text: Any string, including an empty one.

        Returns:
            A vector of ``dimensions`` floats with unit L2 norm.

        Raises:
            InvalidInputError: If ``text`` is not a string.
        """
        if not isinstance(text, str):
            raise InvalidInputError(f"Text must be a string, got {type(text).__name__}")

        cache_key = compute_cache_key(text)
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Retrieved cached embedding")
            return cached.copy()

        if not text.strip():
            logger.debug("Embedding empty text with placeholder token")
            source = EMPTY_TEXT_PLACEHOLDER
        else:
            source = clean_text(text) or SHORT_TEXT_PLACEHOLDER

        try:
            vector = normalize(self._feature_vector(source))
        except Exception as e:
            logger.error(f"Feature pipeline failed, using hash embedding: {e}")
            return normalize(hash_embedding(text, self._dimensions))

        self._cache[cache_key] = vector
        logger.debug(f"Generated embedding for text of length {len(text)}")
        return vector.copy()

    def generate_many(self, texts: list[str]) -> list[np.ndarray]:
        """Embed texts one after another."""
        if not isinstance(texts, list):
            raise InvalidInputError(f"Texts must be a list, got {type(texts).__name__}")

        logger.info(f"Generating embeddings for {len(texts)} texts")
        return [self.generate(text) for text in texts]

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("Embedding cache cleared")

    def _feature_vector(self, text: str) -> np.ndarray:
        size = self._band_size
        return np.concatenate([
            term_frequency_band(text, size),
            trigram_band(text, size),
            auxiliary_band(text, size, self._analyze(text)),
        ])

    def _analyze(self, text: str) -> TextAnalysis | None:
        try:
            return self.analyzer.analyze(text)
        except Exception as e:
            logger.warning(f"Text analysis unavailable, using structural features only: {e}")
            return None
