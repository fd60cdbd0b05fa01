"""Hand-built text features that make up a tabsense embedding.

A vector of D dimensions is split into three equal bands:

    [0, D/3)        term frequencies of tokens longer than two characters
    [D/3, 2D/3)     character trigram frequencies
    [2D/3, D)       auxiliary features (sentiment, entities, text statistics)

Tokens and trigrams are hashed into their band with a 32-bit polynomial
string hash, so collisions are expected and simply add up.
"""

import hashlib
import re
from collections import Counter

import numpy as np

from ..models import TextAnalysis

EMPTY_TEXT_PLACEHOLDER = "empty_text_placeholder"
SHORT_TEXT_PLACEHOLDER = "short_text"

MIN_TOKEN_LENGTH = 3
NGRAM_SIZE = 3
MAX_ENTITIES = 10
# Slots reserved at the ends of the auxiliary band: sentiment at the start,
# text length and word count at the end.
RESERVED_HEAD = 2
RESERVED_TAIL = 2

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def hash_string(value: str) -> int:
    """Stable unsigned 32-bit hash (h * 31 + codepoint)."""
    h = 0
    for ch in value:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return h


def clean_text(text: str) -> str:
    """Lowercase, turn punctuation into spaces and collapse whitespace."""
    text = _NON_WORD.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


def term_frequency_band(text: str, size: int) -> np.ndarray:
    """Normalized frequencies of tokens longer than two characters."""
    band = np.zeros(size)
    tokens = [t for t in text.split() if len(t) >= MIN_TOKEN_LENGTH]
    if not tokens:
        return band

    total = len(tokens)
    for token, count in Counter(tokens).items():
        band[hash_string(token) % size] += count / total
    return band


def trigram_band(text: str, size: int) -> np.ndarray:
    """Normalized frequencies of character trigrams."""
    band = np.zeros(size)
    n_grams = len(text) - NGRAM_SIZE + 1
    if n_grams <= 0:
        return band

    weight = 1 / n_grams
    for i in range(n_grams):
        band[hash_string(text[i:i + NGRAM_SIZE]) % size] += weight
    return band


def structural_features(text: str) -> tuple[float, float]:
    """Clipped text length and word count."""
    return min(len(text) / 1000, 1.0), min(len(text.split()) / 100, 1.0)


def auxiliary_band(text: str, size: int, analysis: TextAnalysis | None) -> np.ndarray:
    """Sentiment, entity and structural features.

    ``analysis`` is None when the text-analysis capability failed; only the
    structural features are written in that case.
    """
    band = np.zeros(size)

    if analysis is not None:
        if analysis.sentiment is not None:
            band[0] = analysis.sentiment.score or 0.0
            band[1] = analysis.sentiment.comparative or 0.0

        span = size - RESERVED_HEAD - RESERVED_TAIL
        for entity in analysis.entities[:MAX_ENTITIES]:
            slot = RESERVED_HEAD + hash_string(entity.name) % span
            confidence = entity.confidence if entity.confidence is not None else 0.5
            band[slot] += confidence

    band[-2], band[-1] = structural_features(text)
    return band


def hash_embedding(text: str, dimensions: int) -> np.ndarray:
    """Digest-derived vector in [-1, 1], used when the feature pipeline fails."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return np.array(
        [(digest[i % len(digest)] / 255) * 2 - 1 for i in range(dimensions)],
        dtype=np.float64,
    )


def normalize(vector: np.ndarray) -> np.ndarray:
    """Scale to unit L2 norm; a zero vector is returned as is."""
    magnitude = np.linalg.norm(vector)
    if magnitude == 0:
        return vector
    return vector / magnitude
