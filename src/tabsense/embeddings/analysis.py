"""Optional text-analysis capability feeding the auxiliary embedding band."""

from abc import ABC, abstractmethod
from typing import Any

from ..errors import CapabilityUnavailableError
from ..models import Entity, TextAnalysis


class TextAnalyzer(ABC):
    """Extracts sentiment and named entities from text."""

    @abstractmethod
    def analyze(self, text: str) -> TextAnalysis:
        """Analyze cleaned text. May raise; callers treat any error as unavailable."""


class NullTextAnalyzer(TextAnalyzer):
    """Analyzer that finds nothing."""

    def analyze(self, text: str) -> TextAnalysis:
        return TextAnalysis()


class SpacyTextAnalyzer(TextAnalyzer):
    """Named entities from a spaCy pipeline. spaCy has no sentiment, so none is reported."""

    def __init__(self, model_name: str = "en_core_web_sm"):
        self.model_name = model_name
        self._nlp = None

    @property
    def nlp(self):
        """Lazy-load the spaCy pipeline."""
        if self._nlp is None:
            try:
                import spacy
                self._nlp = spacy.load(self.model_name, disable=["parser", "lemmatizer"])
            except (ImportError, OSError) as e:
                raise CapabilityUnavailableError(
                    f"spaCy model '{self.model_name}' is not available: {e}"
                ) from e
        return self._nlp

    def analyze(self, text: str) -> TextAnalysis:
        doc = self.nlp(text)
        return TextAnalysis(entities=[Entity(name=ent.text) for ent in doc.ents])


def get_text_analyzer(config: dict[str, Any]) -> TextAnalyzer:
    """Factory: return the analyzer selected in config."""
    embedding_cfg = config.get("embedding", {})
    kind = embedding_cfg.get("analyzer", "none")

    if kind in ("none", None):
        return NullTextAnalyzer()
    elif kind == "spacy":
        return SpacyTextAnalyzer(embedding_cfg.get("spacy_model", "en_core_web_sm"))
    else:
        raise ValueError(f"Unknown text analyzer: {kind}")
