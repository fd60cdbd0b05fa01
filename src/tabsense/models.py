"""Data models used throughout tabsense."""

from dataclasses import dataclass, field
from typing import Any

import numpy as np

NOISE = -1
UNGROUPED_ID = "ungrouped"
UNGROUPED_NAME = "Ungrouped"


@dataclass
class Item:
    """A piece of text to group (a tab, a document, a snippet)."""
    id: str
    text: str | None
    vector: np.ndarray | None = None
    title: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def display_title(self) -> str:
        """Title used for theme naming; falls back to the first line of text."""
        if self.title:
            return self.title
        if self.text:
            return self.text.strip().splitlines()[0] if self.text.strip() else self.id
        return self.id


@dataclass
class Group:
    """A named, coloured set of items produced by one clustering run."""
    id: str
    name: str
    color: str
    member_ids: list[str]
    cluster_id: int = NOISE
    category: str | None = None
    description: str | None = None


@dataclass
class Edge:
    """An undirected similarity relationship between two items."""
    from_id: str
    to_id: str
    similarity: float


@dataclass
class GroupingResult:
    """Groups and relationship edges of one grouping run."""
    groups: list[Group] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    labels: dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.groups


@dataclass
class Sentiment:
    score: float = 0.0
    comparative: float = 0.0


@dataclass
class Entity:
    name: str
    confidence: float = 0.5


@dataclass
class TextAnalysis:
    """Output of the optional text-analysis capability."""
    sentiment: Sentiment | None = None
    entities: list[Entity] = field(default_factory=list)
