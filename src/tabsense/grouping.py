"""Turn a snapshot of items into named, coloured groups and a similarity graph."""

import logging
import re
from typing import Any

from .clustering.categories import category_description, category_label, detect_category, detect_cluster_category
from .clustering.cluster import METHODS, run_clustering
from .clustering.relationships import find_similar, similarity_edges
from .config import with_defaults
from .embeddings.embedder import EmbeddingGenerator
from .errors import InvalidInputError
from .models import NOISE, UNGROUPED_ID, UNGROUPED_NAME, Group, GroupingResult, Item
from .naming.namer import ThemeNamer, get_theme_namer

logger = logging.getLogger(__name__)

_THEME_QUOTES = re.compile(r"^[\"'\s]+|[\"'\s]+$")
_THEME_PREFIX = re.compile(r"^label\s*:\s*", re.IGNORECASE)


def _category_text(item: Item) -> str:
    """Title, URL and text joined for keyword category matching."""
    parts = [item.title, item.metadata.get("url"), item.text]
    return " ".join(p for p in parts if isinstance(p, str))


def _clean_theme(theme: Any) -> str:
    """Strip quotes, whitespace and a leading "Label:" from a namer reply."""
    if not isinstance(theme, str):
        return ""
    theme = _THEME_QUOTES.sub("", theme)
    theme = _THEME_PREFIX.sub("", theme)
    return _THEME_QUOTES.sub("", theme)


class GroupingCoordinator:
    """Embeds items, clusters them and names the resulting groups.

    Groups and edges are rebuilt from scratch on every call. Vectors are
    written back onto the items, so a later call only embeds new items.
    """

    def __init__(
        self,
        generator: EmbeddingGenerator | None = None,
        namer: ThemeNamer | None = None,
        config: dict[str, Any] | None = None,
    ):
        self.config = with_defaults(config)
        self.generator = generator or EmbeddingGenerator.from_config(self.config)
        self.namer = namer or get_theme_namer(self.config)

    def group(
        self,
        items: list[Item],
        method: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> GroupingResult:
        """Group items by content similarity.

        Args:
            items: Items to group. Ids must be unique.
            method: "dbscan" (default from config), "kmeans" or "semantic".
            options: Per-call overrides: epsilon, min_points, k, max_iterations,
                random_state, min_score, max_unsplit, visualization_threshold.

        Returns:
            GroupingResult whose groups together contain every item id once.

        Raises:
            InvalidInputError: For a non-list, non-Item entries, duplicate ids,
                non-string text, an unknown method or bad clustering parameters.
        """
        self._validate(items)
        method = method or self.config["clustering"]["method"]
        if method not in METHODS:
            raise InvalidInputError(f"Unsupported clustering method: {method}. Choose one of {METHODS}")
        opts = self._options(method, options)

        embedded, unembeddable = self._embed_missing(items)
        if len(embedded) < 2:
            logger.info(f"Only {len(embedded)} embeddable item(s), skipping clustering")
            ungrouped = self._ungrouped_group([item.id for item in items])
            return GroupingResult(groups=[ungrouped] if items else [])

        vectors = [item.vector for item in embedded]
        categories = self.config["categories"]
        labels = run_clustering(
            vectors,
            method,
            opts,
            texts=[_category_text(item) for item in embedded],
            categories=categories,
        )

        clusters: dict[int, list[Item]] = {}
        noise_ids = []
        for item, label in zip(embedded, labels):
            if label == NOISE:
                noise_ids.append(item.id)
            else:
                clusters.setdefault(label, []).append(item)

        min_score = opts.get("min_score", self.config["clustering"]["semantic"]["min_score"])
        cluster_categories = {}
        for cluster_id, members in clusters.items():
            texts = [_category_text(m) for m in members]
            if method == "semantic":
                # Semantic clusters never mix categories
                cluster_categories[cluster_id] = detect_category(texts[0], categories, min_score)
            else:
                cluster_categories[cluster_id] = detect_cluster_category(texts, categories, min_score)

        palette = self.config["grouping"]["palette"]
        groups = []
        for cluster_id in sorted(clusters):
            members = clusters[cluster_id]
            category = cluster_categories[cluster_id]
            if method == "semantic":
                name = self._semantic_name(cluster_id, cluster_categories)
            else:
                name = self._name_cluster(members)
            groups.append(Group(
                id=f"cluster-{cluster_id}",
                name=name,
                color=palette[cluster_id % len(palette)],
                member_ids=[m.id for m in members],
                cluster_id=cluster_id,
                category=category,
                description=category_description(category, categories),
            ))

        leftover = noise_ids + [item.id for item in unembeddable]
        if leftover:
            groups.append(self._ungrouped_group(leftover))

        edges = similarity_edges(
            [item.id for item in embedded],
            vectors,
            opts["visualization_threshold"],
        )

        logger.info(
            f"Grouped {len(items)} item(s) with {method}: {len(clusters)} cluster(s), "
            f"{len(leftover)} ungrouped, {len(edges)} edge(s)"
        )
        return GroupingResult(
            groups=groups,
            edges=edges,
            labels={item.id: label for item, label in zip(embedded, labels)},
        )

    def find_similar(
        self,
        item_id: str,
        items: list[Item],
        threshold: float | None = None,
    ) -> list[tuple[str, float]]:
        """Items most similar to ``item_id``, embedding any that lack a vector."""
        self._validate(items)
        if threshold is None:
            threshold = self.config["grouping"]["similar_threshold"]
        self._embed_missing(items)
        return find_similar(item_id, items, threshold)

    def _validate(self, items: Any) -> None:
        if not isinstance(items, list):
            raise InvalidInputError(f"Items must be a list, got {type(items).__name__}")

        seen = set()
        for item in items:
            if not isinstance(item, Item):
                raise InvalidInputError(f"Expected Item, got {type(item).__name__}")
            if item.id in seen:
                raise InvalidInputError(f"Duplicate item id: {item.id}")
            seen.add(item.id)

    def _options(self, method: str, options: dict[str, Any] | None) -> dict[str, Any]:
        opts = dict(self.config["clustering"][method])
        opts["visualization_threshold"] = self.config["grouping"]["visualization_threshold"]
        opts.update(options or {})

        # Edges must be looser than the clustering neighbourhood
        if "epsilon" in opts and opts["visualization_threshold"] >= 1 - opts["epsilon"]:
            raise InvalidInputError(
                f"visualization_threshold {opts['visualization_threshold']} must be below "
                f"1 - epsilon ({1 - opts['epsilon']:.2f})"
            )
        return opts

    def _embed_missing(self, items: list[Item]) -> tuple[list[Item], list[Item]]:
        """Embed items without a vector. Returns (embedded, unembeddable)."""
        embedded, unembeddable = [], []
        for item in items:
            if item.vector is None:
                if item.text is None:
                    logger.debug(f"Item {item.id} has no text, leaving it ungrouped")
                    unembeddable.append(item)
                    continue
                item.vector = self.generator.generate(item.text)
            embedded.append(item)
        return embedded, unembeddable

    def _name_cluster(self, members: list[Item]) -> str:
        max_length = self.config["grouping"]["max_name_length"]

        if len(members) == 1:
            title = members[0].display_title
            return title if len(title) <= max_length else title[:max_length - 3] + "..."

        fallback = f"Cluster of {len(members)} items"
        try:
            theme = _clean_theme(self.namer.name_cluster([m.display_title for m in members]))
        except Exception as e:
            logger.warning(f"Theme naming failed, using fallback label: {e}")
            return fallback

        if not theme or len(theme) > max_length:
            logger.debug(f"Rejected theme {theme!r}, using fallback label")
            return fallback
        return theme

    def _semantic_name(self, cluster_id: int, cluster_categories: dict[int, str | None]) -> str:
        """Category label, numbered when the category was split into several clusters."""
        category = cluster_categories[cluster_id]
        label = category_label(category, self.config["categories"])
        siblings = sorted(cid for cid, cat in cluster_categories.items() if cat == category)
        if len(siblings) == 1:
            return label
        return f"{label} {siblings.index(cluster_id) + 1}"

    def _ungrouped_group(self, member_ids: list[str]) -> Group:
        return Group(
            id=UNGROUPED_ID,
            name=UNGROUPED_NAME,
            color=self.config["grouping"]["ungrouped_color"],
            member_ids=member_ids,
            cluster_id=NOISE,
        )
