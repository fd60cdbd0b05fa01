"""Configuration management for tabsense."""

import copy
import os
from pathlib import Path
from typing import Any

import yaml


DEFAULT_PALETTE = [
    "#3498db",
    "#e74c3c",
    "#2ecc71",
    "#9b59b6",
    "#f1c40f",
    "#1abc9c",
    "#e67e22",
    "#34495e",
    "#7f8c8d",
    "#d35400",
    "#27ae60",
    "#8e44ad",
]

DEFAULT_CATEGORIES = {
    "news": {
        "label": "News & Current Events",
        "description": "News and current events",
        "keywords": ["news", "breaking", "latest", "headlines", "report", "article", "journalism",
                     "press", "media", "cnn", "bbc", "reuters", "associated press"],
    },
    "search": {
        "label": "Search & Research",
        "description": "Search engines and queries",
        "keywords": ["search", "google", "bing", "yahoo", "query", "results", "find", "lookup"],
    },
    "reference": {
        "label": "Reference & Learning",
        "description": "Reference and educational content",
        "keywords": ["wikipedia", "encyclopedia", "reference", "definition", "wiki", "knowledge",
                     "information", "facts"],
    },
    "social": {
        "label": "Social Media",
        "description": "Social media and networking",
        "keywords": ["facebook", "twitter", "instagram", "linkedin", "social", "network", "post",
                     "share", "follow"],
    },
    "shopping": {
        "label": "Shopping & Commerce",
        "description": "Shopping and e-commerce",
        "keywords": ["amazon", "shop", "buy", "purchase", "store", "cart", "price", "product",
                     "retail", "ecommerce"],
    },
    "entertainment": {
        "label": "Entertainment & Media",
        "description": "Entertainment and media",
        "keywords": ["youtube", "video", "movie", "music", "game", "entertainment", "stream",
                     "watch", "play"],
    },
    "technology": {
        "label": "Technology & Development",
        "description": "Technology and development",
        "keywords": ["tech", "software", "hardware", "computer", "programming", "code",
                     "development", "github", "stack overflow"],
    },
    "finance": {
        "label": "Finance & Economics",
        "description": "Finance and economics",
        "keywords": ["bank", "finance", "money", "investment", "stock", "trading", "crypto",
                     "bitcoin", "economy"],
    },
    "education": {
        "label": "Education & Learning",
        "description": "Education and learning",
        "keywords": ["learn", "course", "tutorial", "education", "university", "school", "study",
                     "research", "academic"],
    },
    "work": {
        "label": "Work & Professional",
        "description": "Work and professional",
        "keywords": ["work", "job", "career", "office", "business", "professional", "company",
                     "corporate", "email"],
    },
}

DEFAULT_CONFIG = {
    "embedding": {"dimensions": 384, "analyzer": "none", "spacy_model": "en_core_web_sm"},
    "clustering": {
        "method": "dbscan",
        "dbscan": {"epsilon": 0.4, "min_points": 2},
        "kmeans": {"k": None, "max_iterations": 100, "random_state": None},
        # Keyword categories first, then DBSCAN inside categories larger than max_unsplit
        "semantic": {"epsilon": 0.3, "min_points": 2, "min_score": 0.1, "max_unsplit": 3},
    },
    "categories": DEFAULT_CATEGORIES,
    "grouping": {
        "visualization_threshold": 0.48,
        "similar_threshold": 0.6,
        "max_name_length": 30,
        "ungrouped_color": "#cccccc",
        "palette": DEFAULT_PALETTE,
    },
    "naming": {
        "provider": "none",
        "claude_model": "claude-sonnet-4-20250514",
        "max_tokens": 20,
        "timeout": 10.0,
    },
}


def _find_config_file() -> Path | None:
    """Look for a tabsense config in standard locations."""
    candidates = [
        Path.cwd() / "config" / "tabsense.yaml",
        Path.cwd() / "tabsense.yaml",
        Path.home() / ".tabsense" / "config.yaml",
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration, merging defaults with file and env vars."""
    cfg = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(config_path) if config_path else _find_config_file()
    if path and path.exists():
        with open(path) as f:
            file_cfg = yaml.safe_load(f) or {}
        _deep_merge(cfg, file_cfg)

    # Env overrides
    if api_key := os.environ.get("ANTHROPIC_API_KEY"):
        cfg["claude_api_key"] = api_key

    return cfg


def with_defaults(config: dict[str, Any] | None) -> dict[str, Any]:
    """Fill a partial config dict with defaults."""
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if config:
        _deep_merge(cfg, copy.deepcopy(config))
    return cfg


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place."""
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
