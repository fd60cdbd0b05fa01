"""Theme naming for clusters, backed by an LLM or by nothing at all."""

from abc import ABC, abstractmethod
from typing import Any

from .prompts import CLUSTER_THEME_PROMPT


class ThemeNamer(ABC):
    """Produces a short human-readable theme for a set of titles."""

    @abstractmethod
    def name_cluster(self, titles: list[str]) -> str:
        """Return a theme label. May raise or return junk; callers validate."""


class NullThemeNamer(ThemeNamer):
    """Namer that never names anything, leaving every cluster on its fallback label."""

    def name_cluster(self, titles: list[str]) -> str:
        return ""


class AnthropicThemeNamer(ThemeNamer):
    """Names clusters with Claude through the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 20,
        timeout: float = 10.0,
        client: Any = None,
    ):
        if client is None:
            if not api_key:
                raise ValueError(
                    "Claude API key required for theme naming. Set ANTHROPIC_API_KEY or claude_api_key in config."
                )
            import anthropic
            client = anthropic.Anthropic(api_key=api_key, timeout=timeout)

        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    def name_cluster(self, titles: list[str]) -> str:
        prompt = CLUSTER_THEME_PROMPT.format(titles="\n".join(f"- {t}" for t in titles))
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        if not response.content:
            return ""
        return response.content[0].text


def get_theme_namer(config: dict[str, Any]) -> ThemeNamer:
    """Factory: return the namer selected in config."""
    naming_cfg = config.get("naming", {})
    provider = naming_cfg.get("provider", "none")

    if provider in ("none", None):
        return NullThemeNamer()
    elif provider == "anthropic":
        return AnthropicThemeNamer(
            api_key=config.get("claude_api_key"),
            model=naming_cfg.get("claude_model", "claude-sonnet-4-20250514"),
            max_tokens=naming_cfg.get("max_tokens", 20),
            timeout=naming_cfg.get("timeout", 10.0),
        )
    else:
        raise ValueError(f"Unknown naming provider: {provider}")
