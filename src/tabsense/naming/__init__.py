"""Cluster theme naming."""

from .namer import AnthropicThemeNamer, NullThemeNamer, ThemeNamer, get_theme_namer

__all__ = ["AnthropicThemeNamer", "NullThemeNamer", "ThemeNamer", "get_theme_namer"]
