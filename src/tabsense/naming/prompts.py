"""Prompt templates for cluster theme naming."""

CLUSTER_THEME_PROMPT = """Given these browser tab titles, provide a short, descriptive label (4 words or less) that captures their common theme or topic.

Tab Titles:
{titles}

Respond with the label only, no quotes or explanation.

Label: """
