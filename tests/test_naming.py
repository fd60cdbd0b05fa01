"""Tests for cluster theme naming."""

from types import SimpleNamespace

import pytest

from tabsense.naming.namer import AnthropicThemeNamer, NullThemeNamer, get_theme_namer


class FakeMessages:
    def __init__(self, content):
        self.content = content
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        return SimpleNamespace(content=self.content)


def _client(content):
    return SimpleNamespace(messages=FakeMessages(content))


def test_anthropic_namer_sends_titles():
    client = _client([SimpleNamespace(text="Physics Research")])
    namer = AnthropicThemeNamer(client=client, model="claude-test", max_tokens=15)

    assert namer.name_cluster(["Quantum basics", "Lab results"]) == "Physics Research"

    request = client.messages.requests[0]
    assert request["model"] == "claude-test"
    assert request["max_tokens"] == 15
    prompt = request["messages"][0]["content"]
    assert "- Quantum basics\n- Lab results" in prompt
    assert prompt.rstrip().endswith("Label:")


def test_anthropic_namer_empty_response():
    namer = AnthropicThemeNamer(client=_client([]))
    assert namer.name_cluster(["a", "b"]) == ""


def test_anthropic_namer_requires_key():
    with pytest.raises(ValueError):
        AnthropicThemeNamer()


def test_get_theme_namer():
    assert isinstance(get_theme_namer({}), NullThemeNamer)
    assert isinstance(get_theme_namer({"naming": {"provider": "none"}}), NullThemeNamer)
    assert NullThemeNamer().name_cluster(["x"]) == ""

    namer = get_theme_namer({
        "claude_api_key": "sk-test",
        "naming": {"provider": "anthropic", "claude_model": "claude-x", "max_tokens": 8},
    })
    assert isinstance(namer, AnthropicThemeNamer)
    assert namer.model == "claude-x"
    assert namer.max_tokens == 8

    with pytest.raises(ValueError):
        get_theme_namer({"naming": {"provider": "anthropic"}})
    with pytest.raises(ValueError):
        get_theme_namer({"naming": {"provider": "openai"}})
