"""Tests for configuration loading."""

from tabsense.config import DEFAULT_CONFIG, load_config, with_defaults


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    cfg = load_config()
    assert cfg["clustering"]["dbscan"] == {"epsilon": 0.4, "min_points": 2}
    assert cfg["grouping"]["similar_threshold"] == 0.6
    assert len(cfg["grouping"]["palette"]) == 12
    assert "claude_api_key" not in cfg


def test_yaml_overrides_are_merged(tmp_path, monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    path = tmp_path / "tabsense.yaml"
    path.write_text(
        "clustering:\n"
        "  method: kmeans\n"
        "  kmeans:\n"
        "    k: 3\n"
        "naming:\n"
        "  provider: anthropic\n"
    )

    cfg = load_config(path)
    assert cfg["clustering"]["method"] == "kmeans"
    assert cfg["clustering"]["kmeans"]["k"] == 3
    assert cfg["clustering"]["kmeans"]["max_iterations"] == 100
    assert cfg["clustering"]["dbscan"]["epsilon"] == 0.4
    assert cfg["naming"]["provider"] == "anthropic"


def test_config_found_in_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "tabsense.yaml").write_text("grouping:\n  max_name_length: 40\n")
    assert load_config()["grouping"]["max_name_length"] == 40


def test_empty_yaml_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path)["embedding"]["dimensions"] == 384


def test_env_api_key(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-from-env")
    assert load_config()["claude_api_key"] == "sk-from-env"


def test_defaults_are_not_mutated(tmp_path):
    path = tmp_path / "tabsense.yaml"
    path.write_text("grouping:\n  palette: ['#ffffff']\n")
    load_config(path)
    cfg = with_defaults({"clustering": {"dbscan": {"epsilon": 0.1}}})
    cfg["grouping"]["palette"].append("#000000")

    assert DEFAULT_CONFIG["clustering"]["dbscan"]["epsilon"] == 0.4
    assert len(DEFAULT_CONFIG["grouping"]["palette"]) == 12


def test_with_defaults():
    assert with_defaults(None) == DEFAULT_CONFIG
    cfg = with_defaults({"embedding": {"analyzer": "spacy"}})
    assert cfg["embedding"]["analyzer"] == "spacy"
    assert cfg["embedding"]["dimensions"] == 384
