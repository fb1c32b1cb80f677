"""Unit tests for config.py"""

import pytest

from mdcanon.config import Settings, load_config


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Run each test in an empty directory with no MDCANON_ variables set."""
    monkeypatch.chdir(tmp_path)
    for name in Settings.model_fields:
        monkeypatch.delenv(f"MDCANON_{name.upper()}", raising=False)


def test_load_config_defaults():
    """Settings defaults are used when no config.yaml, env var, or CLI override exists."""
    settings = load_config()
    assert settings.parser_config == "gfm-like"
    assert settings.diagram_command == ["dot", "-Tsvg"]
    assert settings.diagram_timeout is None
    assert settings.staging_dir == ".mdcanon/staging"


def test_load_config_uses_env_parser_config(monkeypatch):
    """MDCANON_PARSER_CONFIG env var is picked up by load_config."""
    monkeypatch.setenv("MDCANON_PARSER_CONFIG", "commonmark")
    assert load_config().parser_config == "commonmark"


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """MDCANON_OUTPUT_DIR takes precedence over config.yaml output_dir."""
    (tmp_path / "config.yaml").write_text("output_dir: site\n")
    monkeypatch.setenv("MDCANON_OUTPUT_DIR", "public")
    assert load_config().output_dir == "public"


def test_load_config_reads_config_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("output_dir: site\ndiagram_command: [neato, -Tsvg]\n")
    settings = load_config()
    assert settings.output_dir == "site"
    assert settings.diagram_command == ["neato", "-Tsvg"]


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("MDCANON_STAGING_DIR", "env-staging")
    settings = load_config(overrides={"staging_dir": "cli-staging", "output_dir": None})
    assert settings.staging_dir == "cli-staging"
    assert settings.output_dir == "dist"


def test_load_config_env_diagram_command(monkeypatch):
    """MDCANON_DIAGRAM_COMMAND is split on whitespace into an argv list."""
    monkeypatch.setenv("MDCANON_DIAGRAM_COMMAND", "dot -Tsvg -Gdpi=72")
    assert load_config().diagram_command == ["dot", "-Tsvg", "-Gdpi=72"]


def test_load_config_env_diagram_timeout(monkeypatch):
    """MDCANON_DIAGRAM_TIMEOUT is coerced to float."""
    monkeypatch.setenv("MDCANON_DIAGRAM_TIMEOUT", "2.5")
    assert load_config().diagram_timeout == 2.5


def test_load_config_log_level_is_uppercased(monkeypatch):
    monkeypatch.setenv("MDCANON_LOG_LEVEL", "debug")
    assert load_config().log_level == "DEBUG"


def test_load_config_invalid_log_level(monkeypatch):
    """An unknown log level is rejected."""
    monkeypatch.setenv("MDCANON_LOG_LEVEL", "LOUD")
    with pytest.raises(ValueError, match="Invalid settings"):
        load_config()


def test_load_config_invalid_timeout():
    with pytest.raises(ValueError, match="Invalid settings"):
        load_config(overrides={"diagram_timeout": 0})


def test_load_config_empty_diagram_command():
    with pytest.raises(ValueError, match="Invalid settings"):
        load_config(overrides={"diagram_command": []})


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_non_mapping_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="expected a mapping"):
        load_config()
