"""
Tests for configuration loading from bu.star and bu.yaml files.
"""

import pytest

from bukit.config.loader import (
    find_config_file,
    load_config,
    load_config_file,
    load_config_yaml,
)
from bukit.core.exceptions import ConfigError

STAR_SOURCE = """
bu.register_tool(
    name = "buck2",
    version = "2024-01-01",
    url_template = "https://github.com/facebook/buck2/releases/download/{version}/buck2-{platform}.zst",
    sha256 = "abc123",
    strategies = ["url", "host"],
)

bu.register_tool(
    name = "reindeer",
    git_url = "https://github.com/facebookincubator/reindeer",
    strategies = ["source", "host"],
)
"""


class TestLoadConfig:
    """Tests for evaluating bu.star text."""

    def test_definitions(self):
        config = load_config(STAR_SOURCE)

        buck2 = config.get("buck2")
        assert buck2.sha256 == "abc123"
        assert buck2.strategies == ("url", "host")
        assert config.chain_for("buck2").strategies == ["url", "host"]
        assert config.chain_for("reindeer").strategies == ["source", "host"]

    def test_loads_are_independent(self):
        first = load_config('bu.register_tool(name = "a")')
        second = load_config('bu.register_tool(name = "b")')

        assert list(first) == ["a"]
        assert list(second) == ["b"]

    def test_failure_yields_no_partial_config(self):
        with pytest.raises(ConfigError):
            load_config('bu.register_tool(name = "a")\nx = 1 / 0\n')


class TestLoadConfigYaml:
    """Tests for YAML configuration."""

    def test_mapping_form(self):
        config = load_config_yaml(
            """
tools:
  buck2:
    version: 2024-01-01
    url_template: https://example.com/{version}/buck2-{platform}
    strategies: [url, host]
  ruff: {}
"""
        )

        assert config.get("buck2").version == "2024-01-01"
        assert config.get("buck2").strategies == ("url", "host")
        assert config.get("ruff").strategies == ("host", "url")

    def test_list_form(self):
        config = load_config_yaml(
            """
tools:
  - name: buck2
    git_url: https://github.com/facebook/buck2
    strategies: [source]
  - name: buck2
    strategies: [host]
"""
        )

        assert config.get("buck2").strategies == ("host",)
        assert config.get("buck2").git_url is None

    def test_empty_document(self):
        assert len(load_config_yaml("")) == 0

    def test_numeric_version_is_string(self):
        config = load_config_yaml("tools:\n  tool:\n    version: 1.5\n")
        assert config.get("tool").version == "1.5"

    def test_invalid_yaml(self):
        with pytest.raises(ConfigError, match="Invalid YAML syntax"):
            load_config_yaml("tools: [unclosed")

    def test_unknown_field(self):
        with pytest.raises(ConfigError, match="unknown field"):
            load_config_yaml("tools:\n  buck2:\n    sha512: abc\n")

    def test_top_level_must_be_mapping(self):
        with pytest.raises(ConfigError, match="top level must be a mapping"):
            load_config_yaml("- a\n- b\n")

    def test_list_entry_needs_name(self):
        with pytest.raises(ConfigError, match="must be a mapping with a 'name'"):
            load_config_yaml("tools:\n  - version: 1\n")


class TestLoadConfigFile:
    """Tests for file discovery and dispatch."""

    def test_missing_file_is_empty_config(self, tmp_path):
        assert len(load_config_file(tmp_path / "bu.star")) == 0
        assert len(load_config_file(None)) == 0

    def test_star_file(self, tmp_path):
        path = tmp_path / "bu.star"
        path.write_text(STAR_SOURCE)

        assert sorted(load_config_file(path)) == ["buck2", "reindeer"]

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "bu.yml"
        path.write_text("tools:\n  buck2:\n    strategies: [host]\n")

        assert load_config_file(path).get("buck2").strategies == ("host",)

    def test_error_names_file(self, tmp_path):
        path = tmp_path / "tools.star"
        path.write_text("import os\n")

        with pytest.raises(ConfigError, match="tools.star:1"):
            load_config_file(path)

    def test_find_prefers_star(self, tmp_path):
        (tmp_path / "bu.yaml").write_text("")
        (tmp_path / "bu.star").write_text("")

        assert find_config_file(tmp_path) == tmp_path / "bu.star"

    def test_find_yaml(self, tmp_path):
        (tmp_path / "bu.yml").write_text("")
        assert find_config_file(tmp_path) == tmp_path / "bu.yml"

    def test_find_nothing(self, tmp_path):
        assert find_config_file(tmp_path) is None
