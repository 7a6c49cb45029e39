"""
Tests for ToolDefinition, ConfigBuilder and chain assembly.
"""

import pytest

from bukit.config.definitions import (
    DEFAULT_STRATEGIES,
    Config,
    ConfigBuilder,
    ToolDefinition,
    build_chain,
    build_provider,
)
from bukit.core.exceptions import ConfigError
from bukit.toolchain.providers import HostProvider, SourceProvider, UrlProvider


class TestToolDefinition:
    """Tests for ToolDefinition defaults."""

    def test_defaults(self):
        definition = ToolDefinition(name="buck2")

        assert definition.version is None
        assert definition.url_template is None
        assert definition.sha256 is None
        assert definition.git_url is None
        assert definition.strategies == ("host", "url")
        assert DEFAULT_STRATEGIES == ("host", "url")


class TestBuildProvider:
    """Tests for mapping strategy names to providers."""

    def test_host(self):
        assert isinstance(build_provider(ToolDefinition("t"), "host"), HostProvider)

    def test_url_requires_template(self):
        assert build_provider(ToolDefinition("t"), "url") is None

        provider = build_provider(
            ToolDefinition("t", url_template="https://x/{version}", sha256="ab"), "url"
        )
        assert isinstance(provider, UrlProvider)
        assert provider.sha256 == "ab"

    def test_source_requires_git_url(self):
        assert build_provider(ToolDefinition("t"), "source") is None

        provider = build_provider(
            ToolDefinition("t", git_url="https://github.com/x/t"), "source"
        )
        assert isinstance(provider, SourceProvider)
        assert provider.bin_name == "t"

    def test_unknown_strategy_is_dropped(self):
        assert build_provider(ToolDefinition("t"), "docker") is None


class TestBuildChain:
    """Tests for chain assembly."""

    def test_preserves_order(self):
        definition = ToolDefinition(
            "t",
            url_template="https://x",
            git_url="https://g",
            strategies=("source", "url", "host"),
        )
        assert build_chain(definition).strategies == ["source", "url", "host"]

    def test_drops_unusable_strategies(self):
        definition = ToolDefinition("t", strategies=("url", "bogus", "host"))
        assert build_chain(definition).strategies == ["host"]

    def test_empty_strategies(self):
        assert build_chain(ToolDefinition("t", strategies=())).strategies == []

    def test_empty_chain_is_truthy(self):
        assert build_chain(ToolDefinition("t", strategies=()))


class TestConfig:
    """Tests for the Config mapping."""

    def test_chain_for_undefined(self):
        assert Config().chain_for("missing") is None

    def test_mapping_behaviour(self):
        config = Config({"buck2": ToolDefinition("buck2")})

        assert "buck2" in config
        assert len(config) == 1
        assert list(config) == ["buck2"]
        assert config.get("ruff") is None

    def test_is_immutable(self):
        config = Config({"buck2": ToolDefinition("buck2")})
        with pytest.raises(TypeError):
            config.tools["ruff"] = ToolDefinition("ruff")


class TestConfigBuilder:
    """Tests for ConfigBuilder.register_tool."""

    def test_last_write_wins(self):
        builder = ConfigBuilder()
        builder.register_tool(name="buck2", version="1")
        builder.register_tool(name="buck2", version="2")

        config = builder.build()

        assert len(config) == 1
        assert config.get("buck2").version == "2"

    def test_default_strategies(self):
        builder = ConfigBuilder()
        builder.register_tool(name="buck2")
        assert builder.build().get("buck2").strategies == ("host", "url")

    def test_build_is_a_snapshot(self):
        builder = ConfigBuilder()
        builder.register_tool(name="buck2")
        config = builder.build()
        builder.register_tool(name="ruff")

        assert "ruff" not in config

    @pytest.mark.parametrize("name", ["", None, 3])
    def test_invalid_name(self, name):
        with pytest.raises(ConfigError, match="name must be a non-empty string"):
            ConfigBuilder().register_tool(name=name)

    @pytest.mark.parametrize("strategies", ["url", ["url", 1], {"url": 1}])
    def test_invalid_strategies(self, strategies):
        with pytest.raises(ConfigError, match="strategies must be a list of strings"):
            ConfigBuilder().register_tool(name="buck2", strategies=strategies)

    def test_invalid_field_type(self):
        with pytest.raises(ConfigError, match="sha256 must be a string"):
            ConfigBuilder().register_tool(name="buck2", sha256=123)
