"""
Tool definition model and provider-chain assembly.

A ToolDefinition records which acquisition strategies apply to one tool and
their parameters. Config maps tool names to definitions and compiles a
definition into a ChainProvider at resolution time.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from bukit.core.exceptions import ConfigError
from bukit.core.interfaces import ToolProvider
from bukit.toolchain.providers import (
    ChainProvider,
    HostProvider,
    SourceProvider,
    UrlProvider,
)

logger = logging.getLogger(__name__)

DEFAULT_STRATEGIES: Tuple[str, ...] = ("host", "url")
KNOWN_STRATEGIES = ("host", "url", "source")


@dataclass(frozen=True)
class ToolDefinition:
    """Declarative acquisition settings for one tool."""

    name: str
    version: Optional[str] = None  # informational only, never used as a pin
    url_template: Optional[str] = None
    sha256: Optional[str] = None
    git_url: Optional[str] = None
    strategies: Tuple[str, ...] = field(default=DEFAULT_STRATEGIES)


def build_provider(definition: ToolDefinition, strategy: str) -> Optional[ToolProvider]:
    """
    Map one strategy name to a provider for ``definition``.

    Returns None when the strategy is unknown or its required parameters
    are missing.
    """
    if strategy == "host":
        return HostProvider()
    if strategy == "url":
        if definition.url_template:
            return UrlProvider(definition.url_template, sha256=definition.sha256)
        logger.debug(f"Dropping 'url' strategy for {definition.name}: no url_template")
        return None
    if strategy == "source":
        if definition.git_url:
            return SourceProvider(definition.git_url, bin_name=definition.name)
        logger.debug(f"Dropping 'source' strategy for {definition.name}: no git_url")
        return None

    logger.debug(f"Ignoring unknown strategy '{strategy}' for {definition.name}")
    return None


def build_chain(definition: ToolDefinition) -> ChainProvider:
    """Compile a definition into a chain, preserving strategy order."""
    providers: List[ToolProvider] = []
    for strategy in definition.strategies:
        provider = build_provider(definition, strategy)
        if provider is not None:
            providers.append(provider)
    return ChainProvider(providers)


class Config:
    """
    Immutable mapping from tool name to ToolDefinition.

    Example:
        >>> config = Config({"buck2": ToolDefinition(name="buck2")})
        >>> config.chain_for("buck2").strategies
        ['host']
    """

    def __init__(self, tools: Optional[Mapping[str, ToolDefinition]] = None):
        self._tools = MappingProxyType(dict(tools or {}))

    @property
    def tools(self) -> Mapping[str, ToolDefinition]:
        return self._tools

    def get(self, tool_name: str) -> Optional[ToolDefinition]:
        return self._tools.get(tool_name)

    def chain_for(self, tool_name: str) -> Optional[ChainProvider]:
        """
        Build the provider chain for a tool.

        Returns:
            ChainProvider, or None when the tool has no definition
        """
        definition = self._tools.get(tool_name)
        if definition is None:
            return None
        return build_chain(definition)

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self._tools

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __repr__(self) -> str:
        return f"Config(tools={sorted(self._tools)!r})"


def _optional_str(field_name: str, value: object) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    raise ConfigError(f"{field_name} must be a string, got {type(value).__name__}")


class ConfigBuilder:
    """
    Mutable registry filled while a declarative source is evaluated.

    A later registration for the same name replaces the earlier one.
    build() freezes the accumulated definitions into a Config.
    """

    def __init__(self):
        self._tools: Dict[str, ToolDefinition] = {}

    def register_tool(
        self,
        name: str,
        version: Optional[str] = None,
        url_template: Optional[str] = None,
        sha256: Optional[str] = None,
        git_url: Optional[str] = None,
        strategies: Optional[Sequence[str]] = None,
    ) -> None:
        """Upsert one tool definition."""
        if not isinstance(name, str) or not name:
            raise ConfigError("name must be a non-empty string")

        if strategies is None:
            strategies_tuple = DEFAULT_STRATEGIES
        elif isinstance(strategies, (list, tuple)) and all(
            isinstance(item, str) for item in strategies
        ):
            strategies_tuple = tuple(strategies)
        else:
            raise ConfigError("strategies must be a list of strings")

        definition = ToolDefinition(
            name=name,
            version=_optional_str("version", version),
            url_template=_optional_str("url_template", url_template),
            sha256=_optional_str("sha256", sha256),
            git_url=_optional_str("git_url", git_url),
            strategies=strategies_tuple,
        )

        if name in self._tools:
            logger.debug(f"Overriding earlier definition of tool '{name}'")
        self._tools[name] = definition

    def build(self) -> Config:
        return Config(self._tools)
