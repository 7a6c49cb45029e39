"""
Tool resolution entry point.

Combines config-driven chain assembly with chain execution:

    tool + version + offline flag
        -> Config.chain_for(tool), or a host-only chain when undefined
        -> ChainProvider.provide(tool, version, ToolContext)
        -> runnable path, or ResolutionError naming tool and version

Example:
    >>> from bukit.toolchain.resolver import resolve
    >>> resolve("buck2", "2024-01-01", offline=False, config=config)
    PosixPath('/home/user/.bu/cache/buck2/2024-01-01/buck2')
"""

import logging
from pathlib import Path
from typing import Optional

from bukit.config.definitions import Config
from bukit.config.loader import find_config_file, load_config_file
from bukit.core.exceptions import ResolutionError, ToolProviderError
from bukit.toolchain.cache import ToolCache
from bukit.toolchain.providers import ChainProvider, HostProvider, ToolContext

logger = logging.getLogger(__name__)


def default_chain() -> ChainProvider:
    """Chain used for tools without a definition: host lookup only."""
    return ChainProvider([HostProvider()])


def provider_for(config: Optional[Config], tool: str) -> ChainProvider:
    """Get the provider chain for ``tool``, falling back to the host-only chain."""
    chain = config.chain_for(tool) if config is not None else None
    if chain is None:
        logger.debug(f"No definition for '{tool}', using host lookup only")
        return default_chain()
    return chain


def resolve(
    tool: str,
    version: str,
    offline: bool = False,
    config: Optional[Config] = None,
    cache: Optional[ToolCache] = None,
) -> Path:
    """
    Resolve a runnable binary for ``tool`` at ``version``.

    Args:
        tool: Tool name (e.g., "buck2")
        version: Requested version, possibly "latest"
        offline: Forbid network access
        config: Tool definitions (None behaves like an empty Config)
        cache: Tool cache (default cache root when None)

    Returns:
        Path to the runnable binary

    Raises:
        ResolutionError: If every provider failed; ``cause`` is the last failure
    """
    if cache is None:
        cache = ToolCache()

    context = ToolContext(offline=offline, cache=cache)
    chain = provider_for(config, tool)
    logger.debug(f"Resolving {tool}@{version} with strategies {chain.strategies}")

    try:
        path = chain.provide(tool, version, context)
    except ToolProviderError as e:
        raise ResolutionError(tool, version, e) from e

    logger.info(f"Resolved tool path: {path}")
    return path


def resolve_in_project(
    tool: str,
    version: str,
    project_root: Path,
    offline: bool = False,
    config_path: Optional[Path] = None,
    cache: Optional[ToolCache] = None,
) -> Path:
    """
    Resolve a tool using the configuration file of a project.

    ``config_path`` overrides discovery of bu.star / bu.yaml in
    ``project_root``. A configuration that fails to load is fatal.

    Raises:
        ConfigError: If the configuration cannot be loaded
        ResolutionError: If every provider failed
    """
    if config_path is None:
        config_path = find_config_file(project_root)

    config = load_config_file(config_path)
    return resolve(tool, version, offline=offline, config=config, cache=cache)
