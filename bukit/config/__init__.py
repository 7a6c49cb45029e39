"""
Configuration management for bu.

This package provides:
- The ToolDefinition / Config model and chain assembly
- Sandboxed evaluation of bu.star files
- YAML loading of bu.yaml files
"""

from bukit.config.definitions import (
    DEFAULT_STRATEGIES,
    Config,
    ConfigBuilder,
    ToolDefinition,
    build_chain,
    build_provider,
)
from bukit.config.loader import (
    CONFIG_FILENAMES,
    find_config_file,
    load_config,
    load_config_file,
    load_config_yaml,
)
from bukit.core.exceptions import ConfigError

__all__ = [
    "DEFAULT_STRATEGIES",
    "Config",
    "ConfigBuilder",
    "ConfigError",
    "ToolDefinition",
    "build_chain",
    "build_provider",
    "CONFIG_FILENAMES",
    "find_config_file",
    "load_config",
    "load_config_file",
    "load_config_yaml",
]
