"""
Loading of tool configuration.

Two declarative formats are supported:

- ``bu.star``: a sandboxed script calling ``bu.register_tool(...)``
- ``bu.yaml`` / ``bu.yml``: a ``tools:`` mapping keyed by tool name

Example bu.yaml:

    tools:
      buck2:
        url_template: https://example.com/{platform}/buck2-{version}
        sha256: 3f1c...
        strategies: [url, host]

Both formats fill a fresh ConfigBuilder per load, so concurrent loads never
share state. A failed load raises ConfigError and returns no partial Config.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml

from bukit.config.definitions import Config, ConfigBuilder
from bukit.config.sandbox import evaluate
from bukit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("bu.star", "bu.yaml", "bu.yml")
YAML_SUFFIXES = (".yaml", ".yml")
TOOL_FIELDS = ("version", "url_template", "sha256", "git_url", "strategies")


def load_config(source: str, filename: str = "bu.star") -> Config:
    """
    Build a Config by evaluating ``bu.star`` source text.

    Raises:
        ConfigError: If the source is rejected or evaluation fails
    """
    builder = ConfigBuilder()
    evaluate(source, builder, filename=filename)
    config = builder.build()
    logger.debug(f"Loaded {len(config)} tool definition(s) from {filename}")
    return config


def _yaml_entries(tools: Any) -> Iterable[Tuple[str, Dict[str, Any]]]:
    if isinstance(tools, dict):
        for name, entry in tools.items():
            if entry is None:
                entry = {}
            if not isinstance(entry, dict):
                raise ConfigError(f"Tool '{name}' must be a mapping")
            yield str(name), entry
    elif isinstance(tools, list):
        for index, entry in enumerate(tools):
            if not isinstance(entry, dict) or "name" not in entry:
                raise ConfigError(f"Tool entry #{index} must be a mapping with a 'name'")
            entry = dict(entry)
            yield str(entry.pop("name")), entry
    else:
        raise ConfigError("'tools' must be a mapping or a list")


def load_config_yaml(source: str, filename: str = "bu.yaml") -> Config:
    """
    Build a Config from YAML text.

    Raises:
        ConfigError: On invalid YAML or invalid tool entries
    """
    try:
        data = yaml.safe_load(source)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {filename}: {e}") from e

    builder = ConfigBuilder()
    if data is None:
        return builder.build()

    if not isinstance(data, dict):
        raise ConfigError(f"{filename}: top level must be a mapping")

    for name, entry in _yaml_entries(data.get("tools") or {}):
        unknown = sorted(set(entry) - set(TOOL_FIELDS))
        if unknown:
            raise ConfigError(
                f"{filename}: unknown field(s) for tool '{name}': {', '.join(unknown)}"
            )

        fields = dict(entry)
        # YAML turns 2024-01-01 into a date and 1.0 into a float
        if fields.get("version") is not None:
            fields["version"] = str(fields["version"])

        builder.register_tool(name=name, **fields)

    config = builder.build()
    logger.debug(f"Loaded {len(config)} tool definition(s) from {filename}")
    return config


def load_config_file(config_path: Optional[Path]) -> Config:
    """
    Load configuration from a file.

    ``.yaml``/``.yml`` files are parsed as YAML, anything else is evaluated
    as a sandboxed script. A missing file yields an empty Config.

    Raises:
        ConfigError: If the file cannot be read or loaded
    """
    if config_path is None or not Path(config_path).exists():
        logger.debug(f"No configuration file at {config_path}, using defaults")
        return Config()

    config_path = Path(config_path)
    logger.info(f"Loading configuration from {config_path}")

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file {config_path}: {e}") from e

    if config_path.suffix.lower() in YAML_SUFFIXES:
        return load_config_yaml(content, filename=config_path.name)
    return load_config(content, filename=config_path.name)


def find_config_file(project_root: Path) -> Optional[Path]:
    """Find the first of bu.star, bu.yaml, bu.yml in ``project_root``."""
    for name in CONFIG_FILENAMES:
        candidate = Path(project_root) / name
        if candidate.is_file():
            return candidate
    return None
