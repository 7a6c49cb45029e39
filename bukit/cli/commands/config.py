"""
Config command implementation.

Shows the effective definition and strategy order for one tool.
"""

import logging

from bukit.config.definitions import ToolDefinition
from bukit.config.loader import find_config_file, load_config_file
from bukit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the config command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if the configuration fails to load)
    """
    config_path = args.config or find_config_file(args.project_root)

    try:
        config = load_config_file(config_path)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    definition = config.get(args.tool)

    print(f"Tool:        {args.tool}")
    print(f"Config file: {config_path if config_path else '(none)'}")

    if definition is None:
        print("Strategies:  host (no definition)")
        return 0

    _print_definition(definition)
    return 0


def _print_definition(definition: ToolDefinition) -> None:
    print(f"Strategies:  {', '.join(definition.strategies) or '(none)'}")
    if definition.version:
        print(f"Version:     {definition.version}")
    if definition.url_template:
        print(f"URL:         {definition.url_template}")
    if definition.sha256:
        print(f"SHA256:      {definition.sha256}")
    if definition.git_url:
        print(f"Git URL:     {definition.git_url}")
