"""
Which command implementation.

Resolves a tool through its configured strategies, acquiring it if
needed, and prints the path of the runnable binary.
"""

import logging

from bukit.cli.utils import get_cache
from bukit.core.exceptions import ConfigError, ResolutionError
from bukit.toolchain.resolver import resolve_in_project

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the which command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if the tool could not be provided)
    """
    logger.debug(f"Arguments: {args}")

    try:
        path = resolve_in_project(
            args.tool,
            args.tool_version,
            args.project_root,
            offline=args.offline,
            config_path=args.config,
            cache=get_cache(args),
        )
    except (ConfigError, ResolutionError) as e:
        logger.error(str(e))
        return 1

    print(path)
    return 0
