"""
Shared utilities for CLI commands.

Provides cache construction from global options and size formatting.
"""

import logging

from bukit.toolchain.cache import ToolCache

logger = logging.getLogger(__name__)


# ============================================================================
# Cache Access
# ============================================================================


def get_cache(args) -> ToolCache:
    """
    Create the tool cache selected by the global ``--cache-dir`` option.

    Args:
        args: Parsed command-line arguments

    Returns:
        ToolCache rooted at ``--cache-dir``, $BU_CACHE_DIR or ~/.bu/cache
    """
    cache = ToolCache(getattr(args, "cache_dir", None))
    logger.debug(f"Using tool cache at {cache.cache_dir}")
    return cache


# ============================================================================
# Output Formatting
# ============================================================================


def format_size(size_bytes: int) -> str:
    """
    Format a byte count for display.

    Example:
        >>> format_size(2048)
        '2.0 KB'
        >>> format_size(500)
        '500 B'
    """
    kb = 1024
    mb = kb * 1024
    gb = mb * 1024

    if size_bytes >= gb:
        return f"{size_bytes / gb:.1f} GB"
    if size_bytes >= mb:
        return f"{size_bytes / mb:.1f} MB"
    if size_bytes >= kb:
        return f"{size_bytes / kb:.1f} KB"
    return f"{size_bytes} B"
