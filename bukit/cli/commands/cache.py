"""
Cache command implementation.

Lists and cleans cached tool binaries.
"""

import logging

from bukit.cli.utils import format_size, get_cache
from bukit.core.directory import directory_size

logger = logging.getLogger(__name__)


def run_list(args) -> int:
    """
    List cached tools with their versions and sizes.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    cache = get_cache(args)
    entries = cache.list_installed()

    if not entries:
        print("Cache is empty")
        return 0

    print(f"Cached tools in {cache.cache_dir}:")
    for entry in entries:
        label = f"{entry.tool}@{entry.version}"
        print(f"  {label:<40} {format_size(entry.size_bytes):>10}")

    total = sum(entry.size_bytes for entry in entries)
    print(f"Total: {len(entries)} tool(s), {format_size(total)}")
    return 0


def run_clean(args) -> int:
    """
    Remove every cached tool.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if the cache could not be removed)
    """
    cache = get_cache(args)

    if not cache.cache_dir.exists():
        print("Cache is already empty")
        return 0

    freed = directory_size(cache.cache_dir)

    try:
        cache.clean()
    except OSError as e:
        logger.error(f"Failed to clean cache {cache.cache_dir}: {e}")
        return 1

    print(f"Cleaned cache: {cache.cache_dir} (freed {format_size(freed)})")
    return 0
