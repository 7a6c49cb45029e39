"""
Cross-process locking for cache installs.

Two concurrent ``bu`` invocations installing the same tool/version are
serialized with a file lock stored next to the version directory:

    <cache-root>/<tool>/.<version>.lock

Usage:
    from bukit.core.locking import LockManager

    lock_manager = LockManager(cache_root)
    with lock_manager.tool_lock("buck2", "2024-01-01"):
        # write the cache entry
        pass
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

logger = logging.getLogger(__name__)


def _sanitize(component: str) -> str:
    return component.replace("/", "-").replace("\\", "-").replace(":", "-")


class LockManager:
    """
    Manages install locks under a cache root.

    Uses file-based locking with the `filelock` library for cross-platform
    compatibility and automatic release on process death.

    Attributes:
        cache_root: Directory holding the per-tool lock files
    """

    def __init__(self, cache_root: Path):
        self.cache_root = Path(cache_root)

    def lock_path(self, tool: str, version: str) -> Path:
        """Get the lock file path for one tool/version."""
        return self.cache_root / _sanitize(tool) / f".{_sanitize(version)}.lock"

    @contextmanager
    def tool_lock(self, tool: str, version: str, timeout: float = -1):
        """
        Acquire the install lock for a tool/version.

        Args:
            tool: Tool name
            version: Tool version
            timeout: Maximum wait time in seconds (negative waits indefinitely)

        Raises:
            LockTimeout: If lock can't be acquired within timeout
        """
        lock_path = self.lock_path(tool, version)
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired install lock: {lock_path}")
                yield
                logger.debug(f"Released install lock: {lock_path}")
        except LockTimeout:
            logger.error(
                f"Could not acquire install lock for {tool}@{version} after {timeout}s. "
                "Another process may be installing this tool."
            )
            raise


__all__ = ["LockManager", "LockTimeout"]
