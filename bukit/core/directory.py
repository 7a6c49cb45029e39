"""
Directory layout for bu.

Cache root (~/.bu/cache/ or %USERPROFILE%\\.bu\\cache\\):
    <tool>/
        .<version>.lock   : install lock for one tool/version
        <version>/
            <tool>[.exe]  : the cached binary
"""

import os
from pathlib import Path
from typing import Optional

from bukit.core.exceptions import BuKitError

CACHE_DIR_ENV = "BU_CACHE_DIR"


class DirectoryError(BuKitError):
    """Base exception for directory-related errors."""

    pass


def get_home_dir() -> Path:
    """
    Get the per-user bu directory.

    Returns:
        Path: ``%USERPROFILE%\\.bu`` on Windows, ``~/.bu`` elsewhere.
    """
    if os.name == "nt":  # Windows
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise DirectoryError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine cache directory."
            )
        return Path(user_profile) / ".bu"
    else:  # Linux/macOS
        return Path.home() / ".bu"


def get_global_cache_dir(override: Optional[Path] = None) -> Path:
    """
    Get the tool cache root.

    Precedence: explicit ``override``, then the ``BU_CACHE_DIR`` environment
    variable, then ``<home>/.bu/cache``.

    Example:
        >>> get_global_cache_dir()
        PosixPath('/home/user/.bu/cache')  # on Linux
    """
    if override is not None:
        return Path(override)

    env_dir = os.environ.get(CACHE_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser()

    return get_home_dir() / "cache"


def directory_size(path: Path) -> int:
    """Calculate total size of the files under ``path`` in bytes."""
    path = Path(path)
    if path.is_file():
        return path.stat().st_size

    total_size = 0
    for item in path.rglob("*"):
        if item.is_file():
            total_size += item.stat().st_size

    return total_size
