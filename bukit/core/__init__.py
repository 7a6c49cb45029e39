"""
Core functionality for bu.

This package contains the foundational modules that other components depend on.
"""

from .directory import (
    CACHE_DIR_ENV,
    DirectoryError,
    directory_size,
    get_global_cache_dir,
    get_home_dir,
)

from .locking import (
    LockManager,
    LockTimeout,
)

from .platform import (
    PlatformInfo,
    SUPPORTED_PLATFORM_IDENTIFIERS,
    clear_platform_cache,
    detect_platform,
    exe_suffix,
    platform_identifier,
)

from .exceptions import (
    BuKitError,
    ConfigError,
    NetworkError,
    ResolutionError,
    StrategyFailure,
    ToolIOError,
    ToolNotFoundError,
    ToolProviderError,
)

__all__ = [
    "CACHE_DIR_ENV",
    "DirectoryError",
    "directory_size",
    "get_global_cache_dir",
    "get_home_dir",
    "LockManager",
    "LockTimeout",
    "PlatformInfo",
    "SUPPORTED_PLATFORM_IDENTIFIERS",
    "clear_platform_cache",
    "detect_platform",
    "exe_suffix",
    "platform_identifier",
    "BuKitError",
    "ConfigError",
    "NetworkError",
    "ResolutionError",
    "StrategyFailure",
    "ToolIOError",
    "ToolNotFoundError",
    "ToolProviderError",
]
