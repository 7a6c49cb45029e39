"""
Tool acquisition for bu.

This module provides:
- The content-keyed local tool cache
- Host, URL and source providers and the fallback chain

Resolution (config lookup + chain execution) lives in
``bukit.toolchain.resolver``.
"""

from bukit.toolchain.cache import (
    CacheEntry,
    ToolCache,
)
from bukit.toolchain.providers import (
    ChainProvider,
    HostProvider,
    SourceProvider,
    ToolContext,
    UrlProvider,
)

__all__ = [
    # Cache
    "CacheEntry",
    "ToolCache",
    # Providers
    "ChainProvider",
    "HostProvider",
    "SourceProvider",
    "ToolContext",
    "UrlProvider",
]
