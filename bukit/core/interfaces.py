"""
Core interfaces for bu.

The resolver depends only on ToolProvider; the concrete strategies (host
lookup, URL download, source build) and the fallback chain implement it.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bukit.toolchain.providers import ToolContext


class ToolProvider(ABC):
    """
    Abstract interface for components that can provide a tool binary.

    Implementations raise a ToolProviderError subclass on failure instead of
    returning a sentinel, so a chain can record why each attempt failed.
    """

    #: Strategy name used in tool definitions and error messages
    strategy: str = ""

    @abstractmethod
    def provide(self, tool: str, version: str, context: "ToolContext") -> Path:
        """
        Provide the requested tool.

        Args:
            tool: Tool name (e.g., "buck2")
            version: Requested version (e.g., "2024-01-01", "latest")
            context: Per-resolution state (offline flag, cache)

        Returns:
            Path to a runnable binary

        Raises:
            ToolProviderError: If this provider cannot supply the tool
        """
        pass


__all__ = ["ToolProvider"]
