"""
Centralized exception hierarchy for bu.

Provider failures are recoverable inside a provider chain; only exhaustion of
a whole chain reaches the caller, wrapped in a ResolutionError.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class BuKitError(Exception):
    """Base exception for all bu errors."""

    pass


# ============================================================================
# Provider Exceptions
# ============================================================================


class ToolProviderError(BuKitError):
    """Base exception for failures raised by a tool provider."""

    pass


class ToolNotFoundError(ToolProviderError):
    """Raised when no provider produced a usable path for a tool."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"Tool '{tool}' not found")


class ToolIOError(ToolProviderError):
    """Local filesystem failure while acquiring a tool."""

    def __init__(self, message: str):
        super().__init__(f"IO error: {message}")


class NetworkError(ToolProviderError):
    """Transport-level failure reaching a remote host."""

    def __init__(self, message: str):
        super().__init__(f"Network error: {message}")


class StrategyFailure(ToolProviderError):
    """A named strategy failed for a domain reason."""

    def __init__(self, strategy: str, message: str):
        self.strategy = strategy
        self.message = message
        super().__init__(f"Strategy '{strategy}' failed: {message}")


# ============================================================================
# Resolution Exceptions
# ============================================================================


class ResolutionError(BuKitError):
    """Raised when every provider for a tool failed."""

    def __init__(self, tool: str, version: str, cause: Exception):
        self.tool = tool
        self.version = version
        self.cause = cause
        super().__init__(
            f"Failed to provide tool '{tool}' version '{version}': {cause}"
        )


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(BuKitError):
    """Configuration parsing, validation or evaluation error."""

    pass
