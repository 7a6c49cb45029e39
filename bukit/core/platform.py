"""
Platform detection for bu.

Download URLs carry a ``{platform}`` placeholder that is replaced with a
target triple. Only four triples are published by upstream tools, so every
host maps onto one of them:

    macOS / arm64  -> aarch64-apple-darwin
    macOS / other  -> x86_64-apple-darwin
    Windows        -> x86_64-pc-windows-msvc
    anything else  -> x86_64-unknown-linux-musl

Usage:
    from bukit.core.platform import platform_identifier

    print(platform_identifier())            # current host
    print(platform_identifier("macos", "arm64"))
"""

import functools
import platform
from dataclasses import dataclass
from typing import Optional

MACOS_ARM64 = "aarch64-apple-darwin"
MACOS_X64 = "x86_64-apple-darwin"
WINDOWS_X64 = "x86_64-pc-windows-msvc"
LINUX_X64 = "x86_64-unknown-linux-musl"

SUPPORTED_PLATFORM_IDENTIFIERS = (MACOS_ARM64, MACOS_X64, WINDOWS_X64, LINUX_X64)


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos', or raw system name)
        arch: CPU architecture ('x64', 'arm64', 'x86', 'arm', or raw machine name)
    """

    os: str
    arch: str

    @property
    def exe_suffix(self) -> str:
        """Native executable suffix ('.exe' on Windows, '' elsewhere)."""
        return ".exe" if self.os == "windows" else ""


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def clear_platform_cache() -> None:
    """Clear the cached platform detection result (for tests)."""
    detect_platform.cache_clear()


def _detect_os() -> str:
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "darwin":
        return "macos"
    elif system == "linux":
        return "linux"
    return system


def _detect_architecture() -> str:
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    # Return original for unknown architectures
    return machine


def platform_identifier(os_name: Optional[str] = None, arch: Optional[str] = None) -> str:
    """
    Select the download target triple for a host.

    Args:
        os_name: Normalized OS name; detected when None
        arch: Normalized architecture; detected when None

    Returns:
        One of SUPPORTED_PLATFORM_IDENTIFIERS

    Example:
        >>> platform_identifier("macos", "arm64")
        'aarch64-apple-darwin'
        >>> platform_identifier("freebsd", "x64")
        'x86_64-unknown-linux-musl'
    """
    if os_name is None or arch is None:
        detected = detect_platform()
        os_name = os_name if os_name is not None else detected.os
        arch = arch if arch is not None else detected.arch

    if os_name == "macos":
        return MACOS_ARM64 if arch == "arm64" else MACOS_X64
    if os_name == "windows":
        return WINDOWS_X64
    return LINUX_X64


def exe_suffix() -> str:
    """Native executable suffix for the current host."""
    return detect_platform().exe_suffix
