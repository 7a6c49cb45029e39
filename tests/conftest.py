"""
Pytest configuration and shared fixtures for bu tests.
"""

import hashlib
from pathlib import Path

import pytest

from bukit.core.platform import clear_platform_cache, exe_suffix
from bukit.toolchain.cache import ToolCache
from bukit.toolchain.providers import ToolContext


@pytest.fixture(autouse=True)
def reset_platform_cache():
    """Forget platform detection results between tests."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture(autouse=True)
def isolated_cache_env(tmp_path: Path, monkeypatch) -> Path:
    """Point the default cache root into the test's temporary directory."""
    cache_root = tmp_path / "default-cache"
    monkeypatch.setenv("BU_CACHE_DIR", str(cache_root))
    return cache_root


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def cache(tmp_path: Path) -> ToolCache:
    """Tool cache rooted in a temporary directory."""
    return ToolCache(tmp_path / "cache")


@pytest.fixture
def online_context(cache: ToolCache) -> ToolContext:
    return ToolContext(offline=False, cache=cache)


@pytest.fixture
def offline_context(cache: ToolCache) -> ToolContext:
    return ToolContext(offline=True, cache=cache)


@pytest.fixture
def binary_payload() -> bytes:
    """Fake tool binary contents."""
    return b"#!/bin/sh\necho fake tool\n" * 64


@pytest.fixture
def binary_sha256(binary_payload: bytes) -> str:
    return hashlib.sha256(binary_payload).hexdigest()


@pytest.fixture
def exe():
    """Executable suffix of the host ('' or '.exe')."""
    return exe_suffix()


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home


@pytest.fixture
def no_network(monkeypatch):
    """Disable network access for tests."""
    import socket

    def guard(*args, **kwargs):
        raise RuntimeError("Network access not allowed in this test")

    monkeypatch.setattr(socket, "socket", guard)
