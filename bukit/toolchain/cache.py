"""
Local cache of acquired tool binaries.

Every cached binary lives at a deterministic location:

    <cache-root>/<tool>/<version>/<tool>[.exe]

Entries are written through ToolCache.install(), which hands a temporary file
to a caller-supplied writer and renames it into place only after the writer
returns, so a partially written binary is never reported as installed.
"""

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional
from urllib.parse import unquote

from bukit.core.directory import get_global_cache_dir
from bukit.core.locking import LockManager
from bukit.core.platform import exe_suffix

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755


@dataclass
class CacheEntry:
    """One installed tool/version."""

    tool: str
    version: str
    path: Path
    size_bytes: int


ENCODED_CHARS = {"%": "%25", "/": "%2F", "\\": "%5C", ":": "%3A"}


def _encode_component(kind: str, value: str) -> str:
    """
    Map a tool name or version onto a single path component.

    Separators are percent-encoded so revisions like ``release/1.0`` get
    their own directory; values that cannot name a directory at all raise.
    """
    if not value or value in (".", "..") or "\0" in value:
        raise ValueError(f"Invalid {kind} for cache path: {value!r}")
    return "".join(ENCODED_CHARS.get(char, char) for char in value)


class ToolCache:
    """
    Filesystem store of tool binaries keyed by (tool, version).

    Example:
        >>> cache = ToolCache(Path("/tmp/bu-cache"))
        >>> cache.tool_path("buck2", "2024-01-01")
        PosixPath('/tmp/bu-cache/buck2/2024-01-01/buck2')
    """

    def __init__(self, cache_dir: Optional[Path] = None, lock_timeout: float = -1):
        """
        Initialize the cache.

        Args:
            cache_dir: Cache root. Defaults to BU_CACHE_DIR or ~/.bu/cache.
            lock_timeout: Seconds to wait for an install lock (negative waits forever)
        """
        self.cache_dir = get_global_cache_dir(cache_dir)
        self.lock_manager = LockManager(self.cache_dir)
        self.lock_timeout = lock_timeout

    def tool_path(self, tool: str, version: str) -> Path:
        """Get the cache location of a tool binary. Performs no I/O."""
        tool_dir = _encode_component("tool name", tool)
        version_dir = _encode_component("version", version)
        return self.cache_dir / tool_dir / version_dir / f"{tool_dir}{exe_suffix()}"

    def is_installed(self, tool: str, version: str) -> bool:
        """Check whether the binary for tool/version exists in the cache."""
        path = self.tool_path(tool, version)
        installed = path.exists()
        logger.debug(f"Checking if {tool}@{version} is at {path}: {installed}")
        return installed

    def install(self, tool: str, version: str, writer: Callable[[Path], None]) -> Path:
        """
        Install a binary into the cache.

        ``writer`` receives a temporary path inside the target directory and
        must write the complete binary there. On success the file is made
        executable and atomically renamed onto ``tool_path(tool, version)``.
        If ``writer`` raises, the temporary file is removed and the exception
        propagates unchanged.

        Returns:
            The final cache path of the binary
        """
        tool_path = self.tool_path(tool, version)
        tool_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Installing {tool}@{version} to {tool_path}")

        with self.lock_manager.tool_lock(
            tool_path.parent.parent.name,
            tool_path.parent.name,
            timeout=self.lock_timeout,
        ):
            fd, temp_name = tempfile.mkstemp(
                dir=tool_path.parent, prefix=f".{tool_path.name}.", suffix=".tmp"
            )
            os.close(fd)
            temp_path = Path(temp_name)

            try:
                writer(temp_path)
                if os.name != "nt":
                    temp_path.chmod(EXECUTABLE_MODE)
                temp_path.replace(tool_path)
            except Exception:
                temp_path.unlink(missing_ok=True)
                raise

        return tool_path

    def list_installed(self) -> List[CacheEntry]:
        """Enumerate installed tool/version pairs, sorted by tool then version."""
        entries: List[CacheEntry] = []
        if not self.cache_dir.is_dir():
            return entries

        for tool_dir in sorted(self.cache_dir.iterdir()):
            if not tool_dir.is_dir() or tool_dir.name.startswith("."):
                continue
            for version_dir in sorted(tool_dir.iterdir()):
                if not version_dir.is_dir():
                    continue
                tool = unquote(tool_dir.name)
                version = unquote(version_dir.name)
                binary = self.tool_path(tool, version)
                if binary.is_file():
                    entries.append(
                        CacheEntry(
                            tool=tool,
                            version=version,
                            path=binary,
                            size_bytes=binary.stat().st_size,
                        )
                    )

        return entries

    def remove(self, tool: str, version: str) -> bool:
        """
        Remove one cached tool/version.

        Returns:
            True if something was removed
        """
        version_dir = self.tool_path(tool, version).parent
        if not version_dir.exists():
            return False

        shutil.rmtree(version_dir)
        logger.info(f"Removed {tool}@{version} from cache")
        return True

    def clean(self) -> None:
        """Delete every cache entry and recreate an empty cache root."""
        if self.cache_dir.exists():
            shutil.rmtree(self.cache_dir)
            logger.info(f"Removed cache directory {self.cache_dir}")
        self.cache_dir.mkdir(parents=True, exist_ok=True)
