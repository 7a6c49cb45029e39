"""
Tool provider implementations.

Each provider implements one acquisition strategy:

- HostProvider: look the tool up on the system PATH
- UrlProvider: download the binary from a templated URL into the cache
- SourceProvider: build the binary with ``cargo install`` into the cache
- ChainProvider: try a sequence of providers in order
"""

import logging
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from bukit.core.download import (
    ChecksumError,
    DecompressionError,
    DownloadError,
    HTTPStatusError,
    ensure_checksum,
    fetch_file,
    is_file_url,
)
from bukit.core.exceptions import (
    NetworkError,
    StrategyFailure,
    ToolIOError,
    ToolNotFoundError,
    ToolProviderError,
)
from bukit.core.interfaces import ToolProvider
from bukit.core.platform import exe_suffix, platform_identifier
from bukit.toolchain.cache import ToolCache

logger = logging.getLogger(__name__)


def _cached_path(
    strategy: str, tool: str, version: str, context: "ToolContext"
) -> Optional[Path]:
    """Get the cached binary for tool/version, if installed."""
    try:
        if context.cache.is_installed(tool, version):
            return context.cache.tool_path(tool, version)
    except ValueError as e:
        raise StrategyFailure(strategy, str(e)) from e
    return None


@dataclass(frozen=True)
class ToolContext:
    """Shared state for one resolution call."""

    offline: bool
    cache: ToolCache


class HostProvider(ToolProvider):
    """
    Provides a tool already installed on the host.

    The requested version is ignored; whatever is first on PATH wins.
    """

    strategy = "host"

    def provide(self, tool: str, version: str, context: ToolContext) -> Path:
        logger.debug(f"Looking for tool '{tool}' on host system...")
        found = shutil.which(tool)
        if found is None:
            raise ToolNotFoundError(tool)

        logger.info(f"Found host tool at: {found}")
        return Path(found)

    def __repr__(self) -> str:
        return "HostProvider()"


class UrlProvider(ToolProvider):
    """
    Downloads a tool binary from a templated URL into the cache.

    The template may contain ``{version}`` and ``{platform}`` placeholders.
    In offline mode only ``file://`` URLs are accepted.
    """

    strategy = "url"

    def __init__(
        self, url_template: str, sha256: Optional[str] = None, max_retries: int = 3
    ):
        """
        Initialize URL provider.

        Args:
            url_template: URL with optional {version}/{platform} placeholders
            sha256: Expected SHA256 of the written binary
            max_retries: Attempts for transient transport errors
        """
        self.url_template = url_template
        self.sha256 = sha256
        self.max_retries = max_retries

    def resolve_url(self, version: str, platform: Optional[str] = None) -> str:
        """Substitute the version and the host's target triple into the template."""
        if platform is None:
            platform = platform_identifier()
        return self.url_template.replace("{version}", version).replace(
            "{platform}", platform
        )

    def provide(self, tool: str, version: str, context: ToolContext) -> Path:
        cached = _cached_path(self.strategy, tool, version, context)
        if cached is not None:
            return cached

        url = self.resolve_url(version)

        if context.offline and not is_file_url(url):
            raise StrategyFailure(
                self.strategy, "Offline mode: cannot download from network"
            )

        logger.info(f"Downloading {tool}@{version} from {url}")

        def write(destination: Path) -> None:
            fetch_file(url, destination, max_retries=self.max_retries)
            if self.sha256:
                ensure_checksum(destination, self.sha256)

        try:
            return context.cache.install(tool, version, write)
        except (HTTPStatusError, ChecksumError, DecompressionError) as e:
            raise StrategyFailure(self.strategy, str(e)) from e
        except DownloadError as e:
            raise NetworkError(str(e)) from e
        except OSError as e:
            raise ToolIOError(str(e)) from e

    def __repr__(self) -> str:
        return f"UrlProvider(url_template={self.url_template!r}, sha256={self.sha256!r})"


class SourceProvider(ToolProvider):
    """
    Builds a tool from a git revision with ``cargo install``.

    The requested version is used as the git revision. The build installs
    into a temporary root; the produced binary is then copied into the cache.
    """

    strategy = "source"

    def __init__(self, git_url: str, bin_name: str, build_tool: str = "cargo"):
        """
        Initialize source provider.

        Args:
            git_url: Repository to build from
            bin_name: Name of the binary the build produces (e.g., "buck2")
            build_tool: Build toolchain command that must exist on PATH
        """
        self.git_url = git_url
        self.bin_name = bin_name
        self.build_tool = build_tool

    def build_command(
        self, build_tool_path: str, version: str, root: Path, offline: bool
    ) -> List[str]:
        """Assemble the build invocation."""
        cmd = [
            build_tool_path,
            "install",
            "--git",
            self.git_url,
            "--rev",
            version,
            "--root",
            str(root),
        ]
        if offline:
            cmd.append("--offline")
        if not logger.isEnabledFor(logging.DEBUG):
            cmd.append("--quiet")
        return cmd

    def provide(self, tool: str, version: str, context: ToolContext) -> Path:
        cached = _cached_path(self.strategy, tool, version, context)
        if cached is not None:
            return cached

        build_tool_path = shutil.which(self.build_tool)
        if build_tool_path is None:
            raise StrategyFailure(
                self.strategy,
                f"{self.build_tool} not found on PATH; cannot build {tool} from source",
            )

        logger.info(f"Building {tool}@{version} from source via {self.build_tool}...")

        try:
            with tempfile.TemporaryDirectory(prefix="bu-build-") as temp_root:
                root = Path(temp_root)
                cmd = self.build_command(build_tool_path, version, root, context.offline)
                logger.debug(f"Running: {' '.join(cmd)}")

                result = subprocess.run(cmd, check=False)
                if result.returncode != 0:
                    raise StrategyFailure(
                        self.strategy,
                        f"{self.build_tool} install failed with exit code {result.returncode}",
                    )

                built_bin = root / "bin" / f"{self.bin_name}{exe_suffix()}"
                if not built_bin.is_file():
                    raise StrategyFailure(
                        self.strategy, f"Binary {built_bin} not found after build"
                    )

                return context.cache.install(
                    tool, version, lambda dest: shutil.copyfile(built_bin, dest)
                )
        except OSError as e:
            raise ToolIOError(str(e)) from e

    def __repr__(self) -> str:
        return f"SourceProvider(git_url={self.git_url!r}, bin_name={self.bin_name!r})"


class ChainProvider(ToolProvider):
    """
    Chains multiple tool providers together.

    Providers are tried strictly in order; the first success wins and later
    providers are not invoked. When every provider fails, the most recent
    failure is raised. An empty chain raises ToolNotFoundError.
    """

    strategy = "chain"

    def __init__(self, providers: Sequence[ToolProvider]):
        self._providers = list(providers)

    @property
    def providers(self) -> List[ToolProvider]:
        return list(self._providers)

    @property
    def strategies(self) -> List[str]:
        """Strategy names in precedence order."""
        return [provider.strategy for provider in self._providers]

    def provide(self, tool: str, version: str, context: ToolContext) -> Path:
        last_error: ToolProviderError = ToolNotFoundError(tool)

        for provider in self._providers:
            try:
                return provider.provide(tool, version, context)
            except ToolProviderError as e:
                logger.debug(f"Provider {provider!r} failed: {e}")
                last_error = e

        raise last_error

    def __repr__(self) -> str:
        return f"ChainProvider({self._providers!r})"


__all__ = [
    "ToolContext",
    "HostProvider",
    "UrlProvider",
    "SourceProvider",
    "ChainProvider",
]
