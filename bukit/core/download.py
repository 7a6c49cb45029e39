"""
Fetching of tool binaries with decompression and checksum verification.

This module provides:
- Local copies for ``file://`` URLs
- Blocking streaming HTTP/HTTPS downloads with retry on transport errors
- On-the-fly decompression of ``.zst``, ``.gz``, ``.xz`` and ``.bz2`` streams
- SHA256 verification of the written file
"""

import bz2
import hashlib
import logging
import lzma
import shutil
import time
import zlib
from pathlib import Path
from typing import Callable, Dict, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests
import zstandard
from requests.exceptions import RequestException

from bukit.core.exceptions import BuKitError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class DownloadError(BuKitError):
    """Exception raised when a transfer fails."""

    pass


class HTTPStatusError(DownloadError):
    """Exception raised when the server answers with a non-success status."""

    def __init__(self, url: str, status_code: int, reason: str = ""):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        status = f"{status_code} {reason}".strip()
        super().__init__(f"Download failed: {status}")


class ChecksumError(DownloadError):
    """Exception raised when checksum verification fails."""

    pass


class DecompressionError(DownloadError):
    """Exception raised when a compressed stream is corrupt or truncated."""

    pass


class StreamingHasher:
    """Compute a SHA256 hash incrementally for streaming data."""

    def __init__(self, algorithm: str = "sha256"):
        """
        Initialize streaming hasher.

        Args:
            algorithm: Hash algorithm (only 'sha256' is published for tools)

        Raises:
            ValueError: If algorithm is not supported
        """
        self.algorithm = algorithm.lower()
        if self.algorithm != "sha256":
            raise ValueError(f"Unsupported hash algorithm: {algorithm}")
        self.hasher = hashlib.sha256()

    def update(self, data: bytes):
        """Add data to hash computation."""
        self.hasher.update(data)

    def finalize(self) -> str:
        """Get final hash value as hex string."""
        return self.hasher.hexdigest()

    def verify(self, expected_hash: str) -> bool:
        """Check if computed hash matches expected value (case-insensitive)."""
        return self.finalize().lower() == expected_hash.strip().lower()


# ============================================================================
# Decompression
# ============================================================================


CODEC_ERRORS = (zlib.error, lzma.LZMAError, zstandard.ZstdError, EOFError, OSError)


class _StreamDecompressor:
    """
    Uniform wrapper over the codec objects.

    Codec failures surface as DecompressionError, and finish() refuses a
    stream that ended before the end-of-stream marker.
    """

    def __init__(self, suffix: str, decompressor):
        self.suffix = suffix
        self._decompressor = decompressor

    def decompress(self, data: bytes) -> bytes:
        try:
            return self._decompressor.decompress(data)
        except CODEC_ERRORS as e:
            raise DecompressionError(f"Corrupt {self.suffix} stream: {e}") from e

    def finish(self) -> bytes:
        """Flush buffered output and check the stream was complete."""
        flush = getattr(self._decompressor, "flush", None)
        try:
            tail = flush() if flush is not None else b""
        except CODEC_ERRORS as e:
            raise DecompressionError(f"Corrupt {self.suffix} stream: {e}") from e

        if not self._decompressor.eof:
            raise DecompressionError(f"Truncated compressed stream ({self.suffix})")
        return tail


DECOMPRESSORS: Dict[str, Callable[[], object]] = {
    ".zst": lambda: zstandard.ZstdDecompressor().decompressobj(),
    ".gz": lambda: zlib.decompressobj(16 + zlib.MAX_WBITS),
    ".xz": lzma.LZMADecompressor,
    ".bz2": bz2.BZ2Decompressor,
}


def compression_suffix(url: str) -> Optional[str]:
    """
    Get the compressed-stream suffix of a URL path, if recognized.

    Example:
        >>> compression_suffix("https://example.com/buck2-x86_64.zst")
        '.zst'
        >>> compression_suffix("https://example.com/buck2?x=.zst") is None
        True
    """
    path = urlparse(url).path.lower()
    for suffix in DECOMPRESSORS:
        if path.endswith(suffix):
            return suffix
    return None


def _make_decompressor(url: str) -> Optional[_StreamDecompressor]:
    suffix = compression_suffix(url)
    if suffix is None:
        return None
    return _StreamDecompressor(suffix, DECOMPRESSORS[suffix]())


# ============================================================================
# URL helpers
# ============================================================================


def is_file_url(url: str) -> bool:
    """Check whether a URL uses the local ``file://`` scheme."""
    return urlparse(url).scheme.lower() == "file"


def file_url_to_path(url: str) -> Path:
    """
    Convert a ``file://`` URL to a local path.

    Example:
        >>> file_url_to_path("file:///opt/tools/buck2")
        PosixPath('/opt/tools/buck2')
    """
    parsed = urlparse(url)
    if parsed.netloc and parsed.netloc != "localhost":
        return Path(url2pathname(parsed.netloc + parsed.path))
    return Path(url2pathname(parsed.path))


# ============================================================================
# Fetching
# ============================================================================


def fetch_file(
    url: str,
    destination: Path,
    timeout: Optional[float] = None,
    max_retries: int = 3,
) -> Path:
    """
    Fetch ``url`` into ``destination``.

    ``file://`` URLs are copied verbatim. Network URLs are streamed with a
    blocking GET; recognized compressed streams are decompressed while being
    written. Transport errors are retried with exponential backoff, HTTP
    status errors are not.

    Args:
        url: URL to fetch
        destination: Local file to write (overwritten)
        timeout: Request timeout in seconds (None waits indefinitely)
        max_retries: Maximum number of attempts for transport errors

    Returns:
        Path to the written file

    Raises:
        HTTPStatusError: If the server answers with a non-success status
        DecompressionError: If a compressed stream is corrupt or truncated
        DownloadError: If the transfer fails after retries
        OSError: If the local copy or write fails
        ValueError: If URL or destination is empty
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)

    if is_file_url(url):
        source = file_url_to_path(url)
        logger.info(f"Copying local file {source}")
        shutil.copyfile(source, destination)
        return destination

    for attempt in range(max_retries):
        try:
            return _download_stream(url, destination, timeout)
        except RequestException as e:
            if attempt == max_retries - 1:
                raise DownloadError(
                    f"Download failed after {max_retries} attempts: {e}"
                ) from e

            backoff_seconds = 2**attempt
            logger.warning(
                f"Download attempt {attempt + 1} failed: {e}. "
                f"Retrying in {backoff_seconds}s..."
            )
            time.sleep(backoff_seconds)

    # Only reachable with max_retries < 1
    raise DownloadError("Download failed: no attempts were made")


def _download_stream(url: str, destination: Path, timeout: Optional[float]) -> Path:
    logger.info(f"Downloading from {url}")

    response = requests.get(url, stream=True, timeout=timeout, allow_redirects=True)
    with response:
        if not response.ok:
            raise HTTPStatusError(url, response.status_code, response.reason or "")

        decompressor = _make_decompressor(url)
        if decompressor is not None:
            logger.debug(f"Decompressing {compression_suffix(url)} stream")

        written = 0
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                if decompressor is not None:
                    chunk = decompressor.decompress(chunk)
                f.write(chunk)
                written += len(chunk)
            if decompressor is not None:
                tail = decompressor.finish()
                f.write(tail)
                written += len(tail)

    logger.debug(f"Wrote {written} bytes to {destination}")
    return destination


# ============================================================================
# Checksums
# ============================================================================


def _hash_file(file_path: Path) -> StreamingHasher:
    hasher = StreamingHasher("sha256")
    with open(file_path, "rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            hasher.update(chunk)
    return hasher


def ensure_checksum(file_path: Path, expected_sha256: str) -> None:
    """
    Raise ChecksumError unless ``file_path`` hashes to ``expected_sha256``.

    Raises:
        ChecksumError: On mismatch
    """
    hasher = _hash_file(file_path)
    if not hasher.verify(expected_sha256):
        raise ChecksumError(
            f"Checksum mismatch: expected {expected_sha256}, got {hasher.finalize()}"
        )
    logger.debug("Checksum verified successfully")
