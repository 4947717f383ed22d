"""Local cache of CGO dependency archives.

Archives are keyed by the final path segment of their URL. A file that
exists in the cache is trusted as-is: it is never re-fetched, re-validated
or deleted. The cache assumes a single writer and takes no locks.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import httpx

from xgo_runner.deps.fetch import download_file
from xgo_runner.errors import DependencyFetchError
from xgo_runner.types import CachedDependency

logger = logging.getLogger(__name__)

# Cache root permissions: owner rwx, group r-x, others --x
CACHE_DIR_MODE = 0o751

PARTIAL_SUFFIX = ".part"


@dataclass
class CacheEntry:
    """A cached archive as listed on disk."""

    name: str
    path: Path
    size_bytes: int


def _discard(partial: Path) -> None:
    try:
        partial.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Failed to remove partial download %s: %s", partial, e)


class DependencyCache:
    """Write-once-per-name store for downloaded dependency archives."""

    def __init__(
        self,
        root: Path,
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize DependencyCache.

        Args:
            root: Cache root directory, created on first download.
            client: HTTPX client used for downloads.
            timeout: Download timeout in seconds (None = no timeout).
        """
        self.root = root
        self.client = client
        self.timeout = timeout

    def path_for(self, url: str) -> Path:
        """Return the cache path for a dependency URL.

        Raises:
            DependencyFetchError: If no file name can be derived from the URL.
        """
        try:
            raw_path = httpx.URL(url).raw_path.decode("ascii")
        except httpx.InvalidURL as e:
            raise DependencyFetchError(
                f"Invalid dependency URL {url!r}: {e}", code="invalid_url"
            ) from e
        # Keyed on the encoded segment so escapes cannot introduce separators
        name = raw_path.split("?", 1)[0].rsplit("/", 1)[-1]
        if name in ("", ".", ".."):
            raise DependencyFetchError(
                f"Cannot derive a file name from dependency URL {url!r}",
                code="invalid_url",
            )
        return self.root / name

    def _ensure_root(self) -> None:
        try:
            self.root.mkdir(mode=CACHE_DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise DependencyFetchError(
                f"Failed to create dependency cache {self.root}: {e}",
                code="cache_dir_error",
            ) from e

    def ensure(self, url: str) -> CachedDependency:
        """Ensure a dependency archive is present in the cache.

        Downloads into a partial file that is renamed into place only once the
        body has been fully written.

        Args:
            url: Dependency archive URL.

        Returns:
            CachedDependency for the local file.

        Raises:
            DependencyFetchError: If the archive cannot be cached.
        """
        path = self.path_for(url)
        try:
            cached = path.exists()
        except OSError as e:
            raise DependencyFetchError(
                f"Failed to check dependency cache {path}: {e}", code="file_error"
            ) from e
        if cached:
            logger.info("Dependency already cached: %s", path)
            return CachedDependency(url=url, path=path, fetched=False)

        if self.client is None:
            raise DependencyFetchError(
                f"Dependency {url} is not cached and no HTTP client is configured",
                code="no_client",
            )

        self._ensure_root()
        logger.info("Downloading new dependency: %s...", url)

        partial = path.with_name(path.name + PARTIAL_SUFFIX)
        try:
            size = download_file(self.client, url, partial, timeout=self.timeout)
            partial.replace(path)
        except DependencyFetchError:
            _discard(partial)
            raise
        except OSError as e:
            _discard(partial)
            raise DependencyFetchError(
                f"Failed to store dependency {path}: {e}", code="file_error"
            ) from e

        logger.info("New dependency cached: %s (%d bytes)", path, size)
        return CachedDependency(url=url, path=path, fetched=True)

    def ensure_all(self, urls: Iterable[str]) -> list[CachedDependency]:
        """Ensure every dependency in order, stopping at the first failure.

        Blank entries are skipped.
        """
        cached: list[CachedDependency] = []
        for url in urls:
            url = url.strip()
            if url:
                cached.append(self.ensure(url))
        return cached

    def entries(self) -> list[CacheEntry]:
        """List complete archives in the cache, sorted by name."""
        if not self.root.is_dir():
            return []
        return [
            CacheEntry(name=p.name, path=p, size_bytes=p.stat().st_size)
            for p in sorted(self.root.iterdir())
            if p.is_file() and not p.name.endswith(PARTIAL_SUFFIX)
        ]


__all__ = ["CACHE_DIR_MODE", "CacheEntry", "DependencyCache"]
