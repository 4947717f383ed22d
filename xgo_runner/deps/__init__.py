"""CGO dependency management.

This module handles:
- Downloading dependency archives over HTTP
- Keeping them in a shared on-disk cache across runs
"""

from xgo_runner.deps.cache import CacheEntry, DependencyCache
from xgo_runner.deps.fetch import download_file

__all__ = ["CacheEntry", "DependencyCache", "download_file"]
