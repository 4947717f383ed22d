"""Dependency archive download.

Streams a remote archive to a local file with httpx. No timeout is applied
unless the caller asks for one; wall-clock limits belong to the supervisor.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from xgo_runner.errors import DependencyFetchError

logger = logging.getLogger(__name__)

# Chunk size for downloads (bytes)
DOWNLOAD_CHUNK_SIZE = 64 * 1024  # 64 KB


def download_file(
    client: httpx.Client,
    url: str,
    dest_path: Path,
    timeout: float | None = None,
    chunk_size: int = DOWNLOAD_CHUNK_SIZE,
) -> int:
    """Download a file, streaming it fully into dest_path.

    Args:
        client: HTTPX client instance.
        url: URL to download from.
        dest_path: Destination path for the downloaded file.
        timeout: Download timeout in seconds (None = no timeout).
        chunk_size: Size of chunks to download.

    Returns:
        Number of bytes written.

    Raises:
        DependencyFetchError: If the destination cannot be written or the
            download fails.
    """
    logger.debug("Downloading %s to %s", url, dest_path)

    try:
        with client.stream(
            "GET", url, timeout=timeout, follow_redirects=True
        ) as response:
            response.raise_for_status()

            total_bytes = 0
            with dest_path.open("wb") as f:
                for chunk in response.iter_bytes(chunk_size):
                    f.write(chunk)
                    total_bytes += len(chunk)

            return total_bytes

    except httpx.HTTPStatusError as e:
        raise DependencyFetchError(
            f"HTTP error downloading {url}: {e.response.status_code} {e.response.reason_phrase}",
            code="http_error",
        ) from e
    except httpx.TimeoutException as e:
        raise DependencyFetchError(
            f"Timeout downloading {url}",
            code="timeout",
        ) from e
    except httpx.RequestError as e:
        raise DependencyFetchError(
            f"Network error downloading {url}: {e}",
            code="network_error",
        ) from e
    except OSError as e:
        raise DependencyFetchError(
            f"Failed to write dependency file {dest_path}: {e}",
            code="file_error",
        ) from e


__all__ = ["DOWNLOAD_CHUNK_SIZE", "download_file"]
