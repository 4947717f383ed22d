"""Docker toolchain image management.

This module handles:
- Resolving the toolchain image from the Go version and overrides
- Checking the local image store and pulling missing images
- Running the build container
"""

from xgo_runner.docker.image import ensure_image, resolve_image
from xgo_runner.docker.runtime import DockerRuntime

__all__ = ["DockerRuntime", "ensure_image", "resolve_image"]
