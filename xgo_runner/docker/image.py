"""Toolchain image selection.

resolve_image() is pure string composition; ensure_image() talks to the
runtime to make the resolved image available locally.
"""

from __future__ import annotations

import logging

from xgo_runner.docker.runtime import DockerRuntime
from xgo_runner.types import ImageRequest, ResolvedImage

logger = logging.getLogger(__name__)


def resolve_image(request: ImageRequest) -> str:
    """Select the image identifier for a build.

    Precedence: custom image > custom repository tagged with the Go version >
    official distribution tagged with the Go version.

    Args:
        request: Requested Go version and overrides.

    Returns:
        Image identifier, e.g. 'crazymax/xgo:1.20'.
    """
    if request.custom_image:
        return request.custom_image
    if request.custom_repository:
        return f"{request.custom_repository}:{request.go_version}"
    return f"{request.distribution}:{request.go_version}"


def ensure_image(runtime: DockerRuntime, image: str) -> ResolvedImage:
    """Make sure an image is present in the local image store.

    Args:
        runtime: Docker runtime.
        image: Image identifier to look up.

    Returns:
        ResolvedImage marked available.

    Raises:
        ContainerEnvironmentError: If docker cannot be queried.
        RegistryError: If listing or pulling fails.
    """
    logger.info("Checking for required docker image %s...", image)
    if runtime.has_image(image):
        logger.info("Docker image %s found", image)
        return ResolvedImage(image=image, available=True)

    logger.info("Docker image %s not found locally", image)
    runtime.pull_image(image)
    return ResolvedImage(image=image, available=True)


__all__ = ["ensure_image", "resolve_image"]
