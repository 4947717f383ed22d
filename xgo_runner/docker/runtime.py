"""Docker runtime boundary.

This module handles:
- Checking that a functional Docker installation is reachable
- Looking up images in the local image store
- Pulling images from the registry
- Running the composed build invocation

Every call is synchronous and goes through an injectable CommandExecutor.
"""

from __future__ import annotations

import logging
import shlex

from xgo_runner.errors import ContainerEnvironmentError, ExecutionError, RegistryError
from xgo_runner.executor import CommandExecutor, CommandResult
from xgo_runner.types import Invocation

logger = logging.getLogger(__name__)

IMAGE_LIST_FORMAT = "{{.Repository}}:{{.Tag}}"
SERVER_VERSION_FORMAT = "{{.Server.Version}}"


def normalize_image(image: str) -> str:
    """Add the implicit ':latest' tag to an untagged image reference."""
    if "@" in image:
        return image
    name = image.rsplit("/", 1)[-1]
    if ":" in name:
        return image
    return f"{image}:latest"


class DockerRuntime:
    """Thin wrapper around the docker command line."""

    def __init__(self, executor: CommandExecutor, binary: str = "docker") -> None:
        self.executor = executor
        self.binary = binary

    def _run(self, args: list[str], capture: bool = False) -> CommandResult:
        try:
            return self.executor.run([self.binary, *args], capture=capture)
        except OSError as e:
            raise ContainerEnvironmentError(
                f"Failed to run {self.binary}: {e}",
                code="runtime_unavailable",
            ) from e

    def check_installation(self) -> str:
        """Check that docker is installed and its daemon answers.

        Returns:
            Docker server version string.

        Raises:
            ContainerEnvironmentError: If docker is missing or the server
                cannot be reached.
        """
        logger.info("Checking docker installation...")
        result = self._run(
            ["version", "--format", SERVER_VERSION_FORMAT], capture=True
        )
        version = result.stdout.strip()
        if not result.success or not version:
            raise ContainerEnvironmentError(
                f"Docker server is not reachable (exit code {result.returncode})",
                code="daemon_unreachable",
            )
        logger.debug("Docker server version %s", version)
        return version

    def list_images(self) -> list[str]:
        """List local images as repository:tag identifiers.

        Raises:
            ContainerEnvironmentError: If docker cannot be started.
            RegistryError: If listing the local images fails.
        """
        result = self._run(
            ["images", "--no-trunc", "--format", IMAGE_LIST_FORMAT], capture=True
        )
        if not result.success:
            raise RegistryError(
                f"Failed to list local images (exit code {result.returncode})",
                code="image_list_failed",
            )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def has_image(self, image: str) -> bool:
        """Check whether an image identifier exactly matches a local image.

        An identifier without a tag is compared as 'name:latest', the way
        docker resolves it. Local images are listed by tag only, so a digest
        reference ('name@sha256:...') never matches and is always pulled.
        """
        return normalize_image(image) in self.list_images()

    def pull_image(self, image: str) -> None:
        """Pull an image from the registry.

        Blocks until the pull completes. There is no retry.

        Raises:
            RegistryError: If the pull returns a non-zero status.
        """
        logger.info("Pulling %s from docker registry...", image)
        result = self._run(["pull", image])
        if not result.success:
            raise RegistryError(
                f"Failed to pull {image} (exit code {result.returncode})",
                code="pull_failed",
            )

    def run(self, invocation: Invocation) -> None:
        """Run a composed build invocation.

        Raises:
            ExecutionError: If the container exits with a non-zero status.
        """
        args = invocation.to_docker_args()
        logger.info("Docker %s", shlex.join(args))
        result = self._run(args)
        if not result.success:
            raise ExecutionError(
                f"Cross compilation failed with exit code {result.returncode}",
                exit_code=result.returncode,
            )


__all__ = ["DockerRuntime", "normalize_image"]
