"""Build orchestration.

Drives one cross compilation through a fixed sequence of stages:

    validate -> resolve-image -> ensure-image -> populate-cache
             -> compose -> execute

The first error ends the run. It is tagged with the stage it escaped from
and re-raised unchanged. Nothing is rolled back: cached dependencies and
pulled images stay in place for the next run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from xgo_runner.builds.compose import compose_invocation
from xgo_runner.deps.cache import DependencyCache
from xgo_runner.docker.image import ensure_image, resolve_image
from xgo_runner.docker.runtime import DockerRuntime
from xgo_runner.errors import PreconditionError, XgoError
from xgo_runner.executor import CommandExecutor, SubprocessExecutor
from xgo_runner.types import (
    BuildConfig,
    BuildOptions,
    BuildOutcome,
    BuildStage,
    ImageRequest,
)

if TYPE_CHECKING:
    import httpx

    from xgo_runner.config import Settings

logger = logging.getLogger(__name__)


@contextmanager
def build_stage(stage: BuildStage) -> Iterator[None]:
    """Attribute any build error raised inside the block to a stage."""
    logger.debug("Entering stage %s", stage.value)
    try:
        yield
    except XgoError as e:
        if e.stage is None:
            e.stage = stage
        raise


def _require_dir(path: Path, what: str) -> None:
    try:
        exists = path.exists()
        is_dir = exists and path.is_dir()
    except OSError as e:
        raise PreconditionError(
            f"{what} cannot be accessed: {path}: {e}", code="inaccessible_path"
        ) from e
    if not exists:
        raise PreconditionError(f"{what} does not exist: {path}", code="missing_path")
    if not is_dir:
        raise PreconditionError(f"{what} is not a directory: {path}", code="not_a_dir")


def validate_config(config: BuildConfig) -> None:
    """Check the inputs a build cannot start without.

    Raises:
        PreconditionError: If the repository, build directory or module
            cache path is missing or not a directory.
    """
    if not config.repository:
        raise PreconditionError("Missing repository to build", code="missing_repository")
    _require_dir(Path(config.repository), "Repository")
    _require_dir(config.build_dir, "Build dir")
    if config.module_path is not None:
        _require_dir(config.module_path, "Module cache path")


class BuildOrchestrator:
    """Runs a single cross compilation."""

    def __init__(self, runtime: DockerRuntime, cache: DependencyCache) -> None:
        self.runtime = runtime
        self.cache = cache

    def run(
        self,
        config: BuildConfig,
        options: BuildOptions,
        request: ImageRequest,
    ) -> BuildOutcome:
        """Run the build pipeline.

        Args:
            config: What to build.
            options: Flags passed through to `go build`.
            request: Requested toolchain image.

        Returns:
            BuildOutcome describing the executed invocation.

        Raises:
            XgoError: The first failure, with its stage set.
        """
        started_at = datetime.now(timezone.utc)

        with build_stage(BuildStage.VALIDATE):
            validate_config(config)

        with build_stage(BuildStage.RESOLVE_IMAGE):
            image = resolve_image(request)
            logger.info("Using toolchain image %s", image)

        with build_stage(BuildStage.ENSURE_IMAGE):
            self.runtime.check_installation()
            resolved = ensure_image(self.runtime, image)

        with build_stage(BuildStage.POPULATE_CACHE):
            dependencies = self.cache.ensure_all(config.dependencies)

        with build_stage(BuildStage.COMPOSE):
            invocation = compose_invocation(
                resolved.image, config, options, self.cache.root
            )

        with build_stage(BuildStage.EXECUTE):
            logger.info("Cross compiling %s...", config.repository)
            self.runtime.run(invocation)

        finished_at = datetime.now(timezone.utc)
        duration = (finished_at - started_at).total_seconds()
        logger.info("Build finished in %.1fs", duration)

        return BuildOutcome(
            image=resolved,
            invocation=invocation,
            started_at=started_at,
            finished_at=finished_at,
            dependencies=dependencies,
        )


def build_orchestrator(
    settings: Settings,
    client: httpx.Client,
    executor: CommandExecutor | None = None,
) -> BuildOrchestrator:
    """Wire an orchestrator from settings.

    Args:
        settings: Effective settings.
        client: HTTPX client for dependency downloads.
        executor: Command executor (defaults to subprocess).

    Returns:
        BuildOrchestrator instance.
    """
    runtime = DockerRuntime(executor or SubprocessExecutor(), binary=settings.docker_binary)
    cache = DependencyCache(
        settings.cache_dir, client=client, timeout=settings.fetch_timeout
    )
    return BuildOrchestrator(runtime, cache)


__all__ = [
    "BuildOrchestrator",
    "build_orchestrator",
    "build_stage",
    "validate_config",
]
