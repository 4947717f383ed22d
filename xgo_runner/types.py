"""Shared type definitions for xgo_runner.

This module contains the immutable request types built once at the process
boundary, plus the values the pipeline stages hand to each other.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from xgo_runner.config import DEFAULT_DOCKER_DIST, DEFAULT_GO_VERSION

DEFAULT_TARGETS: tuple[str, ...] = ("*/*",)


class BuildStage(str, Enum):
    """Stage of the build pipeline, in execution order."""

    VALIDATE = "validate"
    RESOLVE_IMAGE = "resolve-image"
    ENSURE_IMAGE = "ensure-image"
    POPULATE_CACHE = "populate-cache"
    COMPOSE = "compose"
    EXECUTE = "execute"


@dataclass(frozen=True)
class BuildConfig:
    """What to build.

    Attributes:
        repository: Path to the source tree, passed to the container as-is.
        build_dir: Host directory mounted as the container build root.
        sub_package: Sub-package to build if not the root import.
        remote: Version control remote repository to build.
        branch: Version control branch to build.
        output_prefix: Prefix for output naming (empty = package name).
        dependencies: CGO dependency archive URLs, in order.
        dependency_args: Configure arguments for the CGO dependencies.
        module_path: Host directory mounted as the module cache.
        targets: os/arch selectors, '*' matches anything.
        use_modules: Build in Go module mode.
        module_proxy: GOPROXY value for module downloads.
    """

    repository: str
    build_dir: Path
    sub_package: str = ""
    remote: str = ""
    branch: str = ""
    output_prefix: str = ""
    dependencies: tuple[str, ...] = ()
    dependency_args: str = ""
    module_path: Path | None = None
    targets: tuple[str, ...] = DEFAULT_TARGETS
    use_modules: bool = False
    module_proxy: str = ""


@dataclass(frozen=True)
class BuildOptions:
    """How to build. Passed verbatim to `go build` inside the container."""

    verbose: bool = False
    steps: bool = False
    race: bool = False
    tags: str = ""
    ldflags: str = ""
    buildmode: str = "default"


@dataclass(frozen=True)
class ImageRequest:
    """Requested toolchain image and its overrides."""

    go_version: str = DEFAULT_GO_VERSION
    custom_image: str = ""
    custom_repository: str = ""
    distribution: str = DEFAULT_DOCKER_DIST


@dataclass(frozen=True)
class ResolvedImage:
    """Image identifier and whether it is present in the local image store."""

    image: str
    available: bool


@dataclass(frozen=True)
class CachedDependency:
    """A dependency archive and its location in the local cache.

    Attributes:
        url: Source URL of the archive.
        path: Local file path in the cache.
        fetched: True if this run downloaded the archive.
    """

    url: str
    path: Path
    fetched: bool = False


@dataclass(frozen=True)
class Mount:
    """Bind mount of a host path into the container."""

    host: str
    container: str
    read_only: bool = False

    def to_docker_args(self) -> list[str]:
        volume = f"{self.host}:{self.container}"
        if self.read_only:
            volume += ":ro"
        return ["-v", volume]


@dataclass(frozen=True)
class EnvVar:
    """Environment variable set inside the container."""

    name: str
    value: str

    def to_docker_args(self) -> list[str]:
        return ["-e", f"{self.name}={self.value}"]


@dataclass(frozen=True)
class Argument:
    """Positional argument following the mounts and environment."""

    value: str

    def to_docker_args(self) -> list[str]:
        return [self.value]


InvocationEntry = Mount | EnvVar | Argument


@dataclass(frozen=True)
class Invocation:
    """Ordered description of one `docker run` of the toolchain image."""

    entries: tuple[InvocationEntry, ...]

    @property
    def mounts(self) -> list[Mount]:
        return [e for e in self.entries if isinstance(e, Mount)]

    @property
    def environment(self) -> dict[str, str]:
        return {e.name: e.value for e in self.entries if isinstance(e, EnvVar)}

    @property
    def arguments(self) -> list[str]:
        return [e.value for e in self.entries if isinstance(e, Argument)]

    def to_docker_args(self) -> list[str]:
        """Render as arguments to the docker binary."""
        args = ["run", "--rm"]
        for entry in self.entries:
            args.extend(entry.to_docker_args())
        return args


@dataclass
class BuildOutcome:
    """Result of a completed build run."""

    image: ResolvedImage
    invocation: Invocation
    started_at: datetime
    finished_at: datetime
    dependencies: list[CachedDependency] = field(default_factory=list)


__all__ = [
    "DEFAULT_TARGETS",
    "Argument",
    "BuildConfig",
    "BuildOptions",
    "BuildOutcome",
    "BuildStage",
    "CachedDependency",
    "EnvVar",
    "ImageRequest",
    "Invocation",
    "InvocationEntry",
    "Mount",
    "ResolvedImage",
]
