"""Composition of the build container invocation.

This module turns a BuildConfig and BuildOptions into the ordered mounts,
environment variables and arguments of one `docker run`. The names used
here are the contract with the build script inside the xgo image.

The order of entries is stable for identical inputs and filesystem state.
Only existence checks touch the filesystem.
"""

from __future__ import annotations

import logging
from pathlib import Path

from xgo_runner.errors import PreconditionError
from xgo_runner.types import (
    Argument,
    BuildConfig,
    BuildOptions,
    EnvVar,
    Invocation,
    InvocationEntry,
    Mount,
)

logger = logging.getLogger(__name__)

# In-container paths
BUILD_ROOT = "/build"
DEPS_CACHE_ROOT = "/deps-cache"
MODULE_CACHE_ROOT = "/cache"
MODULE_SOURCE_ROOT = "/source"

MODULE_DESCRIPTOR = "go.mod"
VENDOR_DIR = "vendor"

# Wildcard in target selectors and its regexp form used by the build script
TARGET_WILDCARD = "*"
TARGET_MATCH_ANY = "."


def format_bool(value: bool) -> str:
    """Format a boolean flag the way the build script parses it."""
    return "true" if value else "false"


def format_targets(targets: tuple[str, ...] | list[str]) -> str:
    """Compose the TARGETS value.

    Args:
        targets: os/arch selectors, e.g. ['linux/amd64', '*/386'].

    Returns:
        Space separated selectors with wildcards translated,
        e.g. 'linux/amd64 ./386'.
    """
    return " ".join(targets).replace(TARGET_WILDCARD, TARGET_MATCH_ANY)


def compose_invocation(
    image: str,
    config: BuildConfig,
    options: BuildOptions,
    cache_root: Path,
) -> Invocation:
    """Compose the build container invocation.

    Args:
        image: Resolved toolchain image identifier.
        config: What to build.
        options: Flags passed through to `go build`.
        cache_root: Host directory of the dependency cache.

    Returns:
        Invocation with entries in a fixed order.

    Raises:
        PreconditionError: If module mode is requested and the build
            directory has no go.mod.
    """
    build_dir = str(config.build_dir)

    entries: list[InvocationEntry] = [
        Mount(build_dir, BUILD_ROOT),
        Mount(str(cache_root), DEPS_CACHE_ROOT, read_only=True),
        EnvVar("REPO_REMOTE", config.remote),
        EnvVar("REPO_BRANCH", config.branch),
        EnvVar("PACK", config.sub_package),
        EnvVar("DEPS", " ".join(config.dependencies)),
        EnvVar("ARGS", config.dependency_args),
        EnvVar("OUT", config.output_prefix),
        EnvVar("FLAG_V", format_bool(options.verbose)),
        EnvVar("FLAG_X", format_bool(options.steps)),
        EnvVar("FLAG_RACE", format_bool(options.race)),
        EnvVar("FLAG_TAGS", options.tags),
        EnvVar("FLAG_LDFLAGS", options.ldflags),
        EnvVar("FLAG_BUILDMODE", options.buildmode),
        EnvVar("TARGETS", format_targets(config.targets)),
    ]

    if config.module_proxy:
        entries.append(EnvVar("GOPROXY", config.module_proxy))

    if config.module_path is not None:
        entries.append(Mount(str(config.module_path), MODULE_CACHE_ROOT))
        entries.append(EnvVar("GOPATH", MODULE_CACHE_ROOT))

    if config.use_modules:
        entries.extend(_module_entries(config))

    entries.append(Argument(image))
    entries.append(Argument(config.repository))

    return Invocation(entries=tuple(entries))


def _module_entries(config: BuildConfig) -> list[InvocationEntry]:
    mod_file = config.build_dir / MODULE_DESCRIPTOR
    if not mod_file.is_file():
        raise PreconditionError(
            f"Go module mode requested but {mod_file} does not exist",
            code="missing_go_mod",
        )

    entries: list[InvocationEntry] = [
        EnvVar("GO111MODULE", "on"),
        Mount(str(config.build_dir), MODULE_SOURCE_ROOT),
    ]
    logger.info("Enabled Go module support")

    if (Path(config.repository) / VENDOR_DIR).is_dir():
        entries.append(EnvVar("FLAG_MOD", "vendor"))
        logger.info("Using vendored Go module dependencies")

    return entries


__all__ = [
    "BUILD_ROOT",
    "DEPS_CACHE_ROOT",
    "MODULE_CACHE_ROOT",
    "MODULE_SOURCE_ROOT",
    "compose_invocation",
    "format_bool",
    "format_targets",
]
