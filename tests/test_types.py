"""Tests for shared types module."""

import dataclasses
from pathlib import Path

import pytest

from xgo_runner.types import (
    Argument,
    BuildConfig,
    BuildOptions,
    BuildStage,
    EnvVar,
    ImageRequest,
    Invocation,
    Mount,
)


class TestEnums:
    """Test enum definitions."""

    def test_build_stage_order(self) -> None:
        """BuildStage should list the pipeline stages in order."""
        assert [s.value for s in BuildStage] == [
            "validate",
            "resolve-image",
            "ensure-image",
            "populate-cache",
            "compose",
            "execute",
        ]


class TestDefaults:
    """Test request type defaults."""

    def test_build_config_defaults(self) -> None:
        """BuildConfig should build all targets without modules by default."""
        config = BuildConfig(repository="repo", build_dir=Path("/build"))
        assert config.targets == ("*/*",)
        assert config.dependencies == ()
        assert config.module_path is None
        assert config.use_modules is False
        assert config.module_proxy == ""

    def test_build_options_defaults(self) -> None:
        """BuildOptions should default to a plain build."""
        options = BuildOptions()
        assert options.verbose is False
        assert options.steps is False
        assert options.race is False
        assert options.buildmode == "default"

    def test_image_request_defaults(self) -> None:
        """ImageRequest should target the official distribution."""
        request = ImageRequest()
        assert request.go_version == "latest"
        assert request.distribution == "crazymax/xgo"

    def test_build_config_is_frozen(self) -> None:
        """BuildConfig should be immutable."""
        config = BuildConfig(repository="repo", build_dir=Path("/build"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.repository = "other"  # type: ignore[misc]


class TestInvocation:
    """Test Invocation rendering."""

    def test_entry_args(self) -> None:
        """Entries should render as docker flags."""
        assert Mount("/a", "/b").to_docker_args() == ["-v", "/a:/b"]
        assert Mount("/a", "/b", read_only=True).to_docker_args() == ["-v", "/a:/b:ro"]
        assert EnvVar("K", "").to_docker_args() == ["-e", "K="]
        assert Argument("img").to_docker_args() == ["img"]

    def test_to_docker_args(self) -> None:
        """Invocation should start with run --rm and keep entry order."""
        invocation = Invocation(
            entries=(
                Mount("/src", "/build"),
                EnvVar("FLAG_V", "true"),
                Argument("crazymax/xgo:1.20"),
                Argument("./repo"),
            )
        )
        assert invocation.to_docker_args() == [
            "run",
            "--rm",
            "-v",
            "/src:/build",
            "-e",
            "FLAG_V=true",
            "crazymax/xgo:1.20",
            "./repo",
        ]

    def test_views(self) -> None:
        """Invocation should expose mounts, environment and arguments."""
        invocation = Invocation(
            entries=(Mount("/src", "/build"), EnvVar("A", "1"), Argument("x"))
        )
        assert invocation.mounts == [Mount("/src", "/build")]
        assert invocation.environment == {"A": "1"}
        assert invocation.arguments == ["x"]
