"""Tests for docker/image.py module."""

import pytest

from xgo_runner.docker.image import ensure_image, resolve_image
from xgo_runner.docker.runtime import DockerRuntime
from xgo_runner.errors import RegistryError
from xgo_runner.executor import CommandResult
from xgo_runner.types import ImageRequest


class TestResolveImage:
    """Tests for resolve_image precedence."""

    def test_default_distribution(self):
        """Should tag the official distribution with the Go version."""
        assert resolve_image(ImageRequest(go_version="1.20")) == "crazymax/xgo:1.20"

    def test_custom_repository(self):
        """Should tag a custom repository with the Go version."""
        request = ImageRequest(go_version="1.20", custom_repository="myorg/xgo")
        assert resolve_image(request) == "myorg/xgo:1.20"

    def test_custom_image_wins(self):
        """Should use a custom image regardless of other settings."""
        request = ImageRequest(
            go_version="1.20",
            custom_repository="myorg/xgo",
            custom_image="pinned:abc",
        )
        assert resolve_image(request) == "pinned:abc"

    def test_custom_distribution(self):
        """Should honour a configured distribution."""
        request = ImageRequest(go_version="1.21", distribution="mirror/xgo")
        assert resolve_image(request) == "mirror/xgo:1.21"

    def test_latest_by_default(self):
        """Should default to the latest toolchain."""
        assert resolve_image(ImageRequest()) == "crazymax/xgo:latest"


class TestEnsureImage:
    """Tests for ensure_image."""

    def test_image_present(self, fake_executor):
        """Should not pull an image found locally."""
        fake_executor.results["images"] = CommandResult(
            0, "golang:1.20\ncrazymax/xgo:1.20\n"
        )
        resolved = ensure_image(DockerRuntime(fake_executor), "crazymax/xgo:1.20")

        assert resolved.image == "crazymax/xgo:1.20"
        assert resolved.available is True
        assert "pull" not in fake_executor.subcommands()

    def test_image_missing_pulls(self, fake_executor):
        """Should pull an image missing locally."""
        resolved = ensure_image(DockerRuntime(fake_executor), "crazymax/xgo:1.20")

        assert resolved.available is True
        assert fake_executor.calls[-1] == ["docker", "pull", "crazymax/xgo:1.20"]

    def test_prefix_match_is_not_a_hit(self, fake_executor):
        """Should require an exact identifier match."""
        fake_executor.results["images"] = CommandResult(0, "crazymax/xgo:1.20.4\n")
        ensure_image(DockerRuntime(fake_executor), "crazymax/xgo:1.20")

        assert "pull" in fake_executor.subcommands()

    def test_pull_failure(self, fake_executor):
        """Should raise RegistryError when the pull fails."""
        fake_executor.results["pull"] = CommandResult(1)

        with pytest.raises(RegistryError) as exc_info:
            ensure_image(DockerRuntime(fake_executor), "crazymax/xgo:1.20")

        assert exc_info.value.code == "pull_failed"
        assert fake_executor.subcommands().count("pull") == 1
