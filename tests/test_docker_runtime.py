"""Tests for docker/runtime.py module.

Uses a recording executor instead of a real docker installation.
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from xgo_runner.docker.runtime import DockerRuntime
from xgo_runner.errors import ContainerEnvironmentError, ExecutionError, RegistryError
from xgo_runner.executor import CommandResult, SubprocessExecutor
from xgo_runner.types import Argument, EnvVar, Invocation, Mount


class TestCheckInstallation:
    """Tests for check_installation."""

    def test_returns_server_version(self, fake_executor):
        """Should return the docker server version."""
        runtime = DockerRuntime(fake_executor)
        assert runtime.check_installation() == "24.0.7"
        assert fake_executor.calls[0] == [
            "docker",
            "version",
            "--format",
            "{{.Server.Version}}",
        ]

    def test_missing_binary(self, fake_executor):
        """Should raise ContainerEnvironmentError if docker is not installed."""
        fake_executor.results["version"] = FileNotFoundError("docker")

        with pytest.raises(ContainerEnvironmentError) as exc_info:
            DockerRuntime(fake_executor).check_installation()

        assert exc_info.value.code == "runtime_unavailable"

    def test_daemon_unreachable(self, fake_executor):
        """Should raise ContainerEnvironmentError if the server does not answer."""
        fake_executor.results["version"] = CommandResult(1, "")

        with pytest.raises(ContainerEnvironmentError) as exc_info:
            DockerRuntime(fake_executor).check_installation()

        assert exc_info.value.code == "daemon_unreachable"

    def test_custom_binary(self, fake_executor):
        """Should invoke the configured binary."""
        DockerRuntime(fake_executor, binary="podman").check_installation()
        assert fake_executor.calls[0][0] == "podman"


class TestImages:
    """Tests for image listing."""

    def test_list_images(self, fake_executor):
        """Should parse one identifier per line."""
        fake_executor.results["images"] = CommandResult(
            0, "crazymax/xgo:1.20\n\n  golang:latest  \n"
        )
        images = DockerRuntime(fake_executor).list_images()
        assert images == ["crazymax/xgo:1.20", "golang:latest"]

    def test_has_image_exact_match(self, fake_executor):
        """Should only report exact matches."""
        fake_executor.results["images"] = CommandResult(0, "crazymax/xgo:1.20\n")
        runtime = DockerRuntime(fake_executor)
        assert runtime.has_image("crazymax/xgo:1.20") is True
        assert runtime.has_image("crazymax/xgo:1.2") is False

    def test_has_image_untagged_means_latest(self, fake_executor):
        """Should compare an untagged identifier as name:latest."""
        fake_executor.results["images"] = CommandResult(
            0, "pinned:latest\nlocalhost:5000/team/xgo:latest\n"
        )
        runtime = DockerRuntime(fake_executor)
        assert runtime.has_image("pinned") is True
        assert runtime.has_image("localhost:5000/team/xgo") is True
        assert runtime.has_image("other") is False

    def test_has_image_digest_never_matches(self, fake_executor):
        """Should not match digest references against tag listings."""
        fake_executor.results["images"] = CommandResult(0, "pinned:latest\n")
        assert DockerRuntime(fake_executor).has_image("pinned@sha256:abc") is False

    def test_listing_failure(self, fake_executor):
        """Should raise RegistryError when listing fails."""
        fake_executor.results["images"] = CommandResult(1)

        with pytest.raises(RegistryError):
            DockerRuntime(fake_executor).has_image("crazymax/xgo:1.20")

    def test_listing_without_docker(self, fake_executor):
        """Should raise ContainerEnvironmentError when docker cannot start."""
        fake_executor.results["images"] = PermissionError("denied")

        with pytest.raises(ContainerEnvironmentError):
            DockerRuntime(fake_executor).has_image("crazymax/xgo:1.20")


class TestRun:
    """Tests for running an invocation."""

    @pytest.fixture
    def invocation(self) -> Invocation:
        return Invocation(
            entries=(
                Mount("/src", "/build"),
                EnvVar("FLAG_V", "false"),
                Argument("crazymax/xgo:1.20"),
                Argument("./repo"),
            )
        )

    def test_run_success(self, fake_executor, invocation):
        """Should run docker with the rendered invocation."""
        DockerRuntime(fake_executor).run(invocation)
        assert fake_executor.calls == [["docker", *invocation.to_docker_args()]]

    def test_run_failure(self, fake_executor, invocation):
        """Should raise ExecutionError carrying the exit code."""
        fake_executor.results["run"] = CommandResult(2)

        with pytest.raises(ExecutionError) as exc_info:
            DockerRuntime(fake_executor).run(invocation)

        assert exc_info.value.exit_code == 2


class TestSubprocessExecutor:
    """Tests for the subprocess-backed executor."""

    @patch("xgo_runner.executor.subprocess.run")
    def test_capture(self, mock_run):
        """Should capture text output when requested."""
        mock_run.return_value = MagicMock(returncode=0, stdout="out\n", stderr="")

        result = SubprocessExecutor().run(["docker", "images"], capture=True)

        assert result.success
        assert result.stdout == "out\n"
        assert mock_run.call_args.kwargs["capture_output"] is True
        assert mock_run.call_args.kwargs["text"] is True

    @patch("xgo_runner.executor.subprocess.run")
    def test_stream(self, mock_run):
        """Should let output through when not capturing."""
        mock_run.return_value = subprocess.CompletedProcess(["docker"], 3)

        result = SubprocessExecutor().run(["docker", "pull", "x"])

        assert result.returncode == 3
        assert result.stdout == ""
        assert "capture_output" not in mock_run.call_args.kwargs

    @patch("xgo_runner.executor.subprocess.run", side_effect=FileNotFoundError)
    def test_missing_binary_propagates(self, _mock_run):
        """Should propagate OSError for the runtime to map."""
        with pytest.raises(FileNotFoundError):
            SubprocessExecutor().run(["docker", "version"])
