"""Error definitions for xgo_runner.

Every error carries a stable code for structured handling and, once it has
escaped a pipeline stage, the stage it came from. All of them are terminal:
the orchestrator never retries or downgrades them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from xgo_runner.types import BuildStage

ENVIRONMENT_ERROR = "environment_error"
REGISTRY_ERROR = "registry_error"
DEPENDENCY_FETCH_ERROR = "dependency_fetch_error"
PRECONDITION_ERROR = "precondition_error"
EXECUTION_ERROR = "execution_error"


class XgoError(Exception):
    """Base class for fatal build errors."""

    default_code = "error"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        stage: BuildStage | None = None,
    ) -> None:
        """Initialize XgoError.

        Args:
            message: Error description.
            code: Error code for structured error handling.
            stage: Pipeline stage the error escaped from.
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.stage = stage

    def describe(self) -> str:
        """Render the single user-facing diagnostic for this error."""
        if self.stage is None:
            return self.message
        return f"{self.stage.value}: {self.message}"


class ContainerEnvironmentError(XgoError):
    """The container runtime is missing or cannot be queried."""

    default_code = ENVIRONMENT_ERROR


class RegistryError(XgoError):
    """Listing or pulling images failed."""

    default_code = REGISTRY_ERROR


class DependencyFetchError(XgoError):
    """A dependency archive could not be placed in the cache."""

    default_code = DEPENDENCY_FETCH_ERROR


class PreconditionError(XgoError):
    """A required input is missing or invalid."""

    default_code = PRECONDITION_ERROR


class ExecutionError(XgoError):
    """The build container exited with a non-zero status."""

    default_code = EXECUTION_ERROR

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        code: str | None = None,
        stage: BuildStage | None = None,
    ) -> None:
        super().__init__(message, code=code, stage=stage)
        self.exit_code = exit_code


__all__ = [
    "DEPENDENCY_FETCH_ERROR",
    "ENVIRONMENT_ERROR",
    "EXECUTION_ERROR",
    "PRECONDITION_ERROR",
    "REGISTRY_ERROR",
    "ContainerEnvironmentError",
    "DependencyFetchError",
    "ExecutionError",
    "PreconditionError",
    "RegistryError",
    "XgoError",
]
