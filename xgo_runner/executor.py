"""Command execution for external processes.

All calls to the container runtime go through a CommandExecutor so the
pipeline can be driven by a recording fake in tests.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of a command execution.

    Attributes:
        returncode: Process exit code.
        stdout: Captured standard output (empty unless captured).
    """

    returncode: int
    stdout: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CommandExecutor(Protocol):
    """Synchronous command execution capability."""

    def run(self, cmd: list[str], capture: bool = False) -> CommandResult:
        """Run a command to completion.

        Args:
            cmd: Command as list of strings.
            capture: Capture stdout as text instead of streaming it.

        Returns:
            CommandResult with exit code and captured output.

        Raises:
            OSError: If the command cannot be started.
        """
        ...


class SubprocessExecutor:
    """CommandExecutor backed by subprocess.

    Uncaptured commands inherit the parent's stdout/stderr, so long-running
    pulls and builds report their progress directly to the terminal.
    """

    def run(self, cmd: list[str], capture: bool = False) -> CommandResult:
        logger.debug("Running: %s", shlex.join(cmd))
        if capture:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
            )
            if result.returncode != 0 and result.stderr:
                logger.debug("stderr: %s", result.stderr.strip())
            return CommandResult(returncode=result.returncode, stdout=result.stdout)

        result = subprocess.run(cmd, check=False)
        return CommandResult(returncode=result.returncode)


__all__ = ["CommandExecutor", "CommandResult", "SubprocessExecutor"]
