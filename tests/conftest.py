"""Shared fixtures for the xgo_runner tests."""

from pathlib import Path

import pytest

from xgo_runner.executor import CommandResult


class FakeExecutor:
    """CommandExecutor that records commands instead of running them.

    Results are keyed by docker subcommand ('version', 'images', 'pull',
    'run'). A value may be a CommandResult or an exception to raise.
    """

    def __init__(self, results: dict[str, object] | None = None) -> None:
        self.results: dict[str, object] = {
            "version": CommandResult(0, "24.0.7\n"),
            "images": CommandResult(0, ""),
            "pull": CommandResult(0),
            "run": CommandResult(0),
        }
        if results:
            self.results.update(results)
        self.calls: list[list[str]] = []

    def run(self, cmd: list[str], capture: bool = False) -> CommandResult:
        self.calls.append(list(cmd))
        result = self.results[cmd[1]]
        if isinstance(result, Exception):
            raise result
        assert isinstance(result, CommandResult)
        return result

    def subcommands(self) -> list[str]:
        return [c[1] for c in self.calls]


@pytest.fixture
def fake_executor() -> FakeExecutor:
    """Executor with a working docker and no local images."""
    return FakeExecutor()


@pytest.fixture
def go_project(tmp_path: Path) -> Path:
    """Create a Go repository directory that doubles as build dir."""
    repo = tmp_path / "project"
    repo.mkdir()
    (repo / "main.go").write_text("package main\n\nfunc main() {}\n")
    return repo
