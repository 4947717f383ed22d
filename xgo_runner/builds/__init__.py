"""Build orchestration module.

This module handles:
- Composing the build container invocation
- Driving the build pipeline from validation to execution
"""

from xgo_runner.builds.compose import compose_invocation
from xgo_runner.builds.orchestrator import BuildOrchestrator, build_orchestrator

__all__ = ["BuildOrchestrator", "build_orchestrator", "compose_invocation"]
