# targets/registry.py
from __future__ import annotations

from pathlib import Path

from ..config import Settings
from ..dag import TargetGraph
from ..shell import CommandRunner
from ..workflow import DotnetWorkflow
from .build import BuildTargets
from .lint import lint_target


def register_targets(
    graph: TargetGraph,
    workflow: DotnetWorkflow,
    settings: Settings,
    runner: CommandRunner,
    root: str | Path | None = None,
) -> TargetGraph:
    """Register the built-in targets, then the workflow's extra targets."""
    graph.add(*BuildTargets(workflow, settings, runner, root=root).all())
    graph.register(lint_target(workflow.lint_image, settings, runner, root=root))
    graph.add(*workflow.extra_targets)
    return graph


def build_graph(
    workflow: DotnetWorkflow,
    settings: Settings,
    runner: CommandRunner | None = None,
    root: str | Path | None = None,
) -> TargetGraph:
    return register_targets(TargetGraph(), workflow, settings, runner or CommandRunner(), root=root)
