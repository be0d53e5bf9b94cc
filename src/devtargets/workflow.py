# workflow.py
from __future__ import annotations

import runpy
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from .model import FanOutTarget, PublishProject, SimpleTarget, Target, TestSuite

DEFAULT_WORKFLOW_FILE = "devtargets_workflow.py"
DEFAULT_LINT_IMAGE = "oxsecurity/megalinter-dotnet:v8"
DEFAULT_COVERAGE_EXCLUSIONS = ("Dev", "Facts", "Testbed", "Tests")


class WorkflowError(Exception):
    """The workflow file is missing or does not define a usable workflow."""


@dataclass(frozen=True)
class DotnetWorkflow:
    """
    Everything the built-in targets need to know about one repository.

    solution_name: base name of <name>.slnx and artifacts/<name>.slnf
    title: coverage report title (defaults to solution_name)
    assembly_prefix: coverage include pattern prefix (defaults to solution_name)
    runner_project: project stem left out of the solution filter
    extra_targets: additional targets registered after the built-in ones
    """
    solution_name: str
    title: Optional[str] = None
    assembly_prefix: Optional[str] = None
    test_suites: tuple[TestSuite, ...] = ()
    publish_projects: tuple[PublishProject, ...] = ()
    lint_image: str = DEFAULT_LINT_IMAGE
    runner_project: str = "Dev"
    coverage_exclusions: tuple[str, ...] = DEFAULT_COVERAGE_EXCLUSIONS
    extra_targets: tuple[Target, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        if not self.solution_name:
            raise WorkflowError("DotnetWorkflow.solution_name must be non-empty")

    @property
    def report_title(self) -> str:
        return self.title or self.solution_name

    @property
    def coverage_prefix(self) -> str:
        return self.assembly_prefix or self.solution_name


# ----------------------------------------------------------------------
# Workflow loading (local file)
# ----------------------------------------------------------------------

def load_workflow(path: str | Path) -> DotnetWorkflow:
    """
    Load a workflow from a python file path.

    The file must define either:
      - workflow() -> DotnetWorkflow
      - WORKFLOW = DotnetWorkflow(...)

    It may also define extra_targets() -> list of targets (see dsl.wf).
    """
    wf_path = Path(path).expanduser().resolve()
    if not wf_path.exists():
        raise WorkflowError(f"Workflow file not found: {wf_path}")
    if wf_path.suffix != ".py":
        raise WorkflowError(f"Workflow must be a .py file, got: {wf_path.name}")

    module_name = f"devtargets_workflow_{wf_path.stem}"
    globals_dict = runpy.run_path(str(wf_path), run_name=module_name)

    if callable(globals_dict.get("workflow")):
        definition = globals_dict["workflow"]()
    elif "WORKFLOW" in globals_dict:
        definition = globals_dict["WORKFLOW"]
    else:
        raise WorkflowError(
            f"{wf_path.name} must define workflow() -> DotnetWorkflow or WORKFLOW = DotnetWorkflow(...)"
        )

    if not isinstance(definition, DotnetWorkflow):
        raise WorkflowError(
            f"{wf_path.name}: expected a DotnetWorkflow, got {type(definition).__name__}"
        )

    extra = globals_dict.get("extra_targets")
    if callable(extra):
        targets = list(extra())
        if not all(isinstance(t, (SimpleTarget, FanOutTarget)) for t in targets):
            raise WorkflowError(f"{wf_path.name}: extra_targets() must return a list of targets")
        definition = replace(definition, extra_targets=definition.extra_targets + tuple(targets))

    return definition
