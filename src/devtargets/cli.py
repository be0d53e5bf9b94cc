# cli.py
from __future__ import annotations

import sys
from pathlib import Path

import click

from devtargets.config import Settings
from devtargets.dag import GraphError
from devtargets.environment import InvalidArgument
from devtargets.runner import Runner, TargetFailure
from devtargets.shell import CommandRunner
from devtargets.targets.registry import build_graph
from devtargets.ui.console import Console, get_console, set_console
from devtargets.workflow import DEFAULT_WORKFLOW_FILE, WorkflowError, load_workflow


def find_workflow_files(directory: Path | None = None) -> list[Path]:
    """
    Find all workflow files in a directory (the current one by default).

    Returns:
        List of Path objects for workflow files
    """
    current_dir = directory or Path(".")
    default_workflow = current_dir / DEFAULT_WORKFLOW_FILE
    workflow_files = [default_workflow] if default_workflow.exists() else []

    for path in current_dir.glob("*_workflow.py"):
        if path.name != DEFAULT_WORKFLOW_FILE:
            workflow_files.append(path)

    return sorted(workflow_files)


def discover_workflow(workflow_arg: str | None) -> Path:
    """
    Discover workflow file from argument or default.

    Raises:
        SystemExit: If workflow cannot be found or multiple workflows exist
    """
    console = get_console()

    if workflow_arg:
        workflow_path = Path(workflow_arg)
        if not workflow_path.exists() and workflow_path.suffix != ".py":
            workflow_path = Path(str(workflow_path) + ".py")
        if not workflow_path.exists():
            console.print_error(
                "Workflow file not found",
                f"Could not find workflow file: {workflow_arg}",
                suggestion="Create a workflow file or specify a different path:\n  devtargets --workflow my_workflow.py",
            )
            sys.exit(1)
        return workflow_path

    workflow_files = find_workflow_files()

    if len(workflow_files) == 0:
        console.print_error(
            "No workflow file found",
            "Could not find any workflow files.",
            details=["Looked for:", f"  {DEFAULT_WORKFLOW_FILE}", "  *_workflow.py"],
            suggestion=f"Create {DEFAULT_WORKFLOW_FILE} or pass --workflow PATH.",
        )
        sys.exit(1)

    if len(workflow_files) > 1:
        console.print_error(
            "Multiple workflow files found",
            "Found multiple workflow files. Please specify which one to use:",
            details=[str(f) for f in workflow_files],
            suggestion=f"Specify a workflow explicitly:\n  devtargets --workflow {DEFAULT_WORKFLOW_FILE}",
        )
        sys.exit(1)

    return workflow_files[0]


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("targets", nargs=-1)
@click.option(
    "--workflow",
    default=None,
    help=f"Workflow file path (defaults to {DEFAULT_WORKFLOW_FILE} if present)",
)
@click.option("--list", "list_targets", is_flag=True, default=False, help="List targets and their dependencies, then exit")
@click.option("--dry-run", is_flag=True, default=False, help="Print the execution plan without running anything")
@click.option("--skip-dependencies", is_flag=True, default=False, help="Run only the named targets, not what they need")
@click.option(
    "--parallel",
    "workers",
    default=1,
    show_default=True,
    type=click.IntRange(min=1),
    help="Workers for the items of a fan-out target",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
def cli(targets, workflow, list_targets, dry_run, skip_dependencies, workers, debug):
    """Run build targets in dependency order. With no TARGETS, runs "default"."""
    console = Console(debug=debug)
    set_console(console)

    workflow_path = discover_workflow(workflow)

    try:
        definition = load_workflow(workflow_path)
        settings = Settings.from_environment()
        console.print_debug(f"settings: {settings}")
        graph = build_graph(definition, settings, CommandRunner())

        if list_targets:
            console.print_targets([(t.name, t.description, t.needs) for t in graph])
            return

        plan = graph.resolve(targets, skip_dependencies=skip_dependencies)

        if dry_run:
            console.print_plan(graph.levels(plan), {t.name: t.description for t in plan})
            return

        console.print_run_started(workflow=workflow_path.name, targets=list(targets), plan_size=len(plan))

        runner = Runner(console=console, max_workers=workers)
        try:
            results = runner.run(plan)
        except TargetFailure as failure:
            console.print_results(runner.results)
            if debug:
                console.print_exception(failure)
            sys.exit(1)

        console.print_results(results)

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except (GraphError, WorkflowError, InvalidArgument) as e:
        console.print_error("Invalid configuration", str(e))
        sys.exit(1)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


if __name__ == "__main__":
    cli()
