# targets/build.py
from __future__ import annotations

from pathlib import Path
from typing import List

from .. import paths
from ..config import Settings
from ..dotnet import DotnetCli
from ..dsl import aggregate, fan_out, matrix, target
from ..git_facts.git import head_sha
from ..model import FanOutTarget, PublishRuntime, SimpleTarget, TestProject, publish_runtimes
from ..shell import CommandRunner
from ..solution import build_solution_filter
from ..workflow import DotnetWorkflow
from . import keys


class BuildTargets:
    """
    The dotnet build pipeline:

        solution -> clean -> dotnet -> build -> default
                                    -> test.* -> test -> coverage
                                    -> publish
    """

    def __init__(
        self,
        workflow: DotnetWorkflow,
        settings: Settings,
        runner: CommandRunner,
        root: str | Path | None = None,
    ):
        self.workflow = workflow
        self.settings = settings
        self.runner = runner
        self.root = Path(root) if root is not None else Path.cwd()
        self.dotnet = DotnetCli(runner, settings, cwd=self.root)

    @property
    def solution_filter(self) -> str:
        return paths.solution_filter(self.workflow.solution_name)

    def all(self) -> List[SimpleTarget | FanOutTarget]:
        suites = self.test_suites()
        return [
            self.solution(),
            self.clean(),
            self.compile(),
            self.build(),
            self.default(),
            *suites,
            self.test([s.name for s in suites]),
            self.coverage(),
            self.publish(),
        ]

    # ---- targets ----

    def solution(self) -> SimpleTarget:
        return target(
            keys.SOLUTION,
            self.write_solution_filter,
            description="Generates the solution filter used for the build process.",
        )

    def clean(self) -> SimpleTarget:
        return target(
            keys.CLEAN,
            lambda: self.dotnet.run(["clean", self.solution_filter]),
            needs=[keys.SOLUTION],
            description="Cleans .NET build artifacts from prior executions.",
        )

    def compile(self) -> SimpleTarget:
        return target(
            keys.DOTNET,
            self.compile_solution,
            needs=[keys.CLEAN],
            description="Builds the solution into output binaries.",
        )

    def build(self) -> SimpleTarget:
        return aggregate(keys.BUILD, [keys.DOTNET], "Executes the complete build process.")

    def default(self) -> SimpleTarget:
        return aggregate(keys.DEFAULT, [keys.BUILD])

    def test_suites(self) -> List[FanOutTarget[TestProject]]:
        return matrix("suite", self.workflow.test_suites).targets(
            lambda suite: fan_out(
                suite.name,
                suite.projects,
                self.run_tests,
                needs=[keys.DOTNET],
                description=suite.description,
            )
        )

    def test(self, suite_names: List[str]) -> SimpleTarget:
        return aggregate(keys.TEST, suite_names, "Executes automated test suites.")

    def coverage(self) -> SimpleTarget:
        return target(
            keys.COVERAGE,
            self.report_coverage,
            needs=[keys.TEST],
            description="Generates a code coverage report from test results.",
        )

    def publish(self) -> FanOutTarget[PublishRuntime]:
        return fan_out(
            keys.PUBLISH,
            publish_runtimes(self.workflow.publish_projects),
            self.publish_runtime,
            needs=[keys.DOTNET],
            description="Publishes projects as executables for release.",
        )

    # ---- actions ----

    def write_solution_filter(self) -> None:
        solution = build_solution_filter(
            self.root,
            self.workflow.solution_name,
            exclude=self.workflow.runner_project,
        )
        solution.write(self.root / self.solution_filter)

    def compile_solution(self) -> None:
        extra = [] if self.settings.local_build else ["/warnaserror"]
        self.dotnet.run(["build", self.solution_filter], *extra)

    def run_tests(self, project: TestProject) -> None:
        self.dotnet.run(
            ["test", project.path],
            "--no-build",
            "--collect", "XPlat Code Coverage",
            "--logger", "trx",
            "--results-directory", paths.results_dir(project.name),
        )

    def assembly_filters(self) -> str:
        prefix = self.workflow.coverage_prefix
        patterns = [f"+{prefix}.**"]
        patterns.extend(f"-{prefix}.**{suffix}" for suffix in self.workflow.coverage_exclusions)
        return ",".join(patterns)

    def report_coverage(self) -> None:
        commit_id = head_sha(self.runner, cwd=self.root)
        self.dotnet.tool(
            "reportgenerator",
            f"-assemblyFilters:{self.assembly_filters()}",
            f"-reports:{paths.TEST_RESULTS_COVERAGE_GLOB}",
            f"-targetdir:{paths.TEST_COVERAGE}",
            f"-tag:{commit_id}",
            "-reporttypes:Html",
            f"-title:{self.workflow.report_title}",
        )

    def publish_runtime(self, unit: PublishRuntime) -> None:
        self.dotnet.run(
            ["publish", unit.project.path],
            "--runtime", unit.runtime,
            "--output", paths.executable_dir(unit.project.name, unit.runtime),
        )
