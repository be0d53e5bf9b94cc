from __future__ import annotations

from pathlib import Path

import pytest

from devtargets.config import Settings
from devtargets.dag import TargetGraph
from devtargets.dsl import target
from devtargets.model import PublishProject, TestProject, TestSuite
from devtargets.runner import TargetFailure, run_targets
from devtargets.solution import SolutionFilter
from devtargets.targets import keys
from devtargets.targets.build import BuildTargets
from devtargets.targets.registry import build_graph
from devtargets.workflow import DotnetWorkflow

RELEASE = ["--configuration", "Release", "--verbosity", "minimal", "--nologo"]


@pytest.fixture
def workflow() -> DotnetWorkflow:
    return DotnetWorkflow(
        solution_name="App",
        title="App Coverage",
        test_suites=(
            TestSuite(keys.TEST_INTEGRATION, "Integration tests.", (TestProject("integration", "tests/IntegrationTests"),)),
            TestSuite(
                keys.TEST_UNIT,
                "Unit tests.",
                (TestProject("domain", "tests/Domain.Facts"), TestProject("api", "tests/Api.Facts")),
            ),
        ),
        publish_projects=(PublishProject("cli", "src/Cli/Cli.csproj", ("linux-x64", "osx-arm64")),),
    )


def _graph(workflow, recorder, tmp_path, settings=None) -> TargetGraph:
    return build_graph(workflow, settings or Settings(), recorder, root=tmp_path)


def _commands(recorder) -> list[list[str]]:
    return [[c.program, *c.args] for c in recorder.calls]


def test_registered_target_names(workflow, recorder, tmp_path) -> None:
    graph = _graph(workflow, recorder, tmp_path)
    assert graph.names() == [
        keys.SOLUTION,
        keys.CLEAN,
        keys.DOTNET,
        keys.BUILD,
        keys.DEFAULT,
        keys.TEST_INTEGRATION,
        keys.TEST_UNIT,
        keys.TEST,
        keys.COVERAGE,
        keys.PUBLISH,
        keys.LINT,
    ]


def test_default_runs_the_build_chain(workflow, recorder, tmp_path, console) -> None:
    graph = _graph(workflow, recorder, tmp_path)
    assert [t.name for t in graph.resolve()] == ["solution", "clean", "dotnet", "build", "default"]

    run_targets(graph, console=console)

    assert _commands(recorder) == [
        ["dotnet", "clean", "artifacts/App.slnf", *RELEASE],
        ["dotnet", "build", "artifacts/App.slnf", *RELEASE, "/warnaserror"],
    ]
    assert all(c.cwd == tmp_path for c in recorder.calls)
    assert (tmp_path / "artifacts" / "App.slnf").exists()


def test_local_build_drops_warnings_as_errors(workflow, recorder, tmp_path, console) -> None:
    settings = Settings(build_configuration="Debug", local_build=True)
    graph = _graph(workflow, recorder, tmp_path, settings)
    run_targets(graph, [keys.DOTNET], skip_dependencies=True, console=console)
    assert _commands(recorder) == [
        ["dotnet", "build", "artifacts/App.slnf", "--configuration", "Debug", "--verbosity", "minimal", "--nologo"],
    ]


def test_solution_target_writes_filter_without_runner_project(workflow, recorder, tmp_path, console) -> None:
    for rel in ("src/App/App.csproj", "tools/Dev/Dev.csproj", "tests/Domain.Facts/Domain.Facts.csproj"):
        path = tmp_path / rel
        path.parent.mkdir(parents=True)
        path.write_text("<Project />")

    run_targets(_graph(workflow, recorder, tmp_path), [keys.SOLUTION], console=console)

    sf = SolutionFilter.read(tmp_path / "artifacts" / "App.slnf")
    assert sf.solution_path == "../App.slnx"
    assert sf.projects == ("src/App/App.csproj", "tests/Domain.Facts/Domain.Facts.csproj")
    assert recorder.calls == []


def test_test_aggregate_depends_on_every_suite(workflow, recorder, tmp_path) -> None:
    graph = _graph(workflow, recorder, tmp_path)
    assert graph[keys.TEST].needs == (keys.TEST_INTEGRATION, keys.TEST_UNIT)
    assert graph[keys.TEST].action is None


def test_test_suite_fans_out_per_project(workflow, recorder, tmp_path, console) -> None:
    graph = _graph(workflow, recorder, tmp_path)
    run_targets(graph, [keys.TEST_UNIT], skip_dependencies=True, console=console)

    assert _commands(recorder) == [
        ["dotnet", "test", "tests/Domain.Facts", *RELEASE, "--no-build", "--collect", "XPlat Code Coverage",
         "--logger", "trx", "--results-directory", "artifacts/tests/results/domain"],
        ["dotnet", "test", "tests/Api.Facts", *RELEASE, "--no-build", "--collect", "XPlat Code Coverage",
         "--logger", "trx", "--results-directory", "artifacts/tests/results/api"],
    ]


def test_failing_test_project_names_suite_and_project(workflow, recorder, tmp_path, console) -> None:
    recorder.fail_when(lambda c: c.args[:2] == ["test", "tests/Domain.Facts"])
    graph = _graph(workflow, recorder, tmp_path)

    with pytest.raises(TargetFailure) as exc:
        run_targets(graph, [keys.TEST], console=console)

    assert exc.value.target == keys.TEST_UNIT
    assert str(exc.value.item) == "domain"
    assert not any(c.args[:2] == ["test", "tests/Api.Facts"] for c in recorder.calls)


def test_coverage_tags_report_with_commit(workflow, recorder, tmp_path, console) -> None:
    recorder.reads["git"] = "0123abcd"
    graph = _graph(workflow, recorder, tmp_path)
    run_targets(graph, [keys.COVERAGE], skip_dependencies=True, console=console)

    assert _commands(recorder) == [
        ["git", "rev-parse", "HEAD"],
        [
            "dotnet",
            "reportgenerator",
            "-assemblyFilters:+App.**,-App.**Dev,-App.**Facts,-App.**Testbed,-App.**Tests",
            "-reports:artifacts/tests/results/*/*/coverage.cobertura.xml",
            "-targetdir:artifacts/tests/coverage",
            "-tag:0123abcd",
            "-reporttypes:Html",
            "-title:App Coverage",
        ],
    ]


def test_coverage_runs_after_tests(workflow, recorder, tmp_path) -> None:
    order = [t.name for t in _graph(workflow, recorder, tmp_path).resolve([keys.COVERAGE])]
    assert order.index(keys.TEST) < order.index(keys.COVERAGE)
    assert order.index(keys.TEST_UNIT) < order.index(keys.TEST)


def test_publish_fans_out_per_project_and_runtime(workflow, recorder, tmp_path, console) -> None:
    graph = _graph(workflow, recorder, tmp_path)
    assert [str(i) for i in graph[keys.PUBLISH].items] == ["cli/linux-x64", "cli/osx-arm64"]

    run_targets(graph, [keys.PUBLISH], skip_dependencies=True, console=console)

    assert _commands(recorder) == [
        ["dotnet", "publish", "src/Cli/Cli.csproj", *RELEASE, "--runtime", "linux-x64",
         "--output", "artifacts/executables/cli/linux-x64"],
        ["dotnet", "publish", "src/Cli/Cli.csproj", *RELEASE, "--runtime", "osx-arm64",
         "--output", "artifacts/executables/cli/osx-arm64"],
    ]


def test_lint_runs_container_and_moves_reports(workflow, recorder, tmp_path, console) -> None:
    (tmp_path / "megalinter-reports").mkdir()
    (tmp_path / "megalinter-reports" / "report.txt").write_text("ok")
    stale = tmp_path / "artifacts" / "linting"
    stale.mkdir(parents=True)
    (stale / "old.txt").write_text("old")

    graph = _graph(workflow, recorder, tmp_path, Settings(container_runtime="docker"))
    run_targets(graph, [keys.LINT], console=console)

    assert _commands(recorder) == [
        ["docker", "run", "--rm", "--volume", f"{tmp_path.resolve()}:/tmp/lint:rw", "oxsecurity/megalinter-dotnet:v8"],
    ]
    assert (stale / "report.txt").read_text() == "ok"
    assert not (stale / "old.txt").exists()
    assert not (tmp_path / "megalinter-reports").exists()


def test_local_lint_applies_fixes(workflow, recorder, tmp_path, console) -> None:
    (tmp_path / "megalinter-reports").mkdir()
    graph = _graph(workflow, recorder, tmp_path, Settings(local_lint=True))
    run_targets(graph, [keys.LINT], console=console)

    args = recorder.calls[0].args
    assert recorder.calls[0].program == "podman"
    assert args[args.index("--env") + 1] == "APPLY_FIXES=all"
    assert args[-1] == "oxsecurity/megalinter-dotnet:v8"


def test_lint_without_reports_fails(workflow, recorder, tmp_path, console) -> None:
    graph = _graph(workflow, recorder, tmp_path)
    with pytest.raises(TargetFailure) as exc:
        run_targets(graph, [keys.LINT], console=console)
    assert isinstance(exc.value.cause, FileNotFoundError)


def test_extra_targets_are_registered_after_built_ins(workflow, recorder, tmp_path, console) -> None:
    ran: list[str] = []
    extended = DotnetWorkflow(
        solution_name=workflow.solution_name,
        extra_targets=(target("ci", lambda: ran.append("ci"), needs=[keys.LINT]),),
    )
    (tmp_path / "megalinter-reports").mkdir()
    graph = _graph(extended, recorder, tmp_path)

    assert graph.names()[-1] == "ci"
    run_targets(graph, ["ci"], console=console)
    assert ran == ["ci"]


def test_workflow_without_suites_still_has_test_target(recorder, tmp_path) -> None:
    graph = _graph(DotnetWorkflow(solution_name="App"), recorder, tmp_path)
    assert graph[keys.TEST].needs == ()
    assert graph[keys.PUBLISH].items == ()


def test_build_targets_default_root_is_cwd(workflow, recorder, monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    assert BuildTargets(workflow, Settings(), recorder).root == Path.cwd()
