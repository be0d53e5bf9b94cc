# devtargets_workflow.py
# Build definition for a .NET solution: test suites, publish projects, lint image.
from __future__ import annotations

from devtargets import DotnetWorkflow, PublishProject, TestProject, TestSuite
from devtargets.targets import keys


def workflow():
    return DotnetWorkflow(
        solution_name="App",
        title="App",
        test_suites=(
            TestSuite(
                keys.TEST_INTEGRATION,
                "Tests integrations between components of the application.",
                (TestProject("integration", "tests/IntegrationTests"),),
            ),
            TestSuite(
                keys.TEST_UNIT,
                "Tests individual components of the application.",
                (TestProject("domain", "tests/Domain.Facts"),),
            ),
        ),
        publish_projects=(
            PublishProject("app", "src/App/App.csproj", ("linux-x64", "win-x64")),
        ),
    )
