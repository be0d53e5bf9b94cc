# paths.py
# Layout of the artifacts/ directory shared by every target.
from __future__ import annotations

ROOT = "artifacts"

EXECUTABLES = f"{ROOT}/executables"
LINT_RESULTS = f"{ROOT}/linting"

TESTS = f"{ROOT}/tests"
TEST_COVERAGE = f"{TESTS}/coverage"
TEST_RESULTS = f"{TESTS}/results"
TEST_RESULTS_COVERAGE_GLOB = f"{TEST_RESULTS}/*/*/coverage.cobertura.xml"


def executable_dir(project: str, runtime: str) -> str:
    return f"{EXECUTABLES}/{project}/{runtime}"


def results_dir(project: str) -> str:
    return f"{TEST_RESULTS}/{project}"


def solution_filter(solution_name: str) -> str:
    return f"{ROOT}/{solution_name}.slnf"
