# keys.py
# Names of the built-in targets.

BUILD = "build"
CLEAN = "clean"
COVERAGE = "coverage"
DEFAULT = "default"
DOTNET = "dotnet"
LINT = "lint"
PUBLISH = "publish"
SOLUTION = "solution"
TEST = "test"
TEST_INTEGRATION = "test.integration"
TEST_UNIT = "test.unit"
