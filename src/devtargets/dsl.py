# dsl.py
from __future__ import annotations

from typing import Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

from .model import FanOutTarget, SimpleTarget, Target

T = TypeVar("T")


# ---------------------------------------------------------------------
# Target helpers
# ---------------------------------------------------------------------

def target(
    name: str,
    action: Optional[Callable[[], None]] = None,
    *,
    needs: Optional[Sequence[str]] = None,
    description: str = "",
) -> SimpleTarget:
    """
    Create a target that runs `action` once.

    Leave `action` out for an aggregation target:
        target("build", needs=["dotnet"])
    """
    if not name:
        raise ValueError("target name must be a non-empty string")
    return SimpleTarget(name=name, description=description, needs=tuple(needs or ()), action=action)


def fan_out(
    name: str,
    items: Iterable[T],
    action: Callable[[T], None],
    *,
    needs: Optional[Sequence[str]] = None,
    description: str = "",
) -> FanOutTarget[T]:
    """
    Create a target that runs `action` once per item.

    Example:
        fan_out("test.unit", [TestProject("domain", "tests/Domain.Facts")], run_tests, needs=["dotnet"])
    """
    if not name:
        raise ValueError("target name must be a non-empty string")
    return FanOutTarget(
        name=name,
        items=tuple(items),
        action=action,
        description=description,
        needs=tuple(needs or ()),
    )


def aggregate(name: str, needs: Sequence[str], description: str = "") -> SimpleTarget:
    """A target with no action that only names a set of dependencies."""
    return target(name, needs=needs, description=description)


# ---------------------------------------------------------------------
# Matrix
# ---------------------------------------------------------------------

class Matrix(Generic[T]):
    """
    Expands one value list into one target per value.

    Example:
        matrix("configuration", ["Debug", "Release"]).targets(
            lambda c: target(f"build.{c.lower()}", build_with(c))
        )
    """
    def __init__(self, key: str, values: Iterable[T]):
        if not key:
            raise ValueError("matrix key must be a non-empty string")
        self.key = key
        self.values = tuple(values)

    def targets(self, builder: Callable[[T], Target]) -> List[Target]:
        return [builder(v) for v in self.values]


def matrix(key: str, values: Iterable[T]) -> Matrix[T]:
    return Matrix(key, values)


# ---------------------------------------------------------------------
# Workflow helper
# ---------------------------------------------------------------------

def wf(*targets: Target) -> List[Target]:
    """
    Collect targets in a workflow file:

        def extra_targets():
            return wf(
                target("docs", build_docs),
                target("ci", needs=["build", "lint", "docs"]),
            )
    """
    return list(targets)
