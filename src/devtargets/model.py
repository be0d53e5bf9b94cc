# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class SimpleTarget:
    """
    A target whose action runs once.

    `action` is None for aggregation targets such as "default" or "test":
    they exist only to give a stable name to a set of dependencies.
    """
    name: str
    description: str = ""
    needs: tuple[str, ...] = ()
    action: Optional[Callable[[], None]] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class FanOutTarget(Generic[T]):
    """
    A target whose action runs once per item.

    Items are fixed when the target is registered. Dependents wait for every
    item to finish.
    """
    name: str
    items: tuple[T, ...]
    action: Callable[[T], None] = field(compare=False, repr=False)
    description: str = ""
    needs: tuple[str, ...] = ()


Target = Union[SimpleTarget, FanOutTarget]


# ----------------------------------------------------------------------
# Fan-out items
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class TestProject:
    """A test project: its display name and its path relative to the repo root."""
    __test__ = False  # not a pytest class

    name: str
    path: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TestSuite:
    """A named group of test projects, registered as one fan-out target."""
    __test__ = False

    name: str
    description: str
    projects: tuple[TestProject, ...]

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PublishProject:
    name: str
    path: str
    runtimes: tuple[str, ...]

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PublishRuntime:
    """One publish invocation: a project built for a single runtime identifier."""
    project: PublishProject
    runtime: str

    def __str__(self) -> str:
        return f"{self.project.name}/{self.runtime}"


def publish_runtimes(projects: tuple[PublishProject, ...] | list[PublishProject]) -> tuple[PublishRuntime, ...]:
    return tuple(PublishRuntime(p, rid) for p in projects for rid in p.runtimes)
