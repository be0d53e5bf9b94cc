# dag.py
from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, Iterator, List, Sequence, Set, Tuple

from .model import Target

DEFAULT_TARGET = "default"


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

class GraphError(ValueError):
    """Base class for target graph configuration errors."""


class DuplicateTarget(GraphError):
    def __init__(self, name: str):
        super().__init__(f"Target '{name}' is already registered")
        self.name = name


class UnknownTarget(GraphError):
    def __init__(self, name: str, needed_by: str | None = None, known: Iterable[str] = ()):
        if needed_by:
            message = f"Target '{needed_by}' needs missing target '{name}'"
        else:
            message = f"Target '{name}' does not exist"
        known = sorted(known)
        if known:
            message += f". Known targets: {known}"
        super().__init__(message)
        self.name = name
        self.needed_by = needed_by


class CyclicDependency(GraphError):
    def __init__(self, cycle: Sequence[str]):
        super().__init__("Dependency cycle: " + " -> ".join(cycle))
        self.cycle = tuple(cycle)


# ----------------------------------------------------------------------
# Graph
# ----------------------------------------------------------------------

_VISITING = 1
_DONE = 2


class TargetGraph:
    """
    Registry of targets plus dependency resolution.

    `resolve` is pure: it only inspects registered targets and returns an
    execution plan. Running the plan is the Runner's job.
    """

    def __init__(self, default: str = DEFAULT_TARGET):
        self.default = default
        self._targets: Dict[str, Target] = {}

    def register(self, target: Target) -> Target:
        if target.name in self._targets:
            raise DuplicateTarget(target.name)
        self._targets[target.name] = target
        return target

    def add(self, *targets: Target) -> TargetGraph:
        for t in targets:
            self.register(t)
        return self

    def names(self) -> List[str]:
        return list(self._targets)

    def __contains__(self, name: object) -> bool:
        return name in self._targets

    def __getitem__(self, name: str) -> Target:
        try:
            return self._targets[name]
        except KeyError:
            raise UnknownTarget(name, known=self._targets) from None

    def __iter__(self) -> Iterator[Target]:
        return iter(self._targets.values())

    def __len__(self) -> int:
        return len(self._targets)

    def resolve(
        self,
        names: Sequence[str] = (),
        *,
        skip_dependencies: bool = False,
    ) -> Tuple[Target, ...]:
        """
        Compute the execution plan for the requested targets.

        Depth-first, dependencies before dependents. Requested names are
        visited in request order and each target's needs in declared order,
        so the same request always yields the same plan.

        Raises UnknownTarget or CyclicDependency before anything runs.
        """
        requested = list(dict.fromkeys(names or [self.default]))
        for name in requested:
            if name not in self._targets:
                raise UnknownTarget(name, known=self._targets)

        state: Dict[str, int] = {}
        order: List[Target] = []

        for name in requested:
            self._visit(name, state, order)

        if skip_dependencies:
            return tuple(self._targets[n] for n in requested)
        return tuple(order)

    def _visit(self, root: str, state: Dict[str, int], order: List[Target]) -> None:
        # Explicit stack of (name, remaining needs); `path` mirrors it for cycle reports.
        if state.get(root) == _DONE:
            return
        path: List[str] = []
        stack: List[Tuple[str, Iterator[str]]] = []

        def enter(name: str) -> None:
            state[name] = _VISITING
            path.append(name)
            stack.append((name, iter(self._targets[name].needs)))

        enter(root)
        while stack:
            name, needs = stack[-1]
            dep = next(needs, None)
            if dep is None:
                stack.pop()
                path.pop()
                state[name] = _DONE
                order.append(self._targets[name])
                continue
            if dep not in self._targets:
                raise UnknownTarget(dep, needed_by=name, known=self._targets)
            mark = state.get(dep)
            if mark == _DONE:
                continue
            if mark == _VISITING:
                start = path.index(dep)
                raise CyclicDependency(path[start:] + [dep])
            enter(dep)

    def dependents(self, plan: Sequence[Target]) -> Tuple[Dict[str, Set[str]], Dict[str, int]]:
        """Adjacency (dep -> dependents) and in-degrees restricted to a plan."""
        in_plan = {t.name for t in plan}
        adj: Dict[str, Set[str]] = {t.name: set() for t in plan}
        indeg: Dict[str, int] = {t.name: 0 for t in plan}
        for t in plan:
            for dep in dict.fromkeys(t.needs):
                if dep in in_plan:
                    adj[dep].add(t.name)
                    indeg[t.name] += 1
        return adj, indeg

    def levels(self, plan: Sequence[Target]) -> List[List[str]]:
        """Group a plan into stages; targets within a stage do not depend on each other."""
        adj, indeg = self.dependents(plan)
        return topo_levels(adj, indeg, order=[t.name for t in plan])


def topo_levels(
    adj: Dict[str, Set[str]],
    indeg: Dict[str, int],
    order: Sequence[str] | None = None,
) -> List[List[str]]:
    """
    Convert a DAG into topological "levels" (stages).

    `order` sets the tie-break inside a stage; names are sorted without it.
    """
    rank = {n: i for i, n in enumerate(order)} if order is not None else None

    def key(n: str):
        return rank[n] if rank is not None else n

    indeg = dict(indeg)  # copy (we mutate it)
    q = deque(sorted((n for n, d in indeg.items() if d == 0), key=key))

    levels: List[List[str]] = []
    processed = 0

    while q:
        level = sorted(q, key=key)
        q.clear()
        for node in level:
            processed += 1
            for child in adj.get(node, set()):
                indeg[child] -= 1
                if indeg[child] == 0:
                    q.append(child)
        levels.append(level)

    if processed != len(indeg):
        remaining = sorted(n for n, d in indeg.items() if d > 0)
        raise CyclicDependency(remaining)

    return levels
