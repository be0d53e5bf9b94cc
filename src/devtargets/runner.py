# runner.py
from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from .dag import TargetGraph
from .model import FanOutTarget, SimpleTarget, Target
from .shell import capture_output
from .ui.console import Console, get_console

OK = "ok"
FAILED = "failed"
SKIPPED = "skipped"


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

@dataclass(eq=False)
class TargetFailure(Exception):
    """
    A target's action raised.

    `item` is the fan-out item that failed, or None for a simple target.
    The original exception is kept as `cause` and chained as __cause__.
    """
    target: str
    item: Any
    cause: BaseException

    @property
    def location(self) -> str:
        if self.item is None:
            return self.target
        return f"{self.target}({self.item})"

    def __str__(self) -> str:
        return f"{self.location}: {self.cause}"


@dataclass
class _ItemOutcome:
    item: Any
    output: str = ""
    error: Optional[Exception] = None
    skipped: bool = False


# ----------------------------------------------------------------------
# Runner
# ----------------------------------------------------------------------

class Runner:
    """
    Executes a plan produced by TargetGraph.resolve.

    Targets run strictly in plan order and each runs once, however many
    dependents name it. The first failure stops the run. With
    max_workers > 1 the items of a single fan-out target run concurrently;
    targets themselves never overlap.
    """

    def __init__(self, console: Console | None = None, max_workers: int = 1):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.console = console or get_console()
        self.max_workers = max_workers
        self.results: Dict[str, str] = {}

    def run(self, plan: Sequence[Target]) -> Dict[str, str]:
        """Run every target in order. Returns name -> "ok"; raises TargetFailure."""
        self.results = {}
        for idx, target in enumerate(plan):
            if target.name in self.results:
                continue
            try:
                self._run_target(target)
            except TargetFailure as failure:
                self.results[target.name] = FAILED
                for rest in plan[idx + 1:]:
                    self.results.setdefault(rest.name, SKIPPED)
                self.console.print_failure(target.name, failure)
                raise
            self.results[target.name] = OK
        return dict(self.results)

    def _run_target(self, target: Target) -> None:
        self.console.print_target_started(target.name, target.description)
        if isinstance(target, FanOutTarget):
            if self.max_workers > 1 and len(target.items) > 1:
                self._run_fan_out_concurrently(target)
            else:
                self._run_fan_out(target)
        elif isinstance(target, SimpleTarget):
            self._run_simple(target)
        else:
            raise TypeError(f"Unsupported target type: {type(target).__name__}")
        self.console.print_target_succeeded(target.name)

    def _run_simple(self, target: SimpleTarget) -> None:
        if target.action is None:
            return
        try:
            target.action()
        except Exception as e:
            raise TargetFailure(target=target.name, item=None, cause=e) from e

    def _run_fan_out(self, target: FanOutTarget) -> None:
        for item in target.items:
            self.console.print_item_started(target.name, str(item))
            try:
                target.action(item)
            except Exception as e:
                raise TargetFailure(target=target.name, item=item, cause=e) from e

    def _run_fan_out_concurrently(self, target: FanOutTarget) -> None:
        cancelled = threading.Event()
        failure: Optional[_ItemOutcome] = None
        workers = min(self.max_workers, len(target.items))

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=target.name) as pool:
            futures = [pool.submit(self._run_item, target, item, cancelled) for item in target.items]
            reported = set()

            for future in as_completed(futures):
                reported.add(future)
                outcome = future.result()
                self._report_item(target, outcome)
                if outcome.error is not None:
                    failure = outcome
                    break

            if failure is not None:
                # Queued items never start; items already running finish on their own.
                for future in futures:
                    future.cancel()
                for future in futures:
                    if future in reported or future.cancelled():
                        continue
                    self._report_item(target, future.result())

        if failure is not None:
            raise TargetFailure(target=target.name, item=failure.item, cause=failure.error) from failure.error

    def _report_item(self, target: FanOutTarget, outcome: _ItemOutcome) -> None:
        if not outcome.skipped:
            self.console.print_item_output(target.name, str(outcome.item), outcome.output)

    @staticmethod
    def _run_item(target: FanOutTarget, item: Any, cancelled: threading.Event) -> _ItemOutcome:
        if cancelled.is_set():
            return _ItemOutcome(item=item, skipped=True)
        with capture_output() as buffer:
            try:
                target.action(item)
            except Exception as e:
                cancelled.set()
                return _ItemOutcome(item=item, output=buffer.getvalue(), error=e)
        return _ItemOutcome(item=item, output=buffer.getvalue())


def run_targets(
    graph: TargetGraph,
    names: Sequence[str] = (),
    *,
    skip_dependencies: bool = False,
    max_workers: int = 1,
    console: Console | None = None,
) -> Dict[str, str]:
    """Resolve then run: the one-call entry point used by the CLI and tests."""
    plan = graph.resolve(names, skip_dependencies=skip_dependencies)
    return Runner(console=console, max_workers=max_workers).run(plan)
