"""Console output formatting utilities for devtargets."""

from __future__ import annotations

import sys
import threading
from typing import Optional, Sequence


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False, stream=None, err_stream=None):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
            stream: Where regular output goes (defaults to sys.stdout at call time)
            err_stream: Where errors go (defaults to sys.stderr at call time)
        """
        self.debug = debug
        self._stream = stream
        self._err_stream = err_stream
        self._lock = threading.Lock()

    @property
    def out(self):
        return self._stream or sys.stdout

    @property
    def err(self):
        return self._err_stream or sys.stderr

    def _print(self, *lines: str, error: bool = False) -> None:
        target = self.err if error else self.out
        with self._lock:
            for line in lines:
                print(line, file=target)
            target.flush()

    def print_run_started(self, workflow: str, targets: Sequence[str], plan_size: int) -> None:
        """Print run start information."""
        self._print(
            "\nRUN STARTED",
            f"Workflow: {workflow}",
            f"Requested: {', '.join(targets) if targets else '(default)'}",
            f"Targets: {plan_size}",
            "",
        )

    def print_target_started(self, name: str, description: str = "") -> None:
        """Print target start message."""
        lines = [f"\nTARGET STARTED: {name}"]
        if description:
            lines.append(description)
        self._print(*lines)

    def print_item_started(self, target: str, item: str) -> None:
        self._print(f"ITEM: {target}({item})")

    def print_item_output(self, target: str, item: str, output: str) -> None:
        """Flush the buffered output of one fan-out item as a single block."""
        lines = [f"ITEM: {target}({item})"]
        lines.extend(f"[{target}({item})] {line}" for line in output.splitlines())
        self._print(*lines)

    def print_command(self, command_line: str) -> None:
        self._print(f"$ {command_line}")

    def print_target_succeeded(self, name: str) -> None:
        self._print(f"STATUS: {name} succeeded")

    def print_failure(self, name: str, failure: BaseException) -> None:
        """
        Print failure message.

        Args:
            name: Target name
            failure: The TargetFailure raised by the runner
        """
        lines = [f"TARGET FAILED: {name}"]
        item = getattr(failure, "item", None)
        if item is not None:
            lines.append(f"Item: {item}")
        cause = getattr(failure, "cause", failure)
        exit_code = getattr(cause, "exit_code", None)
        if exit_code is not None:
            lines.append(f"Exit code: {exit_code}")
        lines.append(f"Error: {cause}")
        output = getattr(cause, "output", "")
        if self.debug and output:
            lines.append("Output (tail):")
            lines.extend(f"  {line}" for line in output.splitlines())
        self._print(*lines, error=True)

    def print_plan(self, levels: Sequence[Sequence[str]], descriptions: dict[str, str]) -> None:
        """Print an execution plan grouped into stages."""
        for idx, level in enumerate(levels):
            self._print(f"=== Stage {idx + 1} ===")
            for name in level:
                desc = descriptions.get(name, "")
                self._print(f"  {name}" + (f"  {desc}" if desc else ""))

    def print_targets(self, targets: Sequence[tuple[str, str, Sequence[str]]]) -> None:
        """Print the registered targets, their descriptions and dependencies."""
        width = max((len(name) for name, _, _ in targets), default=0)
        for name, description, needs in targets:
            line = f"  {name.ljust(width)}  {description}".rstrip()
            self._print(line)
            if needs:
                self._print(f"  {' ' * width}  needs: {', '.join(needs)}")

    def print_results(self, results: dict[str, str]) -> None:
        """Print final results summary."""
        lines = ["\n" + "=" * 40, "RESULTS", "=" * 40]
        for name, status in results.items():
            status_display = status.upper() if status != "ok" else "SUCCESS"
            lines.append(f"  {name}: {status_display}")
        self._print(*lines)

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        lines = [f"\nERROR: {title}", message]
        if details:
            lines.extend(f"  {detail}" for detail in details)
        if suggestion:
            lines.append(f"\n{suggestion}")
        self._print(*lines, error=True)

    def print_exception(self, exc: BaseException) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            with self._lock:
                traceback.print_exception(type(exc), exc, exc.__traceback__, file=self.err)
        else:
            self._print(f"Error: {exc}", error=True)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        self._print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            self._print(f"[DEBUG] {message}", error=True)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
