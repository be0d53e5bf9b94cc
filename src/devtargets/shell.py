# shell.py
# The single place that starts external processes.
# Targets never call subprocess directly; they go through CommandRunner so
# tests can swap in a recording fake and so fan-out items can capture output.

from __future__ import annotations

import io
import shlex
import subprocess
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Sequence

from .ui.console import get_console

OUTPUT_TAIL = 4000

_item_output: ContextVar[Optional[io.StringIO]] = ContextVar("item_output", default=None)


@dataclass(eq=False)
class ExternalCommandFailure(Exception):
    """An external tool exited with a nonzero code (127 when it was not found)."""
    program: str
    arguments: tuple[str, ...]
    exit_code: int
    output: str = field(default="", repr=False)

    @property
    def command_line(self) -> str:
        return shlex.join([self.program, *self.arguments])

    def __str__(self) -> str:
        return f"{self.program} exited with code {self.exit_code}: {self.command_line}"


@contextmanager
def capture_output() -> Iterator[io.StringIO]:
    """
    Send everything CommandRunner.run prints in this context to a buffer.

    Used by the runner for concurrent fan-out items so each item's output can
    be flushed as one block instead of interleaving with its siblings.
    """
    buffer = io.StringIO()
    token = _item_output.set(buffer)
    try:
        yield buffer
    finally:
        _item_output.reset(token)


class CommandRunner:
    """Runs programs with explicit argument lists."""

    def run(self, program: str, args: Sequence[str], *, cwd: str | Path | None = None) -> None:
        """Run a program, streaming its output; raise on nonzero exit."""
        argv = [program, *args]
        buffer = _item_output.get()

        if buffer is None:
            get_console().print_command(shlex.join(argv))
            proc = self._spawn(argv, cwd=cwd, capture=False)
            output = ""
        else:
            buffer.write(f"$ {shlex.join(argv)}\n")
            proc = self._spawn(argv, cwd=cwd, capture=True)
            output = proc.stdout or ""
            buffer.write(output)

        if proc.returncode != 0:
            raise ExternalCommandFailure(
                program=program,
                arguments=tuple(args),
                exit_code=proc.returncode,
                output=output[-OUTPUT_TAIL:],
            )

    def read(self, program: str, args: Sequence[str], *, cwd: str | Path | None = None) -> str:
        """Run a program and return its stdout with surrounding whitespace removed."""
        argv = [program, *args]
        get_console().print_debug(f"read: {shlex.join(argv)}")
        proc = self._spawn(argv, cwd=cwd, capture=True, merge_stderr=False)
        if proc.returncode != 0:
            raise ExternalCommandFailure(
                program=program,
                arguments=tuple(args),
                exit_code=proc.returncode,
                output=(proc.stderr or "")[-OUTPUT_TAIL:],
            )
        return (proc.stdout or "").strip()

    def _spawn(
        self,
        argv: list[str],
        *,
        cwd: str | Path | None,
        capture: bool,
        merge_stderr: bool = True,
    ) -> subprocess.CompletedProcess:
        kwargs: dict = {"cwd": str(cwd) if cwd is not None else None, "text": True}
        if capture:
            kwargs["stdout"] = subprocess.PIPE
            kwargs["stderr"] = subprocess.STDOUT if merge_stderr else subprocess.PIPE
        try:
            return subprocess.run(argv, shell=False, check=False, **kwargs)
        except FileNotFoundError:
            raise ExternalCommandFailure(
                program=argv[0],
                arguments=tuple(argv[1:]),
                exit_code=127,
                output=f"{argv[0]}: command not found",
            ) from None
