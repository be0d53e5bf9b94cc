from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest

from devtargets.shell import CommandRunner, ExternalCommandFailure, _item_output
from devtargets.ui.console import Console, set_console


@dataclass
class RecordedCommand:
    program: str
    args: list[str]
    cwd: Optional[Path] = None


@dataclass
class RecordingCommandRunner(CommandRunner):
    """
    CommandRunner that records invocations instead of starting processes.

    `fail_when(predicate, exit_code)` makes matching commands fail the way a
    real tool would. `reads` maps a program name to the stdout `read` returns.
    """
    calls: list[RecordedCommand] = field(default_factory=list)
    reads: dict[str, str] = field(default_factory=dict)
    _failures: list[tuple[Callable[[RecordedCommand], bool], int]] = field(default_factory=list)

    def fail_when(self, predicate: Callable[[RecordedCommand], bool], exit_code: int = 1) -> None:
        self._failures.append((predicate, exit_code))

    def _record(self, program: str, args: Sequence[str], cwd) -> RecordedCommand:
        call = RecordedCommand(program, list(args), Path(cwd) if cwd is not None else None)
        self.calls.append(call)
        for predicate, exit_code in self._failures:
            if predicate(call):
                raise ExternalCommandFailure(program=program, arguments=tuple(args), exit_code=exit_code)
        return call

    def run(self, program, args, *, cwd=None) -> None:
        self._record(program, args, cwd)
        buffer = _item_output.get()
        if buffer is not None:
            buffer.write(f"ran {program} {' '.join(args)}\n")

    def read(self, program, args, *, cwd=None) -> str:
        self._record(program, args, cwd)
        return self.reads.get(program, "")


@pytest.fixture
def recorder() -> RecordingCommandRunner:
    return RecordingCommandRunner()


@pytest.fixture
def console() -> Console:
    """A console writing to in-memory streams, installed as the global console."""
    c = Console(debug=False, stream=io.StringIO(), err_stream=io.StringIO())
    set_console(c)
    yield c
    set_console(Console())
