# git.py
# Small, focused wrapper around the Git CLI.
# Targets ask this module for repository facts instead of invoking git themselves.

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..shell import CommandRunner


def _git(args: list[str], runner: Optional[CommandRunner] = None, cwd: Optional[str | Path] = None) -> str:
    """
    Execute a git command and return its stdout as a clean string.

    Args:
        args: List of git arguments (e.g. ["rev-parse", "HEAD"])
        runner: CommandRunner to use; a fresh one when omitted
        cwd: Optional working directory in which to run the git command.

    Returns:
        Stdout from the git command with surrounding whitespace removed.

    Raises:
        ExternalCommandFailure: git exited nonzero or is not installed.
    """
    return (runner or CommandRunner()).read("git", args, cwd=cwd)


def head_sha(runner: Optional[CommandRunner] = None, cwd: Optional[str | Path] = None) -> str:
    """
    Return the full SHA of the current HEAD commit.

    The coverage report is tagged with it so a report can be traced back to
    the sources it measured.
    """
    # rev-parse prints a trailing newline; _git strips it
    return _git(["rev-parse", "HEAD"], runner, cwd)
