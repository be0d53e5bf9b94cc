# dotnet.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from .config import Settings
from .shell import CommandRunner

DOTNET = "dotnet"


def dotnet_args(command: Sequence[str], settings: Settings, *extra: str) -> list[str]:
    """
    Arguments for a configuration-aware dotnet invocation.

    `command` is the verb plus its target, e.g. ["build", "artifacts/App.slnf"].
    """
    return [
        *command,
        "--configuration", settings.build_configuration,
        "--verbosity", "minimal",
        "--nologo",
        *extra,
    ]


class DotnetCli:
    """The dotnet CLI as the build targets use it."""

    def __init__(self, runner: CommandRunner, settings: Settings, cwd: Optional[Path] = None):
        self.runner = runner
        self.settings = settings
        self.cwd = cwd

    def run(self, command: Sequence[str], *extra: str) -> None:
        self.runner.run(DOTNET, dotnet_args(command, self.settings, *extra), cwd=self.cwd)

    def tool(self, name: str, *args: str) -> None:
        """Run a dotnet local tool (e.g. reportgenerator) without build configuration flags."""
        self.runner.run(DOTNET, [name, *args], cwd=self.cwd)
