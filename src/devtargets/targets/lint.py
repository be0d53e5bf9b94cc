# targets/lint.py
from __future__ import annotations

import shutil
from pathlib import Path

from .. import paths
from ..config import Settings
from ..dsl import target
from ..model import SimpleTarget
from ..shell import CommandRunner
from . import keys

CONTAINER_WORKDIR = "/tmp/lint"
REPORTS_DIR = "megalinter-reports"


def lint_args(root: Path, image: str, settings: Settings) -> list[str]:
    """Container runtime arguments for one MegaLinter run over `root`."""
    args = [
        "run",
        "--rm",
        "--volume", f"{root.resolve()}:{CONTAINER_WORKDIR}:rw",
    ]
    if settings.local_lint:
        args.extend(["--env", "APPLY_FIXES=all"])
    args.append(image)
    return args


def lint_target(
    image: str,
    settings: Settings,
    runner: CommandRunner,
    root: str | Path | None = None,
) -> SimpleTarget:
    root_p = Path(root) if root is not None else Path.cwd()

    def run_lint() -> None:
        runner.run(settings.container_runtime, lint_args(root_p, image, settings), cwd=root_p)

        reports = root_p / REPORTS_DIR
        results = root_p / paths.LINT_RESULTS
        if not reports.is_dir():
            raise FileNotFoundError(f"Linter finished without writing {reports}")
        if results.exists():
            shutil.rmtree(results)
        results.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(reports), str(results))

    return target(
        keys.LINT,
        run_lint,
        description="Flags stylistic and functional issues using static code analysis tools.",
    )
