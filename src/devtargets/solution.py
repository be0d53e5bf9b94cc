# solution.py
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List

PROJECT_GLOB = "*.csproj"
MAX_PROJECT_DEPTH = 2  # subdirectory levels searched below the root


@dataclass(frozen=True)
class SolutionFilter:
    """
    A solution filter: the full solution plus the projects to load from it.

    Serialised as indented camelCase JSON:
        {"solution": {"path": "../App.slnx", "projects": ["src/App/App.csproj"]}}
    """
    solution_path: str
    projects: tuple[str, ...]

    def to_dict(self) -> dict:
        return {"solution": {"path": self.solution_path, "projects": list(self.projects)}}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: dict) -> SolutionFilter:
        try:
            solution = data["solution"]
            return cls(solution_path=solution["path"], projects=tuple(solution["projects"]))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed solution filter: {e}") from e

    @classmethod
    def from_json(cls, text: str) -> SolutionFilter:
        return cls.from_dict(json.loads(text))

    def write(self, path: str | Path) -> Path:
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(self.to_json() + "\n", encoding="utf-8")
        return out

    @classmethod
    def read(cls, path: str | Path) -> SolutionFilter:
        return cls.from_json(Path(path).read_text(encoding="utf-8"))


def discover_projects(root: str | Path, exclude: str | None = None) -> List[str]:
    """
    Project files up to MAX_PROJECT_DEPTH directories below `root`.

    Returns sorted POSIX paths relative to `root`. A project whose file stem
    equals `exclude` (the runner's own project) is left out.
    """
    root_p = Path(root)
    found: List[str] = []
    for depth in range(MAX_PROJECT_DEPTH + 1):
        pattern = "/".join(["*"] * depth + [PROJECT_GLOB])
        for path in root_p.glob(pattern):
            if not path.is_file():
                continue
            if exclude is not None and path.stem == exclude:
                continue
            found.append(path.relative_to(root_p).as_posix())
    return sorted(found)


def build_solution_filter(root: str | Path, solution_name: str, exclude: str | None = None) -> SolutionFilter:
    # The filter lives in artifacts/, so the solution path is relative to it.
    return SolutionFilter(
        solution_path=f"../{solution_name}.slnx",
        projects=tuple(discover_projects(root, exclude=exclude)),
    )
