# config.py
from __future__ import annotations

from dataclasses import dataclass

from .environment import EnvironmentSetting


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and passed to targets."""
    build_configuration: str = "Release"
    container_runtime: str = "podman"
    local_build: bool = False  # suppresses /warnaserror
    local_lint: bool = False   # asks the linter to apply fixes

    @classmethod
    def from_environment(cls) -> Settings:
        return cls(
            build_configuration=EnvironmentSetting("BUILD_CONFIGURATION", "Release").value,
            container_runtime=EnvironmentSetting("CONTAINER_RUNTIME", "podman").value,
            local_build=EnvironmentSetting("LOCAL_BUILD").is_truthy,
            local_lint=EnvironmentSetting("LOCAL_LINT").is_truthy,
        )
