from __future__ import annotations

import pytest

from devtargets.config import Settings
from devtargets.environment import EnvironmentSetting, InvalidArgument


def test_unset_without_default_is_empty_and_falsy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("X", raising=False)
    setting = EnvironmentSetting("X")
    assert setting.value == ""
    assert setting.is_truthy is False


def test_unset_uses_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BUILD_CONFIGURATION", raising=False)
    assert EnvironmentSetting("BUILD_CONFIGURATION", "Release").value == "Release"


def test_empty_value_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTAINER_RUNTIME", "")
    assert EnvironmentSetting("CONTAINER_RUNTIME", "podman").value == "podman"


def test_environment_value_wins_over_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTAINER_RUNTIME", "docker")
    assert EnvironmentSetting("CONTAINER_RUNTIME", "podman").value == "docker"


@pytest.mark.parametrize("raw", ["1", "on", "ON", "true", "True", "yes", "YES", "yEs"])
def test_truthy_tokens_any_case(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("LOCAL_BUILD", raw)
    assert EnvironmentSetting("LOCAL_BUILD").is_truthy is True


@pytest.mark.parametrize("raw", ["0", "off", "false", "no", "y", "enabled", " yes"])
def test_other_values_are_not_truthy(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("LOCAL_BUILD", raw)
    assert EnvironmentSetting("LOCAL_BUILD").is_truthy is False


def test_value_is_read_once(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("X", "first")
    setting = EnvironmentSetting("X")
    assert setting.value == "first"
    monkeypatch.setenv("X", "second")
    assert setting.value == "first"


def test_empty_name_is_rejected() -> None:
    with pytest.raises(InvalidArgument):
        EnvironmentSetting("")


def test_empty_explicit_default_is_rejected() -> None:
    with pytest.raises(InvalidArgument):
        EnvironmentSetting("X", "")


def test_invalid_argument_is_a_value_error() -> None:
    assert issubclass(InvalidArgument, ValueError)


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BUILD_CONFIGURATION", "Debug")
    monkeypatch.delenv("CONTAINER_RUNTIME", raising=False)
    monkeypatch.setenv("LOCAL_BUILD", "yes")
    monkeypatch.delenv("LOCAL_LINT", raising=False)

    settings = Settings.from_environment()

    assert settings == Settings(
        build_configuration="Debug",
        container_runtime="podman",
        local_build=True,
        local_lint=False,
    )
