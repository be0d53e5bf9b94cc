# environment.py
from __future__ import annotations

import os
from typing import Optional

TRUTHY_VALUES = frozenset({"1", "on", "true", "yes"})


class InvalidArgument(ValueError):
    """Raised when a setting is constructed from malformed input."""


class EnvironmentSetting:
    """
    A named value read from the process environment.

    The variable is read once, on first access to `value`. An unset or empty
    variable falls back to `default`, and to "" when there is no default.
    """

    _UNSET = object()

    def __init__(self, name: str, default: Optional[str] = None):
        if not name:
            raise InvalidArgument("EnvironmentSetting name must be a non-empty string")
        if default is not None and not default:
            raise InvalidArgument(f"EnvironmentSetting {name!r}: default must be non-empty when given")
        self.name = name
        self.default = default
        self._value = self._UNSET

    @property
    def value(self) -> str:
        if self._value is self._UNSET:
            self._value = os.environ.get(self.name) or self.default or ""
        return self._value

    @property
    def is_truthy(self) -> bool:
        return self.value.lower() in TRUTHY_VALUES

    def __repr__(self) -> str:
        return f"EnvironmentSetting({self.name!r}, default={self.default!r})"
