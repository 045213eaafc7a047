"""Errors raised while reading codetally settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """Base class for unusable settings."""


class MissingConfigurationError(ConfigurationError):
    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(sorted(names))
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")


class InvalidConfigurationValue(ConfigurationError):
    """An environment override is set but cannot be parsed."""

    def __init__(self, name: str, value: str, expected: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid {expected} for {name}: {value!r}")
