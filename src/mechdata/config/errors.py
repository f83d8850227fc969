"""Errors raised while reading mechdata settings from the environment."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """A setting exists but cannot be used."""


class MissingConfigurationError(ConfigurationError):
    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(sorted(names))
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")


class InvalidConfigurationValueError(ConfigurationError):
    """An environment variable holds a value of the wrong shape.

    ``name`` is the variable, ``raw`` the text found in the environment.
    """

    def __init__(self, name: str, raw: str, expected: str) -> None:
        self.name = name
        self.raw = raw
        super().__init__(f"{name} must be {expected}, got {raw!r}")
