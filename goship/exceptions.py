"""Exceptions raised by goship.

Transport failures are not wrapped: GitHub errors surface as
``github.GithubException`` and Pivotal errors as ``requests.RequestException``.
"""

from __future__ import annotations


class GoshipError(Exception):
    """Base class for goship errors."""


class NotFoundError(GoshipError):
    """A project or environment name has no match."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class ProjectNotFoundError(NotFoundError):
    def __init__(self, name: str) -> None:
        super().__init__(name, f"No project found: {name}")


class EnvironmentNotFoundError(NotFoundError):
    def __init__(self, name: str) -> None:
        super().__init__(name, f"No environment found: {name}")


class ConfigError(GoshipError):
    """The deployment state document could not be loaded."""
