"""Resolve projects and environments by name.

Names are matched exactly (case-sensitive) and the first match in list order
wins. Uniqueness is not enforced when the state is loaded.
"""

from __future__ import annotations

from goship.exceptions import EnvironmentNotFoundError, ProjectNotFoundError
from goship.state.models import Environment, Project


def project_from_name(projects: list[Project], project_name: str) -> Project:
    for project in projects:
        if project.name == project_name:
            return project
    raise ProjectNotFoundError(project_name)


def environment_from_name(
    projects: list[Project], project_name: str, environment_name: str
) -> Environment:
    """Find an environment by name under the project with the given name.

    Raises ProjectNotFoundError if the project is missing and
    EnvironmentNotFoundError if the project has no such environment.
    """
    project = project_from_name(projects, project_name)
    for environment in project.environments:
        if environment.name == environment_name:
            return environment
    raise EnvironmentNotFoundError(environment_name)
