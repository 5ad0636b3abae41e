"""Deployment state: projects, their environments and the hosts behind them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

SHORT_HASH_LENGTH = 7


@runtime_checkable
class Column(Protocol):
    """An extra dashboard column contributed by a plugin.

    render_header() returns markup for a <th> element, render_detail() for
    the matching <td>. Either may raise.
    """

    def render_header(self) -> str: ...

    def render_detail(self) -> str: ...


@runtime_checkable
class KeyValueStore(Protocol):
    """The subset of the etcd client used to persist environment state."""

    def get(self, key: str, sort: bool = False, recursive: bool = False) -> Any: ...

    def set(self, key: str, value: str, ttl: int = 0) -> Any: ...


@dataclass
class Host:
    uri: str
    latest_commit: str = ""  # what is actually running, set by a status refresh

    def latest_github_commit_url(self, project: Project) -> str:
        return f"{project.github_url}/commit/{self.latest_commit}"

    def latest_github_diff_url(self, project: Project, environment: Environment) -> str:
        """Compare URL between this host and the branch head, "" when up to date."""
        if self.latest_commit == environment.latest_github_commit:
            return ""
        return (
            f"{project.github_url}/compare/"
            f"{self.latest_commit}...{environment.latest_github_commit}"
        )

    def latest_short_commit_hash(self) -> str:
        return self.latest_commit[:SHORT_HASH_LENGTH]


@dataclass
class Environment:
    name: str
    deploy: str = ""  # deploy target descriptor
    repo_path: str = ""
    hosts: list[Host] = field(default_factory=list)
    branch: str = ""
    revision: str = ""
    comment: str = ""
    is_locked: bool = False  # advisory only, never enforced here
    latest_github_commit: str = ""  # head of the tracked branch on GitHub


@dataclass
class Project:
    name: str
    repo_name: str = ""
    repo_owner: str = ""
    environments: list[Environment] = field(default_factory=list)
    travis_token: str = ""
    github_url: str = ""
    plugin_columns: list[Column] = field(default_factory=list)

    def add_plugin_column(self, column: Column) -> None:
        self.plugin_columns.append(column)


@dataclass(frozen=True)
class PivotalConfiguration:
    project: str
    token: str


@dataclass
class Config:
    projects: list[Project] = field(default_factory=list)
    deploy_user: str = ""
    notify: str = ""
    pivotal: PivotalConfiguration | None = None

    def duplicate_names(self) -> list[str]:
        """Project names, and "project/environment" pairs, that appear more than once.

        Lookups still resolve to the first match; this only reports the clash.
        """
        seen: set[str] = set()
        duplicates: list[str] = []
        for project in self.projects:
            if project.name in seen and project.name not in duplicates:
                duplicates.append(project.name)
            seen.add(project.name)

            env_seen: set[str] = set()
            for environment in project.environments:
                key = f"{project.name}/{environment.name}"
                if environment.name in env_seen and key not in duplicates:
                    duplicates.append(key)
                env_seen.add(environment.name)
        return duplicates


@dataclass
class HostStatus:
    """Display record for one host, derived fresh from the state tree."""

    uri: str
    latest_commit: str
    github_commit_url: str
    github_diff_url: str
    short_commit_hash: str

    @property
    def up_to_date(self) -> bool:
        return not self.github_diff_url


def host_status(project: Project, environment: Environment, host: Host) -> HostStatus:
    return HostStatus(
        uri=host.uri,
        latest_commit=host.latest_commit,
        github_commit_url=host.latest_github_commit_url(project),
        github_diff_url=host.latest_github_diff_url(project, environment),
        short_commit_hash=host.latest_short_commit_hash(),
    )
