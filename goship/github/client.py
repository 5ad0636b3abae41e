"""Thin wrapper around PyGithub for authenticated GitHub API access."""

from __future__ import annotations

from github import Auth, Github
from github.Repository import Repository


class GitHubClient:
    """Authenticated GitHub client shared across the configured projects.

    Usage:
        client = GitHubClient(token="ghp_...")
        messages = client.compare_commit_messages("acme", "webapp", base="abc", head="def")
    """

    def __init__(self, token: str) -> None:
        self._gh = Github(auth=Auth.Token(token))
        self._repos: dict[str, Repository] = {}

    def repo(self, owner: str, name: str) -> Repository:
        full_name = f"{owner}/{name}"
        if full_name not in self._repos:
            self._repos[full_name] = self._gh.get_repo(full_name)
        return self._repos[full_name]

    def compare_commit_messages(
        self, owner: str, name: str, base: str, head: str
    ) -> list[str]:
        """Messages of the commits reachable from head but not from base.

        Order is whatever GitHub's compare API returns. GithubException is
        not caught.
        """
        comparison = self.repo(owner, name).compare(base, head)
        return [commit.commit.message or "" for commit in comparison.commits]

    def close(self) -> None:
        self._gh.close()
