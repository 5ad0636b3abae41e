"""Shared test fixtures for goship."""

from __future__ import annotations

from concurrent.futures import Future
from unittest.mock import MagicMock

import pytest

from goship.state.models import Config, Environment, Host, PivotalConfiguration, Project


class ImmediateExecutor:
    """Runs submitted work on the calling thread and records each call."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def submit(self, fn, *args, **kwargs) -> Future:
        self.calls.append(args)
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


@pytest.fixture
def executor() -> ImmediateExecutor:
    return ImmediateExecutor()


@pytest.fixture
def pivotal() -> PivotalConfiguration:
    return PivotalConfiguration(project="1234567", token="tracker-token")


@pytest.fixture
def github_client() -> MagicMock:
    client = MagicMock()
    client.compare_commit_messages.return_value = [
        "[Fixes #10] a",
        "misc",
        "[foo #10] dup",
        "[bar #22] b",
    ]
    return client


@pytest.fixture
def production() -> Environment:
    return Environment(
        name="production",
        deploy="prod",
        repo_path="/srv/webapp",
        branch="main",
        latest_github_commit="abcdef1234567",
        hosts=[
            Host(uri="web1.example.com", latest_commit="abcdef1234567"),
            Host(uri="web2.example.com", latest_commit="1234567abcdef"),
        ],
    )


@pytest.fixture
def staging() -> Environment:
    return Environment(name="staging", branch="develop", hosts=[Host(uri="stg.example.com")])


@pytest.fixture
def webapp(production: Environment, staging: Environment) -> Project:
    return Project(
        name="webapp",
        repo_name="webapp",
        repo_owner="acme",
        github_url="https://github.com/acme/webapp",
        environments=[production, staging],
    )


@pytest.fixture
def sample_config(webapp: Project, pivotal: PivotalConfiguration) -> Config:
    return Config(
        projects=[webapp, Project(name="api", repo_name="api", repo_owner="acme")],
        deploy_user="deployer",
        notify="#deploys",
        pivotal=pivotal,
    )


@pytest.fixture
def sample_config_dict() -> dict:
    return {
        "deploy_user": "deployer",
        "notify": "#deploys",
        "pivotal": {"project": 1234567, "token": "tracker-token"},
        "projects": [
            {
                "name": "webapp",
                "repo_owner": "acme",
                "repo_name": "webapp",
                "github_url": "https://github.com/acme/webapp/",
                "environments": [
                    {
                        "name": "production",
                        "branch": "main",
                        "is_locked": True,
                        "latest_github_commit": "abcdef1234567",
                        "hosts": [
                            {"uri": "web1.example.com", "latest_commit": "abcdef1234567"},
                            {"uri": "web2.example.com", "latest_commit": "1234567abcdef"},
                        ],
                    }
                ],
            }
        ],
    }
