"""Load deployment state from a JSON document.

Expected shape (snake_case keys, everything but names optional):

    {
      "deploy_user": "deployer",
      "notify": "#deploys",
      "pivotal": {"project": "123456", "token": "..."},
      "projects": [
        {
          "name": "webapp",
          "repo_owner": "acme",
          "repo_name": "webapp",
          "github_url": "https://github.com/acme/webapp",
          "environments": [
            {
              "name": "production",
              "branch": "main",
              "latest_github_commit": "...",
              "hosts": [{"uri": "web1.example.com", "latest_commit": "..."}]
            }
          ]
        }
      ]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from goship.exceptions import ConfigError
from goship.state.models import Config, Environment, Host, PivotalConfiguration, Project

logger = logging.getLogger(__name__)


def load_config(path: Path) -> Config:
    """Read and parse a deployment state file."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    config = config_from_dict(data)
    for name in config.duplicate_names():
        logger.warning(f"Duplicate name in {path}: {name} (first match wins)")
    return config


def config_from_dict(data: dict[str, Any]) -> Config:
    if not isinstance(data, dict):
        raise ConfigError("Config document must be a JSON object")

    pivotal = None
    if data.get("pivotal"):
        piv = data["pivotal"]
        try:
            project, token = piv["project"], piv["token"]
        except (KeyError, TypeError) as e:
            raise ConfigError(f"Pivotal config needs 'project' and 'token': {e}") from e
        if not isinstance(project, (str, int)) or not isinstance(token, str):
            raise ConfigError("Pivotal 'project' must be a string or number and 'token' a string")
        pivotal = PivotalConfiguration(project=str(project), token=token)

    return Config(
        projects=[_project_from_dict(p) for p in _list(data, "projects", "config")],
        deploy_user=_str(data, "deploy_user", "config"),
        notify=_str(data, "notify", "config"),
        pivotal=pivotal,
    )


def _project_from_dict(data: dict[str, Any]) -> Project:
    name = _require_name(data, "project")
    where = f"project '{name}'"
    return Project(
        name=name,
        repo_name=_str(data, "repo_name", where),
        repo_owner=_str(data, "repo_owner", where),
        environments=[
            _environment_from_dict(e) for e in _list(data, "environments", where)
        ],
        travis_token=_str(data, "travis_token", where),
        github_url=_str(data, "github_url", where).rstrip("/"),
    )


def _environment_from_dict(data: dict[str, Any]) -> Environment:
    name = _require_name(data, "environment")
    where = f"environment '{name}'"
    hosts: list[Host] = []
    for h in _list(data, "hosts", where):
        if not isinstance(h, dict) or "uri" not in h:
            raise ConfigError(f"Host in {where} is missing 'uri'")
        host_where = f"host in {where}"
        hosts.append(
            Host(uri=_str(h, "uri", host_where), latest_commit=_str(h, "latest_commit", host_where))
        )

    is_locked = data.get("is_locked", False)
    if not isinstance(is_locked, bool):
        raise ConfigError(f"'is_locked' in {where} must be true or false")

    return Environment(
        name=name,
        deploy=_str(data, "deploy", where),
        repo_path=_str(data, "repo_path", where),
        hosts=hosts,
        branch=_str(data, "branch", where),
        revision=_str(data, "revision", where),
        comment=_str(data, "comment", where),
        is_locked=is_locked,
        latest_github_commit=_str(data, "latest_github_commit", where),
    )


def _require_name(data: Any, kind: str) -> str:
    if not isinstance(data, dict) or not data.get("name"):
        raise ConfigError(f"Every {kind} needs a 'name'")
    if not isinstance(data["name"], str):
        raise ConfigError(f"The name of a {kind} must be a string")
    return data["name"]


def _str(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key, "")
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' in {where} must be a string")
    return value


def _list(data: dict[str, Any], key: str, where: str) -> list[Any]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' in {where} must be a list")
    return value
