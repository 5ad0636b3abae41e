"""Process settings for goship.

Settings.load() reads environment variables (GOSHIP_GITHUB_TOKEN, etc.). A
.env file in the current directory fills in variables that are not already
set in the environment. The deployment state itself lives in the JSON file
named by GOSHIP_CONFIG, see goship.state.loader.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True))

DEFAULT_CONFIG_PATH = Path("goship.json")
DEFAULT_TIMEZONE = "Asia/Tokyo"
DEFAULT_NOTIFY_WORKERS = 8


@dataclass
class Settings:
    github_token: str = ""
    config_path: Path = DEFAULT_CONFIG_PATH
    timezone: str = DEFAULT_TIMEZONE
    notify_workers: int = DEFAULT_NOTIFY_WORKERS

    @classmethod
    def load(cls) -> Settings:
        return cls(
            # GITHUB_API_TOKEN is the name older deployments export
            github_token=os.getenv("GOSHIP_GITHUB_TOKEN") or os.getenv("GITHUB_API_TOKEN", ""),
            config_path=Path(os.getenv("GOSHIP_CONFIG", str(DEFAULT_CONFIG_PATH))),
            timezone=os.getenv("GOSHIP_TIMEZONE", DEFAULT_TIMEZONE),
            notify_workers=_int_env("GOSHIP_NOTIFY_WORKERS", DEFAULT_NOTIFY_WORKERS),
        )

    def validate(self) -> list[str]:
        """Return a list of missing config issues."""
        issues = []
        if not self.github_token:
            issues.append("GitHub token not set (GOSHIP_GITHUB_TOKEN)")
        if self.notify_workers < 1:
            issues.append("GOSHIP_NOTIFY_WORKERS must be at least 1")
        return issues


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default
