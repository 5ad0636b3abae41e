"""Announce deployments on the Pivotal stories they include."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from datetime import datetime, timezone as dt_timezone
from functools import partial
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from goship.config import DEFAULT_NOTIFY_WORKERS, DEFAULT_TIMEZONE
from goship.github.client import GitHubClient
from goship.github.commits import get_ticket_ids_from_commits
from goship.notify.pivotal import post_pivotal_comment
from goship.state.models import PivotalConfiguration

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Labels for the zones deployments are announced in; anything else shows its key.
TIMEZONE_LABELS = {"Asia/Tokyo": "JST", "UTC": "UTC"}

PostComment = Callable[[str, str, PivotalConfiguration], Exception | None]

_executors: dict[int, ThreadPoolExecutor] = {}


def default_executor(max_workers: int = DEFAULT_NOTIFY_WORKERS) -> ThreadPoolExecutor:
    """Process-wide pool for notification posts, one per pool size.

    Pools are created on first use and reused for later calls with the same
    size. Worker threads are joined at interpreter exit, so posts already
    submitted get to finish before a CLI process ends.
    """
    if max_workers not in _executors:
        _executors[max_workers] = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="goship-notify"
        )
    return _executors[max_workers]


def _log_post_failure(ticket_id: str, future: Future) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error(f"Pivotal notification for story {ticket_id} failed: {error!r}")


def deployment_timestamp(
    now: datetime | None = None, timezone: str = DEFAULT_TIMEZONE
) -> str:
    """Format the deployment time, labelled with the zone actually used.

    Falls back to UTC when the zone cannot be loaded.
    """
    now = now or datetime.now(dt_timezone.utc)
    try:
        local = now.astimezone(ZoneInfo(timezone))
        label = TIMEZONE_LABELS.get(timezone, timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Time zone information for {timezone} not found, using UTC")
        local = now.astimezone(dt_timezone.utc)
        label = "UTC"
    return f"{local.strftime(TIMESTAMP_FORMAT)} ({label})"


class Notifier:
    """Posts a "Deployed to ..." comment on every story in a commit range.

    Posts are submitted to the executor and never awaited. Their failures are
    logged, by the transport or by a done-callback for anything it raises, and
    do not reach the caller.
    """

    def __init__(
        self,
        client: GitHubClient,
        executor: Executor | None = None,
        post: PostComment | None = None,
        timezone: str = DEFAULT_TIMEZONE,
    ) -> None:
        self._client = client
        self._executor = executor
        self._post = post or post_pivotal_comment
        self._timezone = timezone

    @property
    def executor(self) -> Executor:
        if self._executor is None:
            self._executor = default_executor()
        return self._executor

    def post_to_pivotal(
        self,
        pivotal: PivotalConfiguration,
        environment: str,
        owner: str,
        repo_name: str,
        latest: str,
        current: str,
    ) -> list[str]:
        """Notify the stories deployed to an environment.

        Args:
            latest: The newly deployed revision.
            current: The revision that was running before.

        Returns the ticket ids that notifications were dispatched for. Raises
        whatever the GitHub comparison raises, before anything is posted.
        """
        timestamp = deployment_timestamp(timezone=self._timezone)
        ticket_ids = get_ticket_ids_from_commits(
            self._client, owner, repo_name, latest, current
        )
        message = f"Deployed to {environment}: {timestamp}"
        for ticket_id in ticket_ids:
            future = self.executor.submit(self._post, ticket_id, message, pivotal)
            future.add_done_callback(partial(_log_post_failure, ticket_id))

        if ticket_ids:
            logger.info(
                f"Dispatched {len(ticket_ids)} Pivotal notifications for "
                f"{owner}/{repo_name} on {environment}"
            )
        return ticket_ids


def post_to_pivotal(
    client: GitHubClient,
    pivotal: PivotalConfiguration,
    environment: str,
    owner: str,
    repo_name: str,
    latest: str,
    current: str,
) -> list[str]:
    """Dispatch notifications using the shared executor and default transport."""
    return Notifier(client).post_to_pivotal(
        pivotal, environment, owner, repo_name, latest, current
    )
