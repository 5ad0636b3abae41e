"""Find the Pivotal ticket ids mentioned in a range of commits.

Commit messages reference a story with a bracketed marker, e.g.
"[Fixes #12345] Handle empty carts". Only the first marker in each message
counts.
"""

from __future__ import annotations

import logging
import re

from goship.github.client import GitHubClient

logger = logging.getLogger(__name__)

TICKET_ID_PATTERN = re.compile(r"\[.*#(\d+)\].*")


def _append_if_unique(items: list[str], item: str) -> None:
    if item not in items:
        items.append(item)


def extract_ticket_ids(messages: list[str]) -> list[str]:
    """Unique ticket ids in order of first appearance."""
    ticket_ids: list[str] = []
    for message in messages:
        match = TICKET_ID_PATTERN.search(message)
        if match:
            _append_if_unique(ticket_ids, match.group(1))
    return ticket_ids


def get_ticket_ids_from_commits(
    client: GitHubClient, owner: str, repo_name: str, latest: str, current: str
) -> list[str]:
    """Ticket ids from the commits between the current and latest revisions.

    Args:
        latest: The newly deployed revision (compare head).
        current: The previously deployed revision (compare base).

    Errors from the GitHub API propagate to the caller.
    """
    messages = client.compare_commit_messages(owner, repo_name, base=current, head=latest)
    ticket_ids = extract_ticket_ids(messages)
    logger.debug(
        f"Found {len(ticket_ids)} ticket ids in {len(messages)} commits "
        f"for {owner}/{repo_name} {current}...{latest}"
    )
    return ticket_ids
