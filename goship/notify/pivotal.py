"""Pivotal Tracker comment posting.

Best effort: failures are logged and never raised, so one unreachable story
cannot fail a deployment.
"""

from __future__ import annotations

import logging

import requests

from goship.state.models import PivotalConfiguration

logger = logging.getLogger(__name__)

PIVOTAL_API = "https://www.pivotaltracker.com/services/v5"
PIVOTAL_COMMENT_URL = PIVOTAL_API + "/projects/{project}/stories/{story}/comments"

# Shared across notification threads for connection pooling.
_session = requests.Session()


def post_pivotal_comment(
    ticket_id: str,
    message: str,
    pivotal: PivotalConfiguration,
    session: requests.Session | None = None,
) -> Exception | None:
    """Add a comment to a Pivotal story.

    The text goes in the query string while the request declares a JSON
    content type; the tracker accepts this combination and existing
    deployments depend on it.

    Returns the transport error, if any, after logging it. A non-200 response
    is logged as a warning and is not an error.
    """
    http = session or _session
    url = PIVOTAL_COMMENT_URL.format(project=pivotal.project, story=ticket_id)
    headers = {
        "Content-Type": "application/json",
        "X-TrackerToken": pivotal.token,
    }
    try:
        resp = http.post(url, params={"text": message}, headers=headers, timeout=10)
    except requests.RequestException as e:
        logger.error(f"Could not post comment to Pivotal story {ticket_id}: {e}")
        return e

    if resp.status_code != requests.codes.ok:
        logger.warning(
            f"Non-200 response from Pivotal API for story {ticket_id}: "
            f"{resp.status_code} {resp.text}"
        )
    return None
