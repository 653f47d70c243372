"""The four relevance queries that find merge requests for one viewer.

Every query returns a mapping from global merge request id to
:class:`MergeRequest`. An empty result is an empty mapping; any API or
validation failure propagates to the caller.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter

from .client import GitLabClient
from .exceptions import UserNotFoundError
from .models.common import User
from .models.events import PushEvent
from .models.merge_requests import MergeRequest

logger = logging.getLogger(__name__)

REVIEW_MAX_AGE_DAYS = 14

_OPEN = {"state": "opened", "scope": "all"}

_merge_requests = TypeAdapter(list[MergeRequest])
_push_events = TypeAdapter(list[PushEvent])
_users = TypeAdapter(list[User])


def by_id(mrs: list[MergeRequest]) -> dict[int, MergeRequest]:
    return {mr.id: mr for mr in mrs}


def is_recent(mr: MergeRequest, now: datetime) -> bool:
    return mr.age_days(now) <= REVIEW_MAX_AGE_DAYS


async def find_viewer(client: GitLabClient, username: str) -> User:
    """Resolve *username* to its account, or raise :class:`UserNotFoundError`."""
    users = _users.validate_python(await client.find_users(username))
    if not users:
        raise UserNotFoundError(username)
    return users[0]


async def _open_merge_requests(client: GitLabClient, **filters: Any) -> list[MergeRequest]:
    data = await client.list_merge_requests({**_OPEN, **filters})
    return _merge_requests.validate_python(data)


async def fetch_reviewing(
    client: GitLabClient, viewer: User, now: datetime | None = None
) -> dict[int, MergeRequest]:
    """Open MRs the viewer is asked to review, updated in the last 14 days."""
    now = now or datetime.now(timezone.utc)
    mrs = await _open_merge_requests(client, reviewer_username=viewer.username)
    recent = [mr for mr in mrs if is_recent(mr, now)]
    logger.debug("reviewing: %d open, %d recent", len(mrs), len(recent))
    return by_id(recent)


async def fetch_assigned(client: GitLabClient, viewer: User) -> dict[int, MergeRequest]:
    mrs = await _open_merge_requests(client, assignee_username=viewer.username)
    logger.debug("assigned: %d", len(mrs))
    return by_id(mrs)


async def fetch_authored(client: GitLabClient, viewer: User) -> dict[int, MergeRequest]:
    mrs = await _open_merge_requests(client, author_username=viewer.username)
    logger.debug("authored: %d", len(mrs))
    return by_id(mrs)


async def fetch_push_events(client: GitLabClient, viewer: User) -> list[PushEvent]:
    data = await client.list_user_events(viewer.id, {"action": "pushed"})
    return _push_events.validate_python(data)


async def fetch_branch_related(client: GitLabClient, viewer: User) -> dict[int, MergeRequest]:
    """Open MRs whose source branch the viewer recently pushed to.

    Pushes without a branch reference (tag pushes, for instance) are skipped.
    Each (project, branch) pair is looked up once.
    """
    pushes = await fetch_push_events(client, viewer)
    branches = list(
        dict.fromkeys((push.project_id, push.branch) for push in pushes if push.branch)
    )

    related: dict[int, MergeRequest] = {}
    for project_id, branch in branches:
        data = await client.list_project_merge_requests(
            project_id, {**_OPEN, "source_branch": branch}
        )
        related.update(by_id(_merge_requests.validate_python(data)))
    logger.debug(
        "branch-related: %d pushes, %d branches, %d MRs", len(pushes), len(branches), len(related)
    )
    return related
