"""Merge the relevance queries into one collection and attach approval state."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Mapping
from datetime import datetime
from typing import Any

from .client import GitLabClient
from .models.approvals import ApprovalInfo
from .models.common import User
from .models.merge_requests import MergeRequest
from .sources import fetch_assigned, fetch_authored, fetch_branch_related, fetch_reviewing

logger = logging.getLogger(__name__)


def aggregate(*sources: Mapping[int, MergeRequest]) -> dict[int, MergeRequest]:
    """Union the sources by merge request id.

    Later sources win when an id appears more than once; the resulting id set
    is always the union of every source's ids.
    """
    merged: dict[int, MergeRequest] = {}
    for source in sources:
        merged.update(source)
    return merged


async def gather_all(*aws: Awaitable[Any]) -> list[Any]:
    """Run *aws* concurrently; on the first failure cancel and reap the rest."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def collect(
    client: GitLabClient, viewer: User, now: datetime | None = None
) -> dict[int, MergeRequest]:
    branch_related, reviewing, assigned, authored = await gather_all(
        fetch_branch_related(client, viewer),
        fetch_reviewing(client, viewer, now),
        fetch_assigned(client, viewer),
        fetch_authored(client, viewer),
    )
    return aggregate(branch_related, reviewing, assigned, authored)


async def fetch_approvals(client: GitLabClient, mr: MergeRequest) -> ApprovalInfo:
    # approvals are addressed by project-local iid, not the global id
    data = await client.get_merge_request_approvals(mr.project_id, mr.iid)
    return ApprovalInfo.model_validate(data)


async def enrich(
    client: GitLabClient, mrs: Mapping[int, MergeRequest]
) -> list[tuple[MergeRequest, ApprovalInfo]]:
    """Fetch approval state for every merge request; one failure fails them all."""
    merge_requests = list(mrs.values())
    approvals = await gather_all(*(fetch_approvals(client, mr) for mr in merge_requests))
    logger.debug("fetched approvals for %d merge requests", len(approvals))
    return list(zip(merge_requests, approvals, strict=True))
