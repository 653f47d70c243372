"""One refresh of the dashboard, and the polling loop around it."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from pydantic import ValidationError
from rich.console import Console

from .aggregate import collect, enrich
from .client import GitLabClient
from .config import GitLabConfig
from .exceptions import GitLabError
from .models.common import User
from .priority import RankedMergeRequest, rank
from .render import render
from .sources import find_viewer

logger = logging.getLogger(__name__)


async def run_tick(
    client: GitLabClient, viewer: User, now: datetime | None = None
) -> list[RankedMergeRequest]:
    """Fetch, deduplicate, enrich and rank everything relevant to *viewer*.

    Nothing is cached between calls. Any failed request fails the whole tick.
    """
    mrs = await collect(client, viewer, now)
    pairs = await enrich(client, mrs)
    ranked = rank(pairs, viewer)
    logger.debug("tick ranked %d merge requests", len(ranked))
    return ranked


async def watch(
    config: GitLabConfig,
    username: str,
    *,
    interval: float | None = None,
    once: bool = False,
    fail_fast: bool = False,
    console: Console | None = None,
) -> None:
    """Resolve *username*, then redraw the table every *interval* seconds.

    A failed tick is logged and skipped, leaving the previous table on screen.
    With *fail_fast* or *once* the error propagates instead.
    """
    console = console or Console()
    interval = config.interval if interval is None else interval

    async with GitLabClient(config) as client:
        viewer = await find_viewer(client, username)
        logger.info("watching merge requests for %s (id %d)", viewer.username, viewer.id)

        while True:
            try:
                ranked = await run_tick(client, viewer)
            except (GitLabError, ValidationError):
                if fail_fast or once:
                    raise
                logger.exception("refresh failed; retrying in %ss", interval)
            else:
                render(console, ranked, viewer)

            if once:
                return
            await asyncio.sleep(interval)
