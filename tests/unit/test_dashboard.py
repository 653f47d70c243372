"""Tests for one dashboard refresh and the polling loop."""

from __future__ import annotations

import io
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from rich.console import Console

from gitlab_todo.dashboard import run_tick, watch
from gitlab_todo.exceptions import GitLabApiError, UserNotFoundError

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
ALICE = {"id": 1, "username": "alice", "name": "Alice"}


class _StopLoop(Exception):
    pass


def _mock_gitlab(
    router, mr_payload, *, approvals_status: int = 200, include_user_lookup: bool = True
) -> None:
    """Alice reviews !1, is assigned !2 (on main) and authored !3; !1 is also assigned."""
    reviewing = mr_payload(1, iid=1, reviewers=[ALICE], updated_at="2024-05-31T12:00:00Z")
    assigned = mr_payload(2, iid=2, assignees=[ALICE], target_branch="main")
    authored = mr_payload(3, iid=3, author=ALICE)

    def merge_requests(request: httpx.Request) -> httpx.Response:
        params = request.url.params
        if "reviewer_username" in params:
            return httpx.Response(200, json=[reviewing])
        if "assignee_username" in params:
            return httpx.Response(200, json=[assigned, reviewing])
        return httpx.Response(200, json=[authored])

    if include_user_lookup:
        router.get("/users").mock(return_value=httpx.Response(200, json=[ALICE]))
    router.get("/merge_requests").mock(side_effect=merge_requests)
    router.get("/users/1/events").mock(return_value=httpx.Response(200, json=[]))
    for iid in (1, 2, 3):
        router.get(f"/projects/10/merge_requests/{iid}/approvals").mock(
            return_value=httpx.Response(
                approvals_status, json={"approvals_left": 1, "approved_by": []}
            )
        )


class TestRunTick:
    async def test_ranks_deduplicated_merge_requests(self, client, mock_api, viewer, mr_payload):
        _mock_gitlab(mock_api, mr_payload, include_user_lookup=False)

        ranked = await run_tick(client, viewer, now=NOW)

        # !2: assignee 5 + main 2; !1: reviewer 1; !3: author 1
        assert [(r.merge_request.id, r.score) for r in ranked] == [(2, 7), (1, 1), (3, 1)]

    async def test_failed_approval_fails_tick(self, client, mock_api, viewer, mr_payload):
        _mock_gitlab(mock_api, mr_payload, approvals_status=500, include_user_lookup=False)
        with pytest.raises(GitLabApiError):
            await run_tick(client, viewer, now=NOW)

    async def test_nothing_found(self, client, mock_api, viewer):
        mock_api.get("/merge_requests").mock(return_value=httpx.Response(200, json=[]))
        mock_api.get("/users/1/events").mock(return_value=httpx.Response(200, json=[]))
        assert await run_tick(client, viewer, now=NOW) == []


class TestWatch:
    async def test_once_renders_table(self, config, mock_api, mr_payload):
        _mock_gitlab(mock_api, mr_payload)
        out = io.StringIO()

        await watch(config, "alice", once=True, console=Console(file=out, force_terminal=False))

        lines = out.getvalue().splitlines()
        assert len(lines) == 3
        assert lines[0].startswith("group/project!2")

    async def test_unknown_user_is_fatal(self, config, mock_api):
        mock_api.get("/users").mock(return_value=httpx.Response(200, json=[]))
        with pytest.raises(UserNotFoundError):
            await watch(config, "ghost", once=True, console=Console(file=io.StringIO()))

    async def test_fail_fast_propagates(self, config, mock_api, mr_payload):
        _mock_gitlab(mock_api, mr_payload, approvals_status=503)
        with pytest.raises(GitLabApiError):
            await watch(
                config, "alice", once=True, fail_fast=True, console=Console(file=io.StringIO())
            )

    async def test_once_failed_tick_propagates(self, config, mock_api, mr_payload):
        _mock_gitlab(mock_api, mr_payload, approvals_status=503)
        out = io.StringIO()

        with pytest.raises(GitLabApiError):
            await watch(
                config, "alice", once=True, console=Console(file=out, force_terminal=False)
            )

        assert out.getvalue() == ""

    async def test_failed_tick_is_logged_and_not_rendered(
        self, config, mock_api, mr_payload, caplog
    ):
        _mock_gitlab(mock_api, mr_payload, approvals_status=503)
        out = io.StringIO()
        sleep = AsyncMock(side_effect=_StopLoop())

        with patch("gitlab_todo.dashboard.asyncio.sleep", sleep), pytest.raises(_StopLoop):
            await watch(
                config, "alice", interval=7, console=Console(file=out, force_terminal=False)
            )

        assert out.getvalue() == ""
        assert "refresh failed" in caplog.text
        sleep.assert_awaited_once_with(7)

    async def test_malformed_payload_is_a_failed_tick(self, config, mock_api, caplog):
        mock_api.get("/users").mock(return_value=httpx.Response(200, json=[ALICE]))
        mock_api.get("/merge_requests").mock(
            return_value=httpx.Response(200, json=[{"id": 1, "title": "no other fields"}])
        )
        mock_api.get("/users/1/events").mock(return_value=httpx.Response(200, json=[]))
        out = io.StringIO()
        sleep = AsyncMock(side_effect=_StopLoop())

        with patch("gitlab_todo.dashboard.asyncio.sleep", sleep), pytest.raises(_StopLoop):
            await watch(config, "alice", console=Console(file=out, force_terminal=False))

        assert out.getvalue() == ""
        assert "refresh failed" in caplog.text

    async def test_loop_sleeps_between_ticks(self, config, mock_api, mr_payload):
        _mock_gitlab(mock_api, mr_payload)
        out = io.StringIO()
        sleep = AsyncMock(side_effect=[None, _StopLoop()])

        with patch("gitlab_todo.dashboard.asyncio.sleep", sleep), pytest.raises(_StopLoop):
            await watch(
                config, "alice", interval=12, console=Console(file=out, force_terminal=False)
            )

        assert sleep.await_count == 2
        sleep.assert_awaited_with(12)
        assert len(out.getvalue().splitlines()) == 6
        user_lookups = [c for c in mock_api.calls if c.request.url.path.endswith("/users")]
        assert len(user_lookups) == 1
