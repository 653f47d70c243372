"""Shared test fixtures for gitlab-todo."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import respx

from gitlab_todo.client import GitLabClient
from gitlab_todo.config import GitLabConfig
from gitlab_todo.models.approvals import ApprovalInfo
from gitlab_todo.models.common import User
from gitlab_todo.models.merge_requests import MergeRequest

TEST_URL = "https://gitlab.example.com"
TEST_TOKEN = "test-token"
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

VIEWER = {"id": 1, "username": "alice", "name": "Alice"}
BOB = {"id": 2, "username": "bob", "name": "Bob"}


@pytest.fixture
def config() -> GitLabConfig:
    return GitLabConfig(url=TEST_URL, token=TEST_TOKEN)


@pytest.fixture
def client(config: GitLabConfig) -> GitLabClient:
    return GitLabClient(config)


@pytest.fixture
def mock_api() -> respx.MockRouter:
    with respx.mock(base_url="https://gitlab.example.com/api/v4") as router:
        yield router


@pytest.fixture
def viewer() -> User:
    return User.model_validate(VIEWER)


@pytest.fixture
def mr_payload() -> Callable[..., dict[str, Any]]:
    """Build a merge request API payload; keyword arguments override fields."""

    def build(id: int = 100, **overrides: Any) -> dict[str, Any]:
        iid = overrides.pop("iid", id % 1000)
        project_id = overrides.pop("project_id", 10)
        data: dict[str, Any] = {
            "id": id,
            "iid": iid,
            "project_id": project_id,
            "title": f"Merge request {id}",
            "description": "ignored by the dashboard",
            "state": "opened",
            "milestone": None,
            "draft": False,
            "has_conflicts": False,
            "references": {"short": f"!{iid}", "full": f"group/project!{iid}"},
            "source_branch": f"feature-{id}",
            "target_branch": "develop",
            "web_url": f"{TEST_URL}/group/project/-/merge_requests/{iid}",
            "updated_at": (NOW - timedelta(days=1)).isoformat(),
            "author": BOB,
            "assignees": [BOB],
            "reviewers": [],
        }
        data.update(overrides)
        return data

    return build


@pytest.fixture
def make_mr(mr_payload: Callable[..., dict[str, Any]]) -> Callable[..., MergeRequest]:
    def build(id: int = 100, **overrides: Any) -> MergeRequest:
        return MergeRequest.model_validate(mr_payload(id, **overrides))

    return build


@pytest.fixture
def make_approvals() -> Callable[..., ApprovalInfo]:
    def build(approvals_left: int = 1, approved_by: list[dict] | None = None) -> ApprovalInfo:
        return ApprovalInfo.model_validate(
            {
                "approvals_left": approvals_left,
                "approved_by": [{"user": user} for user in approved_by or []],
            }
        )

    return build
