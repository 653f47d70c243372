"""Merge request models."""

from __future__ import annotations

from datetime import datetime

from pydantic import AwareDatetime

from .base import GitLabModel
from .common import Milestone, User

MAIN_BRANCHES = ("main", "master")


class References(GitLabModel):
    short: str = ""
    full: str


class MergeRequest(GitLabModel):
    id: int
    iid: int
    project_id: int
    title: str
    milestone: Milestone | None = None
    draft: bool = False
    has_conflicts: bool = False
    references: References
    source_branch: str = ""
    target_branch: str
    web_url: str
    updated_at: AwareDatetime
    author: User
    assignees: list[User] = []
    reviewers: list[User] = []

    @property
    def reference(self) -> str:
        return self.references.full

    @property
    def targets_main_branch(self) -> bool:
        return self.target_branch in MAIN_BRANCHES

    def is_author(self, user: User) -> bool:
        return self.author.is_same(user)

    def is_assignee(self, user: User) -> bool:
        return any(assignee.is_same(user) for assignee in self.assignees)

    def is_reviewer(self, user: User) -> bool:
        return any(reviewer.is_same(user) for reviewer in self.reviewers)

    def age_days(self, now: datetime) -> int:
        """Whole days elapsed since the last update."""
        return (now - self.updated_at).days
