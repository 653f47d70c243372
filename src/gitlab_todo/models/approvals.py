"""Merge request approval models."""

from __future__ import annotations

from .base import GitLabModel
from .common import User


class Approver(GitLabModel):
    user: User


class ApprovalInfo(GitLabModel):
    approvals_required: int = 0
    approvals_left: int
    approved_by: list[Approver] = []

    def approved_by_user(self, user: User) -> bool:
        return any(approver.user.is_same(user) for approver in self.approved_by)
