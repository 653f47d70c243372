"""Common GitLab models shared across domains."""

from __future__ import annotations

from .base import GitLabModel


class User(GitLabModel):
    id: int
    username: str
    name: str = ""

    def is_same(self, other: User) -> bool:
        return self.id == other.id


class Milestone(GitLabModel):
    id: int
    title: str = ""
