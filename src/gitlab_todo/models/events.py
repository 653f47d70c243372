"""User activity event models."""

from __future__ import annotations

from pydantic import Field

from .base import GitLabModel


class PushData(GitLabModel):
    ref: str | None = None
    ref_type: str = ""
    commit_count: int = 0


class PushEvent(GitLabModel):
    """A recent push by a user, as returned by ``/users/:id/events?action=pushed``."""

    project_id: int
    action_name: str = ""
    push_data: PushData = Field(default_factory=PushData)

    @property
    def branch(self) -> str | None:
        """The pushed branch; None for tag pushes and pushes without a ref."""
        if self.push_data.ref_type == "tag":
            return None
        return self.push_data.ref
