"""Base model for GitLab API responses."""

from __future__ import annotations

from pydantic import BaseModel


class GitLabModel(BaseModel):
    """Immutable base for GitLab records; unknown API fields are ignored."""

    model_config = {"extra": "ignore", "populate_by_name": True, "frozen": True}
