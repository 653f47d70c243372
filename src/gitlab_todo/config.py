"""gitlab-todo configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_URL = "https://gitlab.com"


@dataclass
class GitLabConfig:
    """Configuration for the dashboard, loaded from environment variables."""

    url: str = DEFAULT_URL
    token: str = ""
    timeout: int = 30
    ssl_verify: bool = True
    interval: int = 30

    @classmethod
    def from_env(cls) -> GitLabConfig:
        url = (os.getenv("GITLAB_URL") or DEFAULT_URL).rstrip("/")
        token = (
            os.getenv("GITLAB_TOKEN")
            or os.getenv("GITLAB_PAT")
            or os.getenv("GITLAB_PERSONAL_ACCESS_TOKEN")
            or os.getenv("GITLAB_API_TOKEN", "")
        )
        timeout = int(os.getenv("GITLAB_TIMEOUT", "30"))
        ssl_verify = os.getenv("GITLAB_SSL_VERIFY", "true").lower() not in (
            "false",
            "0",
            "no",
        )
        interval = int(os.getenv("GITLAB_TODO_INTERVAL", "30"))

        return cls(
            url=url,
            token=token,
            timeout=timeout,
            ssl_verify=ssl_verify,
            interval=interval,
        )

    @property
    def api_url(self) -> str:
        return f"{self.url}/api/v4"

    def validate(self) -> None:
        if not self.url:
            msg = "GITLAB_URL must not be empty"
            raise ValueError(msg)
        if not self.token:
            msg = (
                "GitLab token is required. Set one of: GITLAB_TOKEN, GITLAB_PAT, "
                "GITLAB_PERSONAL_ACCESS_TOKEN, or GITLAB_API_TOKEN"
            )
            raise ValueError(msg)
