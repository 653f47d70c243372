"""GitLab API client using httpx."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from .config import GitLabConfig
from .exceptions import (
    GitLabApiError,
    GitLabAuthError,
    GitLabConnectionError,
    GitLabNotFoundError,
)

logger = logging.getLogger(__name__)


class GitLabClient:
    """Async, read-only HTTP client for the parts of the GitLab REST API v4 we poll."""

    def __init__(self, config: GitLabConfig | None = None) -> None:
        self.config = config or GitLabConfig.from_env()
        self.config.validate()
        self._client = httpx.AsyncClient(
            base_url=self.config.api_url,
            headers={
                "Authorization": f"Bearer {self.config.token}",
                "Accept": "application/json",
            },
            timeout=self.config.timeout,
            verify=self.config.ssl_verify,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitLabClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ── HTTP helpers ──────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an API request and return parsed JSON."""
        logger.debug("%s %s %s", method, path, params or "")
        try:
            resp = await self._client.request(method, path, params=params)
        except httpx.HTTPError as e:
            msg = f"{method} {path} failed: {e!r}"
            raise GitLabConnectionError(msg) from e

        if resp.status_code in (401, 403):
            raise GitLabAuthError(resp.status_code, resp.text)
        if resp.status_code == 404:
            raise GitLabNotFoundError(resp.text)
        if not resp.is_success:
            raise GitLabApiError(resp.status_code, resp.reason_phrase or "", resp.text)

        if resp.status_code == 204 or not resp.content:
            return None

        content_type = resp.headers.get("content-type", "")
        if "text/html" in content_type:
            msg = "Unexpected HTML response — check URL and authentication"
            raise GitLabApiError(resp.status_code, msg, resp.text[:500])

        try:
            return resp.json()
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError (invalid UTF-8 body)
            raise GitLabApiError(
                resp.status_code,
                f"JSON parse error: {e}",
                resp.text[:500],
            ) from e

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self._request("GET", path, params=params)

    # ── Users ─────────────────────────────────────────────────────

    async def find_users(self, username: str) -> list[dict]:
        return await self.get("/users", params={"username": username}) or []

    async def list_user_events(
        self, user_id: int, params: dict[str, Any] | None = None
    ) -> list[dict]:
        return await self.get(f"/users/{user_id}/events", params=params) or []

    # ── Merge Requests ────────────────────────────────────────────

    async def list_merge_requests(self, params: dict[str, Any] | None = None) -> list[dict]:
        return await self.get("/merge_requests", params=params) or []

    async def list_project_merge_requests(
        self, project_id: int, params: dict[str, Any] | None = None
    ) -> list[dict]:
        return await self.get(f"/projects/{project_id}/merge_requests", params=params) or []

    async def get_merge_request_approvals(self, project_id: int, mr_iid: int) -> dict:
        return await self.get(f"/projects/{project_id}/merge_requests/{mr_iid}/approvals")
