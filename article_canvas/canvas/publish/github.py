"""Publish articles to a GitHub repository via the contents API."""

from __future__ import annotations

import base64
import logging

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


class GitHubConfig(BaseModel):
    """Publishing target; token is never echoed back by the API."""

    token: str = ""
    repo: str = ""
    branch: str = "main"


class PublishResult(BaseModel):
    success: bool
    url: str | None = None
    error: str | None = None


class GitHubPublisher:
    """Create or update one file per publish call."""

    def __init__(
        self,
        token: str,
        repo: str,
        branch: str = "main",
        base_url: str = GITHUB_API_URL,
    ) -> None:
        self._token = token
        self._repo = repo
        self._branch = branch or "main"
        self._base_url = base_url.rstrip("/")

    @classmethod
    def from_config(cls, config: GitHubConfig) -> GitHubPublisher:
        return cls(token=config.token, repo=config.repo, branch=config.branch)

    @property
    def is_configured(self) -> bool:
        return bool(self._token and self._repo)

    def _split_repo(self) -> tuple[str, str] | None:
        owner, _, name = self._repo.partition("/")
        if not owner or not name or "/" in name:
            return None
        return owner, name

    async def _existing_sha(self, client: httpx.AsyncClient, path: str) -> str | None:
        try:
            resp = await client.get(path)
        except httpx.HTTPError as e:
            logger.debug("SHA lookup failed for %s: %s", path, e)
            return None
        if resp.status_code != 200:
            return None
        data = resp.json()
        return data.get("sha") if isinstance(data, dict) else None

    async def publish(
        self,
        filename: str,
        content: str,
        commit_message: str,
    ) -> PublishResult:
        """Write ``content`` to ``filename``; never raises for API failures."""
        if not self.is_configured:
            return PublishResult(success=False, error="GitHub token and repo are required")

        parts = self._split_repo()
        if parts is None:
            return PublishResult(
                success=False, error="Invalid repo format. Use: owner/repo-name",
            )
        owner, name = parts
        path = f"/repos/{owner}/{name}/contents/{filename}"

        headers = {
            "Authorization": f"token {self._token}",
            "Accept": "application/vnd.github.v3+json",
        }
        async with httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=httpx.Timeout(30.0, connect=10.0),
        ) as client:
            sha = await self._existing_sha(client, path)
            payload: dict[str, str] = {
                "message": commit_message,
                "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
                "branch": self._branch,
            }
            if sha:
                payload["sha"] = sha

            try:
                resp = await client.put(path, json=payload)
            except httpx.HTTPError as e:
                logger.error("GitHub publish failed: %s", e)
                return PublishResult(success=False, error=str(e) or "Unknown error")

        if resp.status_code not in (200, 201):
            try:
                message = resp.json().get("message") or "Failed to publish"
            except ValueError:
                message = "Failed to publish"
            logger.warning("GitHub publish rejected (%d): %s", resp.status_code, message)
            return PublishResult(success=False, error=message)

        url = resp.json().get("content", {}).get("html_url")
        logger.info("Published %s to %s", filename, self._repo)
        return PublishResult(success=True, url=url)
