"""Minimal GitHub REST client for the pull request endpoints used here."""

from __future__ import annotations

import logging
import os
from typing import Any

import requests

from releasemerge.types import FileChange, MergeMethod, PullRequestSnapshot

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
FILES_PER_PAGE = 100


class GitHubApiError(RuntimeError):
    """Raised for transport failures and error responses from the GitHub API."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    """Thin wrapper over ``requests`` with token auth and no retries."""

    def __init__(
        self,
        token: str,
        *,
        api_url: str | None = None,
        timeout_seconds: float = 30.0,
    ):
        if not token:
            raise ValueError("GitHub token is required")
        self.api_url = (api_url or os.environ.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _url(self, path: str) -> str:
        return f"{self.api_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        logger.debug("GitHub %s %s", method.upper(), path)
        try:
            response = requests.request(
                method.upper(),
                self._url(path),
                headers=self.headers,
                timeout=self.timeout_seconds,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise GitHubApiError(f"GitHub {method.upper()} {path} request failed: {exc}") from exc

        if response.status_code >= 400:
            raise GitHubApiError(
                f"GitHub {method.upper()} {path} failed with HTTP {response.status_code}: "
                f"{_error_message(response)}",
                status_code=response.status_code,
            )
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestSnapshot:
        data = self._request("GET", f"/repos/{owner}/{repo}/pulls/{number}")
        return PullRequestSnapshot.from_dict(data)

    def list_files(self, owner: str, repo: str, number: int) -> list[FileChange]:
        """List every changed file, following pages until a short page."""
        files: list[FileChange] = []
        page = 1
        while True:
            batch = self._request(
                "GET",
                f"/repos/{owner}/{repo}/pulls/{number}/files",
                params={"per_page": FILES_PER_PAGE, "page": page},
            ) or []
            files.extend(FileChange.from_dict(item) for item in batch)
            if len(batch) < FILES_PER_PAGE:
                return files
            page += 1

    def create_review(self, owner: str, repo: str, number: int, *, event: str, body: str) -> dict[str, Any]:
        return self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls/{number}/reviews",
            json={"event": event, "body": body},
        )

    def merge_pull_request(
        self,
        owner: str,
        repo: str,
        number: int,
        *,
        merge_method: MergeMethod,
    ) -> dict[str, Any]:
        return self._request(
            "PUT",
            f"/repos/{owner}/{repo}/pulls/{number}/merge",
            json={"merge_method": merge_method.value},
        )

    def create_pull_request(
        self,
        owner: str,
        repo: str,
        *,
        title: str,
        body: str,
        base: str,
        head: str,
    ) -> dict[str, Any]:
        return self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls",
            json={"title": title, "body": body, "base": base, "head": head},
        )


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text.strip()
