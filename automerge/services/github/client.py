"""Async GitHub API client using httpx."""

from logging import getLogger
from typing import Any

import httpx
from pydantic import SecretStr

logger = getLogger(__name__)


class GitHubAPIClient:
    """Async GitHub API client for the pull request endpoints."""

    def __init__(self, token: SecretStr, base_url: str = "https://api.github.com") -> None:
        """Initialize GitHub API client.

        Args:
            token: GitHub token (the workflow token or a Personal Access Token)
            base_url: Base URL for GitHub API (default: https://api.github.com)
        """
        self.token = token.get_secret_value()
        self.base_url = base_url
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "GitHubAPIClient":
        """Enter async context manager."""
        self._client = httpx.AsyncClient(
            headers={
                "Authorization": f"Bearer {self.token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=httpx.Timeout(30.0, connect=10.0),
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        if self._client:
            await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Make a single HTTP request.

        Args:
            method: HTTP method (GET, PUT, etc.)
            url: URL to request
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            httpx.Response object

        Raises:
            RuntimeError: If used outside the async context manager
            httpx.HTTPStatusError: If GitHub answers with an error status
        """
        if not self._client:
            raise RuntimeError("Client not initialized - use async with context manager")

        response = await self._client.request(method, url, **kwargs)
        response.raise_for_status()
        return response

    def _pulls_url(self, owner: str, repo: str) -> str:
        return f"{self.base_url}/repos/{owner}/{repo}/pulls"

    async def get_pull_request(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        """Get a single pull request.

        Args:
            owner: Repository owner (user or organization)
            repo: Repository name
            number: Pull request number

        Returns:
            Pull request data dictionary including title, body and mergeable_state

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        response = await self._request("GET", f"{self._pulls_url(owner, repo)}/{number}")
        result: dict[str, Any] = response.json()
        return result

    async def list_pull_request_commits(self, owner: str, repo: str, number: int) -> list[dict[str, Any]]:
        """Get every commit of a pull request, oldest first.

        Args:
            owner: Repository owner (user or organization)
            repo: Repository name
            number: Pull request number

        Returns:
            List of commit data dictionaries

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        # GitHub paginates PR commits (max 250 commits)
        per_page = 100
        page = 1
        all_commits: list[dict[str, Any]] = []

        while True:
            response = await self._request(
                "GET",
                f"{self._pulls_url(owner, repo)}/{number}/commits",
                params={"per_page": per_page, "page": page},
            )
            commits: list[dict[str, Any]] = response.json()

            if not commits:
                break

            all_commits.extend(commits)

            if len(commits) < per_page:
                break

            page += 1

        return all_commits

    async def list_pull_requests(
        self,
        owner: str,
        repo: str,
        head: str | None = None,
        state: str = "open",
        sort: str = "updated",
        direction: str = "desc",
        per_page: int = 100,
    ) -> list[dict[str, Any]]:
        """List pull requests of a repository (first page only).

        Args:
            owner: Repository owner (user or organization)
            repo: Repository name
            head: Filter by head branch, as owner:branch
            state: Pull request state (open, closed, all)
            sort: Sort field (created, updated, popularity, long-running)
            direction: Sort order (asc, desc)
            per_page: Results per page (max 100)

        Returns:
            List of pull request data dictionaries

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        params: dict[str, str | int] = {
            "state": state,
            "sort": sort,
            "direction": direction,
            "per_page": min(per_page, 100),
        }
        if head:
            params["head"] = head

        response = await self._request("GET", self._pulls_url(owner, repo), params=params)
        result: list[dict[str, Any]] = response.json()
        return result

    async def merge_pull_request(
        self,
        owner: str,
        repo: str,
        number: int,
        merge_method: str,
        commit_title: str,
        commit_message: str,
    ) -> dict[str, Any]:
        """Merge a pull request.

        Args:
            owner: Repository owner (user or organization)
            repo: Repository name
            number: Pull request number
            merge_method: squash, merge or rebase
            commit_title: Title of the resulting commit
            commit_message: Body of the resulting commit

        Returns:
            Merge result dictionary with 'sha', 'merged' and 'message' keys

        Raises:
            httpx.HTTPStatusError: If GitHub refuses the merge (405 not mergeable, 409 head changed, ...)
        """
        logger.debug(f"Merging {owner}/{repo}#{number} with method {merge_method}")
        response = await self._request(
            "PUT",
            f"{self._pulls_url(owner, repo)}/{number}/merge",
            json={
                "merge_method": merge_method,
                "commit_title": commit_title,
                "commit_message": commit_message,
            },
        )
        result: dict[str, Any] = response.json()
        return result
