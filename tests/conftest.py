from typing import Any

import pytest
from pydantic import SecretStr

from automerge.services.github.client import GitHubAPIClient
from automerge.services.github.models import Repository


class FakeGitHub:
    """In-memory stand-in for the GitHub pull request endpoints."""

    def __init__(self) -> None:
        self.pull_requests: dict[int, dict[str, Any]] = {}
        self.commits: dict[int, list[dict[str, Any]]] = {}
        self.heads: dict[str, list[int]] = {}
        self.merge_failures: dict[int, Exception] = {}
        self.merged: list[dict[str, Any]] = []
        self.calls: list[tuple[Any, ...]] = []

    def add_pull_request(
        self,
        number: int,
        title: str = "A change",
        body: str | None = "",
        mergeable_state: str = "clean",
        commits: list[tuple[str, str, str]] | None = None,
        head: str | None = None,
    ) -> None:
        self.pull_requests[number] = {
            "number": number,
            "title": title,
            "body": body,
            "mergeable_state": mergeable_state,
            "head": {"ref": head},
        }
        self.commits[number] = [
            {"sha": f"{number}{i:04d}", "commit": {"author": {"name": name, "email": email}, "message": message}}
            for i, (name, email, message) in enumerate(commits or [("Alice", "a@x.com", "A change")])
        ]
        if head is not None:
            self.heads.setdefault(f"owner:{head}", []).append(number)

    async def get_pull_request(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        self.calls.append(("get_pull_request", owner, repo, number))
        return self.pull_requests[number]

    async def list_pull_request_commits(self, owner: str, repo: str, number: int) -> list[dict[str, Any]]:
        self.calls.append(("list_pull_request_commits", owner, repo, number))
        return self.commits[number]

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
        self.calls.append(("list_pull_requests", owner, repo, head, state, sort, direction, per_page))
        return [{"number": number} for number in self.heads.get(head or "", [])]

    async def merge_pull_request(
        self,
        owner: str,
        repo: str,
        number: int,
        merge_method: str,
        commit_title: str,
        commit_message: str,
    ) -> dict[str, Any]:
        self.calls.append(("merge_pull_request", owner, repo, number))
        if number in self.merge_failures:
            raise self.merge_failures[number]
        self.merged.append(
            {
                "number": number,
                "merge_method": merge_method,
                "commit_title": commit_title,
                "commit_message": commit_message,
            }
        )
        return {"sha": "deadbeef", "merged": True, "message": "Pull Request successfully merged"}

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def mock_client() -> GitHubAPIClient:
    """Create a test GitHub API client for mocking."""
    return GitHubAPIClient(token=SecretStr("test_token"))


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Create an empty in-memory GitHub."""
    return FakeGitHub()


@pytest.fixture
def repository() -> Repository:
    return Repository(owner="owner", name="repo")
