"""Merge decision and coordination for pull requests picked by an event."""

from logging import getLogger
from typing import Any, Protocol

from automerge.exceptions import MissingContextError

from .events import Event, classify
from .github.models import Commit, MergeMethod, MergePlan, PullRequest, Repository

logger = getLogger(__name__)

# Open pull requests considered per branch lookup
BRANCH_PAGE_SIZE = 100


class PullRequestAPI(Protocol):
    """The GitHub operations the coordinator needs. GitHubAPIClient implements it."""

    async def get_pull_request(self, owner: str, repo: str, number: int) -> dict[str, Any]: ...

    async def list_pull_request_commits(self, owner: str, repo: str, number: int) -> list[dict[str, Any]]: ...

    async def list_pull_requests(
        self,
        owner: str,
        repo: str,
        head: str | None = None,
        state: str = "open",
        sort: str = "updated",
        direction: str = "desc",
        per_page: int = 100,
    ) -> list[dict[str, Any]]: ...

    async def merge_pull_request(
        self,
        owner: str,
        repo: str,
        number: int,
        merge_method: str,
        commit_title: str,
        commit_message: str,
    ) -> dict[str, Any]: ...


def collect_authors(commits: list[Commit]) -> list[str]:
    """Unique Authored-by lines in the order authors first appear."""
    authors: list[str] = []
    for commit in commits:
        line = commit.authored_by
        if line not in authors:
            authors.append(line)
    return authors


def plan_merge(pull_request: PullRequest, commits: list[Commit]) -> MergePlan:
    """Decide how to merge a pull request from its commits.

    A single commit is squashed and keeps its own message, with the pull
    request number appended to the title. Anything else becomes a merge
    commit titled after the pull request, whose body quotes the pull request
    description and credits every commit author.

    Args:
        pull_request: The pull request being merged
        commits: All commits of the pull request, oldest first

    Returns:
        The merge method, commit title and commit body to use
    """
    if len(commits) == 1:
        commit = commits[0]
        return MergePlan(
            method=MergeMethod.SQUASH,
            title=f"{commit.title} (#{pull_request.number})",
            body=commit.body,
        )

    authors = "\n".join(collect_authors(commits))
    return MergePlan(
        method=MergeMethod.MERGE,
        title=f"merge: {pull_request.title} (#{pull_request.number})",
        body=f'"{pull_request.body}"\n\n{authors}',
    )


class MergeCoordinator:
    """Merges the pull requests an event makes eligible."""

    def __init__(self, client: PullRequestAPI, repository: Repository) -> None:
        """Initialize the coordinator.

        Args:
            client: GitHub API client (or anything implementing PullRequestAPI)
            repository: Repository the workflow runs in
        """
        self.client = client
        self.repository = repository

    async def handle(self, event: Event) -> None:
        """Merge whatever the event makes eligible.

        A pull request attached directly to the event propagates its errors.
        Pull requests found through branch lookups are attempted one by one
        and a failure on one of them does not stop the rest.

        Args:
            event: The typed workflow event
        """
        try:
            selection = classify(event)
        except MissingContextError as e:
            logger.error(str(e))
            return

        if selection.pull_request is not None:
            await self.merge_pull_request(selection.pull_request)

        for branch in selection.branches:
            await self.merge_branch(branch)

    async def fetch_plan(self, number: int) -> tuple[PullRequest, MergePlan | None]:
        """Fetch a pull request and work out its merge plan.

        Returns:
            The pull request and its plan, or None as plan when it is not clean
        """
        repo = self.repository
        pull_request = PullRequest.from_api(await self.client.get_pull_request(repo.owner, repo.name, number))
        if not pull_request.is_clean:
            logger.debug(f"mergeable state is not clean: {pull_request.mergeable_state}")
            return pull_request, None

        commits = [
            Commit.from_api(data)
            for data in await self.client.list_pull_request_commits(repo.owner, repo.name, number)
        ]
        return pull_request, plan_merge(pull_request, commits)

    async def merge_pull_request(self, number: int) -> MergePlan | None:
        """Merge a single pull request if it is clean.

        Args:
            number: Pull request number

        Returns:
            The plan that was applied, or None if the pull request was skipped

        Raises:
            httpx.HTTPStatusError: If GitHub refuses a request or the merge
        """
        pull_request, plan = await self.fetch_plan(number)
        if plan is None:
            return None

        repo = self.repository
        await self.client.merge_pull_request(
            repo.owner,
            repo.name,
            pull_request.number,
            merge_method=plan.method.value,
            commit_title=plan.title,
            commit_message=plan.body,
        )
        logger.info(f"Merged {repo}#{pull_request.number} ({plan.method.value}): {plan.title}")
        return plan

    async def merge_branch(self, branch: str) -> list[int]:
        """Attempt every open pull request whose head is the given branch.

        Pull requests are tried most recently updated first. Errors are logged
        per pull request.

        Args:
            branch: Head branch name

        Returns:
            Numbers of the pull requests that were merged
        """
        repo = self.repository
        logger.info(f"Listing pull requests for {branch} ...")
        pull_requests = await self.client.list_pull_requests(
            repo.owner,
            repo.name,
            head=repo.head(branch),
            state="open",
            sort="updated",
            direction="desc",
            per_page=BRANCH_PAGE_SIZE,
        )
        numbers = [pr["number"] for pr in pull_requests]
        logger.debug(f"PR list: {numbers}")

        merged: list[int] = []
        for number in numbers:
            try:
                if await self.merge_pull_request(number) is not None:
                    merged.append(number)
            except Exception:
                logger.exception(f"Failed to merge {repo}#{number}")
        return merged
