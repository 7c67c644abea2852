from dataclasses import dataclass
from enum import Enum
from typing import Any


class MergeMethod(str, Enum):
    """Merge methods accepted by the GitHub merge endpoint."""

    SQUASH = "squash"
    MERGE = "merge"
    REBASE = "rebase"


@dataclass(frozen=True)
class Repository:
    """Owner and name of a GitHub repository."""

    owner: str
    name: str

    @classmethod
    def parse(cls, full_name: str) -> "Repository":
        """Parse an ``owner/name`` string.

        Raises:
            ValueError: If the string is not in owner/name form
        """
        owner, sep, name = full_name.partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"Invalid repository '{full_name}', expected owner/name")
        return cls(owner=owner, name=name)

    def head(self, branch: str) -> str:
        """Head filter for branches of this repository's owner."""
        return f"{self.owner}:{branch}"

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class PullRequest:
    """Domain model for the pull request fields the merge decision needs."""

    number: int
    title: str
    body: str
    mergeable_state: str
    head_ref: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PullRequest":
        return cls(
            number=data["number"],
            title=data.get("title") or "",
            body=data.get("body") or "",
            mergeable_state=data.get("mergeable_state") or "unknown",
            head_ref=(data.get("head") or {}).get("ref"),
        )

    @property
    def is_clean(self) -> bool:
        return self.mergeable_state == "clean"


@dataclass
class Commit:
    """Domain model for a single commit of a pull request."""

    sha: str
    author_name: str
    author_email: str
    message: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Commit":
        commit = data.get("commit") or {}
        author = commit.get("author") or {}
        return cls(
            sha=data.get("sha", ""),
            author_name=author.get("name") or "",
            author_email=author.get("email") or "",
            message=commit.get("message") or "",
        )

    @property
    def title(self) -> str:
        """Commit message up to the first line break."""
        return self.message.partition("\n")[0]

    @property
    def body(self) -> str:
        """Commit message from the first line break onward, break included."""
        divider = self.message.find("\n")
        if divider == -1:
            return ""
        return self.message[divider:]

    @property
    def authored_by(self) -> str:
        return f"Authored-by: {self.author_name} <{self.author_email}>"


@dataclass
class MergePlan:
    """How a pull request will be merged."""

    method: MergeMethod
    title: str
    body: str
