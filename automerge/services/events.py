"""Workflow event payloads and the classifier that turns them into merge candidates.

Each supported event kind has its own payload model. The models only declare
the fields the classifier reads; everything else in the GitHub payload is
ignored.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from logging import getLogger
from pathlib import Path
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from automerge.exceptions import ConfigurationError, MissingContextError

logger = getLogger(__name__)


class EventKind(str, Enum):
    """Workflow events that can lead to a merge."""

    STATUS = "status"
    PULL_REQUEST = "pull_request"
    PULL_REQUEST_REVIEW = "pull_request_review"
    CHECK_SUITE = "check_suite"
    CHECK_RUN = "check_run"

    @classmethod
    def parse(cls, name: str | None) -> "EventKind | None":
        """Return the kind for an event name, or None for events we do not handle."""
        try:
            return cls(name)
        except ValueError:
            return None

    @property
    def requires_payload(self) -> bool:
        """Whether the event document must be present to classify this kind."""
        return self not in (EventKind.PULL_REQUEST, EventKind.PULL_REQUEST_REVIEW)


class Branch(BaseModel):
    name: str


class PullRequestRef(BaseModel):
    number: int


class CheckResult(BaseModel):
    """The check_suite or check_run object nested in a check event."""

    conclusion: str | None = None
    head_branch: str | None = None
    pull_requests: list[PullRequestRef] | None = None


class StatusEvent(BaseModel):
    kind: Literal["status"] = "status"
    state: str | None = None
    branches: list[Branch] | None = None


class PullRequestEvent(BaseModel):
    kind: Literal["pull_request", "pull_request_review"] = "pull_request"
    pull_request: PullRequestRef | None = None


class CheckSuiteEvent(BaseModel):
    kind: Literal["check_suite"] = "check_suite"
    action: str | None = None
    check_suite: CheckResult | None = None

    @property
    def result(self) -> CheckResult | None:
        return self.check_suite


class CheckRunEvent(BaseModel):
    kind: Literal["check_run"] = "check_run"
    action: str | None = None
    check_run: CheckResult | None = None

    @property
    def result(self) -> CheckResult | None:
        return self.check_run


class UnsupportedEvent(BaseModel):
    """Any event we do not act on."""

    kind: str | None = None


SupportedEvent = Annotated[
    Union[StatusEvent, PullRequestEvent, CheckSuiteEvent, CheckRunEvent],
    Field(discriminator="kind"),
]
Event = Union[StatusEvent, PullRequestEvent, CheckSuiteEvent, CheckRunEvent, UnsupportedEvent]

_event_adapter: TypeAdapter[Any] = TypeAdapter(SupportedEvent)


@dataclass
class CandidateSelection:
    """Pull requests an event points at.

    Either a single pull request number attached to the event, or branches
    whose open pull requests have to be looked up.
    """

    pull_request: int | None = None
    branches: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.pull_request is None and not self.branches


def parse_event(name: str | None, payload: dict[str, Any]) -> Event:
    """Build the typed event for an event name and its payload document.

    Raises:
        ConfigurationError: If the payload does not match the event's schema
    """
    kind = EventKind.parse(name)
    if kind is None:
        return UnsupportedEvent(kind=name)

    try:
        event: Event = _event_adapter.validate_python({**payload, "kind": kind.value})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid {kind.value} event payload: {e}") from e
    return event


def load_event(name: str | None, event_path: Path | None) -> Event:
    """Read the event payload document and build the typed event.

    Args:
        name: Name of the triggering event (GITHUB_EVENT_NAME)
        event_path: Path to the event payload document (GITHUB_EVENT_PATH)

    Returns:
        The typed event

    Raises:
        ConfigurationError: If a required payload document is missing or unreadable
    """
    kind = EventKind.parse(name)
    if kind is None:
        return UnsupportedEvent(kind=name)

    if event_path is None or not event_path.is_file():
        if kind.requires_payload:
            raise ConfigurationError("Missing event path")
        return parse_event(name, {})

    try:
        payload = json.loads(event_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Unable to read event payload from {event_path}: {e}") from e

    if not isinstance(payload, dict):
        raise ConfigurationError(f"Event payload in {event_path} is not a JSON object")

    return parse_event(name, payload)


def classify(event: Event) -> CandidateSelection:
    """Work out which pull requests an event makes eligible for merging.

    Raises:
        MissingContextError: If a pull request event carries no pull request
    """
    if isinstance(event, StatusEvent):
        if event.state != "success":
            logger.info("Status change ignored")
            return CandidateSelection()
        if not event.branches:
            logger.info("No branches have been referenced")
            return CandidateSelection()
        return CandidateSelection(branches=[branch.name for branch in event.branches])

    if isinstance(event, PullRequestEvent):
        if event.pull_request is None:
            raise MissingContextError("Missing pull request context")
        return CandidateSelection(pull_request=event.pull_request.number)

    if isinstance(event, (CheckSuiteEvent, CheckRunEvent)):
        if event.action != "completed":
            logger.info("Check not yet finished")
            return CandidateSelection()

        result = event.result
        if result is None or result.conclusion != "success":
            logger.info(f"Check concluded without success: {result.conclusion if result else None}")
            return CandidateSelection()

        if result.pull_requests:
            return CandidateSelection(pull_request=result.pull_requests[0].number)
        if result.head_branch is not None:
            return CandidateSelection(branches=[result.head_branch])

        logger.info("Could not find branch name in this status check result")
        return CandidateSelection()

    return CandidateSelection()
