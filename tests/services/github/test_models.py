import pytest

from automerge.services.github.models import Commit, PullRequest, Repository


def test_repository_parse() -> None:
    repository = Repository.parse("octocat/hello-world")

    assert repository == Repository(owner="octocat", name="hello-world")
    assert str(repository) == "octocat/hello-world"
    assert repository.head("feature-x") == "octocat:feature-x"


@pytest.mark.parametrize("value", ["octocat", "/repo", "owner/", "a/b/c", ""])
def test_repository_parse_invalid(value: str) -> None:
    with pytest.raises(ValueError, match="expected owner/name"):
        Repository.parse(value)


def test_pull_request_from_api() -> None:
    """Test parsing a pull request with a null body."""
    pull_request = PullRequest.from_api(
        {
            "number": 12,
            "title": "Add feature",
            "body": None,
            "mergeable_state": "clean",
            "head": {"ref": "feature-x"},
        }
    )

    assert pull_request.number == 12
    assert pull_request.body == ""
    assert pull_request.head_ref == "feature-x"
    assert pull_request.is_clean


def test_pull_request_without_mergeable_state() -> None:
    """Test a PR whose mergeability GitHub has not computed yet is not clean."""
    pull_request = PullRequest.from_api({"number": 1, "title": "x", "mergeable_state": None})

    assert pull_request.mergeable_state == "unknown"
    assert not pull_request.is_clean


def test_commit_from_api() -> None:
    commit = Commit.from_api(
        {
            "sha": "abc",
            "commit": {
                "author": {"name": "Alice", "email": "a@x.com", "date": "2024-01-01T00:00:00Z"},
                "message": "Fix bug\n\nDetails here",
            },
        }
    )

    assert commit.title == "Fix bug"
    assert commit.body == "\n\nDetails here"
    assert commit.authored_by == "Authored-by: Alice <a@x.com>"


def test_commit_message_split_on_first_break_only() -> None:
    commit = Commit(sha="a", author_name="A", author_email="a@x.com", message="Title\nline one\nline two")

    assert commit.title == "Title"
    assert commit.body == "\nline one\nline two"


def test_commit_without_author() -> None:
    commit = Commit.from_api({"sha": "abc", "commit": {"author": None, "message": "x"}})

    assert commit.authored_by == "Authored-by:  <>"
