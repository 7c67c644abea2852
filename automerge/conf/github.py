from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from automerge.services.github.models import Repository


class GitHubSettings(BaseSettings):
    """GitHub API configuration and authentication settings."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    # The action's `repo-token` input arrives as INPUT_REPO-TOKEN
    github_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("INPUT_REPO-TOKEN", "INPUT_REPO_TOKEN", "GITHUB_TOKEN"),
        description="Token used to authenticate GitHub API requests",
    )

    github_api_url: str = Field(
        default="https://api.github.com",
        description="Base URL of the GitHub REST API",
    )

    github_repository: str | None = Field(
        default=None,
        description="Repository the workflow runs in, as owner/name",
    )

    @field_validator("github_api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("github_repository")
    @classmethod
    def validate_repository(cls, v: str | None) -> str | None:
        """Validate the repository is in owner/name form."""
        if v is not None:
            Repository.parse(v)
        return v

    @property
    def repository(self) -> Repository | None:
        if self.github_repository is None:
            return None
        return Repository.parse(self.github_repository)
