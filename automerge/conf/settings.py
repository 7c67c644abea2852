from pydantic_settings import SettingsConfigDict

from .event import EventSettings
from .github import GitHubSettings


class Settings(EventSettings, GitHubSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "automerge"
    debug: bool = False
