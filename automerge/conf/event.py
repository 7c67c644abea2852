from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EventSettings(BaseSettings):
    """Triggering workflow event, as provided by the Actions runner."""

    model_config = SettingsConfigDict(extra="ignore")

    github_event_name: str | None = Field(
        default=None,
        description="Name of the event that triggered the workflow (status, check_suite, ...)",
    )
    github_event_path: Path | None = Field(
        default=None,
        description="Path to the JSON document holding the full event payload",
    )
