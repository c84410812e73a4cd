"""
Application configuration using pydantic-settings.
All environment variables are validated and typed.
"""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # GitHub
    github_token: str = ""
    github_api_url: str = "https://api.github.com"

    # Buildbucket
    buildbucket_host: str = "https://cr-buildbucket.appspot.com"
    buildbucket_token: str | None = None
    luci_project: str = "flutter"
    luci_try_bucket: str = "try"
    luci_user_agent: str = "flutter-cocoon"
    build_url_template: str = "https://ci.chromium.org/p/{project}/builders/{bucket}/{builder}/b{id}"

    # Commit statuses
    status_description_prefix: str = "Flutter LUCI Build"
    status_reload_seconds: int = 30

    # JSON file with "builders" and "try_builders" tables
    builders_file: str | None = None

    # Webhook
    webhook_secret: str | None = None
    webhook_host: str = "0.0.0.0"
    webhook_port: int = 8081

    http_timeout: float = 30.0

    supported_repos: set[str] = {"engine", "flutter", "cocoon", "packages"}

    @field_validator("buildbucket_token", "builders_file", "webhook_secret", mode="before")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = str(value).strip()
        return cleaned or None

    def is_presubmit_supported_repo(self, repo_name: str) -> bool:
        """Whether presubmit statuses are reported for the repository."""
        return repo_name in self.supported_repos

    model_config = {
        "env_file": os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), ".env"),
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton settings instance
settings = Settings()
