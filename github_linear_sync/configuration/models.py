"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


@dataclass
class GitHubConfig:
    """Credentials and endpoint for the GitHub API."""

    github_api_url: str
    github_authentication_type: GitHubAuthenticationType
    github_pat_token: str | None = None
    github_app_id: int | None = None
    github_app_private_key_path: Path | None = None
    github_app_installation_id: int | None = None


@dataclass
class LinearConfig:
    """Credentials and endpoint for the Linear API."""

    linear_api_key: str
    linear_api_url: str


@dataclass
class SyncConfig:
    """Configuration class for the sync command."""

    github: GitHubConfig
    linear: LinearConfig
    repos: list[str]
    team_id: str
    project: str
    authors: list[str] = field(default_factory=list)
    since: datetime | None = None
    interactive: bool = True
    max_concurrency: int | None = None
    debug: bool = False
