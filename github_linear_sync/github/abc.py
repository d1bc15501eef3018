"""Base ABC for the source tracker client."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from github_linear_sync.synchronize.models import SourceIssue


class SourceTrackerBase(ABC):
    """Operations the synchronization engine and CLI need from the source tracker."""

    @abstractmethod
    async def validate_token(self) -> str:
        """Validate the credential and return the authenticated login."""
        pass

    @abstractmethod
    async def fetch_issues(
        self,
        repos: list[str],
        authors: list[str] | None = None,
        since: datetime | None = None,
    ) -> list[SourceIssue]:
        """Fetch issues (not pull requests) from several repositories."""
        pass

    @abstractmethod
    async def issue_exists(self, issue_url: str) -> bool:
        """Check whether an issue still exists upstream."""
        pass

    @abstractmethod
    async def user_exists(self, username: str) -> bool:
        """Check whether a user exists."""
        pass

    # Listing operations used only by the CLI
    @abstractmethod
    async def list_organization_memberships(self) -> list[Any]:
        """List organization memberships of the authenticated user."""
        pass

    @abstractmethod
    async def list_organization_repositories(self, org_name: str) -> list[Any]:
        """List repositories of an organization."""
        pass

    @abstractmethod
    async def list_user_repositories(self) -> list[Any]:
        """List repositories of the authenticated user."""
        pass
