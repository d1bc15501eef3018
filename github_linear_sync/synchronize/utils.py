"""Contains utility functions for synchronization actions."""

from datetime import datetime, timezone

from github_linear_sync.synchronize.models import SourceIssue
from github_linear_sync.utils.constants import GITHUB_TITLE_PREFIX


def create_github_title(repository: str, issue_number: int, issue_title: str) -> str:
    """Build the title of the Linear issue mirroring a GitHub issue.

    The title doubles as a matching key, so it must stay a pure function of
    the repository, the issue number and the GitHub title.
    """
    return f"{GITHUB_TITLE_PREFIX} {repository}#{issue_number}: {issue_title}"


def derived_title(source_issue: SourceIssue) -> str:
    """Build the Linear title for a source issue."""
    return create_github_title(source_issue.repository, source_issue.number, source_issue.title)


def format_sync_timestamp(now: datetime) -> str:
    """Format a timestamp as ISO-8601 UTC with millisecond precision and a Z suffix."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
