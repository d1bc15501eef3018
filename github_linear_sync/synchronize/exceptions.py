"""Custom exceptions for the synchronize module."""


class SkippedClosedIssueError(Exception):
    """Raised instead of creating a Linear issue for a GitHub issue that is already closed."""

    def __init__(self, issue_url: str) -> None:
        """Initializes the exception with the URL of the skipped GitHub issue."""
        super().__init__(f"Skipping closed GitHub issue: {issue_url}")
        self.issue_url = issue_url
