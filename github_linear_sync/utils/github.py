"""Contains utility functions for GitHub interactions."""

from urllib.parse import urlparse


def split_repository(repo: str | None) -> tuple[str, str]:
    """Splits a repository in 'owner/repo' format into owner and repository."""
    if repo is None:
        raise ValueError("A repository in 'owner/repo' format is required.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts: {repo!r}")
    owner, repository = parts
    return owner, repository


def parse_issue_url(issue_url: str) -> tuple[str, str, int]:
    """Parse a GitHub issue web URL into its owner, repository and issue number.

    Accepts both github.com and GitHub Enterprise URLs of the form
    ``https://<host>/<owner>/<repo>/issues/<number>``.
    """
    path_parts = [part for part in urlparse(issue_url).path.split("/") if part]
    if len(path_parts) < 4 or path_parts[-2] != "issues" or not path_parts[-1].isdigit():
        raise ValueError(f"Not a GitHub issue URL: {issue_url}")
    owner, repository = path_parts[-4], path_parts[-3]
    return owner, repository, int(path_parts[-1])


def repository_from_url(url: str) -> str:
    """Return 'owner/repo' from a repository API URL or an issue web URL.

    ``https://api.github.com/repos/acme/widgets`` and
    ``https://github.com/acme/widgets/issues/42`` both yield ``acme/widgets``.
    """
    path_parts = [part for part in urlparse(url).path.split("/") if part]
    if "issues" in path_parts:
        path_parts = path_parts[: path_parts.index("issues")]
    if len(path_parts) < 2:
        raise ValueError(f"Cannot determine repository from URL: {url}")
    return "/".join(path_parts[-2:])
