"""GitHub client adapter for the githubkit library."""

import asyncio
from datetime import datetime
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import FullRepository, Issue, MinimalRepository, OrgMembership, Repository

from github_linear_sync.configuration.exceptions import GitHubTokenScopeError
from github_linear_sync.configuration.models import GitHubConfig
from github_linear_sync.synchronize.models import SourceIssue
from github_linear_sync.utils.github import parse_issue_url, split_repository
from github_linear_sync.utils.retry import retry_on_rate_limit

from .abc import SourceTrackerBase
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

T = TypeVar("T")

REQUIRED_TOKEN_SCOPE = "repo"
MISSING_ISSUE_STATUS_CODES = (404, 410)


async def paginate(fetch_page: Callable[[int], Awaitable[list[T]]], per_page: int) -> list[T]:
    """Collect every page returned by `fetch_page` until a short or empty page."""
    items: list[T] = []
    page = 1
    while True:
        page_items = await fetch_page(page)
        if not page_items:
            break
        items.extend(page_items)
        if len(page_items) < per_page:
            break
        page += 1
    return items


class GitHubKitAdapter(SourceTrackerBase):
    """GitHub client adapter for the githubkit library."""

    def __init__(self, client: GitHubClient) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client

    @classmethod
    async def create(cls, config: GitHubConfig) -> Self:
        """Create a new GitHub client adapter.

        Args:
            config: Reconciled GitHub configuration (endpoint and credentials)

        Returns:
            Configured GitHubKitAdapter instance

        Raises:
            RuntimeError: If required parameters for the chosen auth type are missing
        """
        logger.info(
            "Creating client for GitHub instance",
            github_api_url=config.github_api_url,
            github_auth_type=config.github_authentication_type.value,
        )
        client = await get_github_client(config)
        return cls(client)

    # Authentication
    @retry_on_rate_limit()
    async def validate_token(self) -> str:
        """Validate the GitHub credential and return the authenticated login.

        Classic personal access tokens report their scopes in the
        `X-OAuth-Scopes` header; when that header is present it must include
        the `repo` scope. Fine-grained tokens and App installations do not
        send the header and are not checked.

        Raises:
            GitHubTokenScopeError: If a classic token lacks the `repo` scope.
        """
        response = await self.client.rest.users.async_get_authenticated()
        login = response.parsed_data.login
        logger.info("Authenticated as GitHub user", login=login)

        scopes_header = response.headers.get("x-oauth-scopes")
        if scopes_header is not None:
            scopes = [scope.strip() for scope in scopes_header.split(",") if scope.strip()]
            if REQUIRED_TOKEN_SCOPE not in scopes:
                logger.error("GitHub token missing required scope", required_scope=REQUIRED_TOKEN_SCOPE, current_scopes=scopes)
                raise GitHubTokenScopeError(REQUIRED_TOKEN_SCOPE, scopes)
        return login

    # Repository operations
    @retry_on_rate_limit()
    async def get_repository(self, owner: str, repo: str) -> FullRepository:
        """Get a repository."""
        response: Response[FullRepository] = await self.client.rest.repos.async_get(owner=owner, repo=repo)
        return response.parsed_data

    # Issue operations
    @retry_on_rate_limit()
    async def list_repository_issues(self, owner: str, repo: str, since: datetime | None = None, per_page: int = 100) -> list[Issue]:
        """List all issues and pull requests of a repository in every state, handling pagination."""
        params: dict[str, Any] = {"since": since} if since is not None else {}

        async def _fetch_page(page: int) -> list[Issue]:
            response: Response[list[Issue]] = await self.client.rest.issues.async_list_for_repo(
                owner=owner,
                repo=repo,
                state="all",
                per_page=per_page,
                page=page,
                **params,
            )
            return response.parsed_data

        return await paginate(_fetch_page, per_page)

    async def fetch_repository_issues(self, repo: str, authors: list[str] | None = None, since: datetime | None = None) -> list[SourceIssue]:
        """Fetch the issues of a single repository, excluding pull requests.

        A repository that cannot be read contributes no issues; the problem is
        logged rather than raised so that other repositories are still fetched.
        """
        owner, repo_name = split_repository(repo)
        wanted_authors = {author.lower() for author in authors or []}
        try:
            repository = await self.get_repository(owner, repo_name)
            permissions = getattr(repository, "permissions", None)
            if not permissions or not getattr(permissions, "pull", False):
                logger.error("No read access to repository", repo=repo)
                return []
            github_issues = await self.list_repository_issues(owner, repo_name, since=since)
        except RequestFailed as exc:
            if exc.response.status_code == 404:
                logger.error("Repository not found or no access", repo=repo)
            else:
                logger.error("Error fetching repository issues", repo=repo, status_code=exc.response.status_code, error=str(exc))
            return []

        issues: list[SourceIssue] = []
        for github_issue in github_issues:
            if getattr(github_issue, "pull_request", None):
                continue
            user = getattr(github_issue, "user", None)
            if not user:
                continue
            if wanted_authors and user.login.lower() not in wanted_authors:
                continue
            issues.append(SourceIssue.from_github(github_issue))
        logger.info("Fetched repository issues", repo=repo, issue_count=len(issues))
        return issues

    async def fetch_issues(
        self,
        repos: list[str],
        authors: list[str] | None = None,
        since: datetime | None = None,
    ) -> list[SourceIssue]:
        """Fetch issues from several repositories concurrently and flatten the results."""
        issues_per_repo = await asyncio.gather(*(self.fetch_repository_issues(repo, authors=authors, since=since) for repo in repos))
        return [issue for repo_issues in issues_per_repo for issue in repo_issues]

    @retry_on_rate_limit()
    async def issue_exists(self, issue_url: str) -> bool:
        """Check whether the GitHub issue behind a web URL still exists.

        Deleted issues answer with 410 Gone and inaccessible ones with 404;
        both count as no longer existing. Any other failure is raised.
        """
        owner, repo, issue_number = parse_issue_url(issue_url)
        try:
            await self.client.rest.issues.async_get(owner=owner, repo=repo, issue_number=issue_number)
        except RequestFailed as exc:
            if exc.response.status_code in MISSING_ISSUE_STATUS_CODES:
                logger.info("GitHub issue no longer exists", issue_url=issue_url, status_code=exc.response.status_code)
                return False
            raise
        return True

    # User operations
    @retry_on_rate_limit()
    async def user_exists(self, username: str) -> bool:
        """Check whether a GitHub user exists."""
        try:
            await self.client.rest.users.async_get_by_username(username=username)
        except RequestFailed as exc:
            if exc.response.status_code == 404:
                return False
            raise
        return True

    # Listing operations
    @retry_on_rate_limit()
    async def list_organization_memberships(self, per_page: int = 100) -> list[OrgMembership]:
        """List the organization memberships of the authenticated user, handling pagination."""

        async def _fetch_page(page: int) -> list[OrgMembership]:
            response: Response[list[OrgMembership]] = await self.client.rest.orgs.async_list_memberships_for_authenticated_user(
                per_page=per_page, page=page
            )
            return response.parsed_data

        return await paginate(_fetch_page, per_page)

    @retry_on_rate_limit()
    async def list_organization_repositories(self, org_name: str, per_page: int = 100) -> list[MinimalRepository]:
        """List all repositories for an organization, handling pagination."""

        async def _fetch_page(page: int) -> list[MinimalRepository]:
            response: Response[list[MinimalRepository]] = await self.client.rest.repos.async_list_for_org(org=org_name, per_page=per_page, page=page)
            return response.parsed_data

        logger.info("Fetching repositories for organization", org=org_name)
        repos = await paginate(_fetch_page, per_page)
        logger.info("Fetched all repositories for organization", org=org_name, total_repos=len(repos))
        return repos

    @retry_on_rate_limit()
    async def list_user_repositories(self, per_page: int = 100) -> list[Repository]:
        """List all repositories of the authenticated user, handling pagination."""

        async def _fetch_page(page: int) -> list[Repository]:
            response: Response[list[Repository]] = await self.client.rest.repos.async_list_for_authenticated_user(per_page=per_page, page=page)
            return response.parsed_data

        return await paginate(_fetch_page, per_page)
