"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from datetime import datetime
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer import Option
from typing_extensions import Annotated

from github_linear_sync.configuration.driver import get_github_config, get_linear_config, get_sync_config
from github_linear_sync.configuration.env import settings
from github_linear_sync.configuration.exceptions import ConfigurationError
from github_linear_sync.configuration.models import GitHubConfig, LinearConfig, SyncConfig
from github_linear_sync.configuration.reconcile import parse_since
from github_linear_sync.github.adapter import GitHubKitAdapter
from github_linear_sync.linear.adapter import LinearAdapter
from github_linear_sync.synchronize.driver import resolve_batch_preconditions, run_sync_workflow
from github_linear_sync.synchronize.models import LinearProject, LinearTeam, SourceIssue
from github_linear_sync.synchronize.preflight import filter_syncable_issues
from github_linear_sync.synchronize.results import SyncResults
from github_linear_sync.synchronize.utils import derived_title
from github_linear_sync.utils.display import console, print_json, print_table
from github_linear_sync.utils.logging import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Synchronize GitHub issues into Linear.")

GitHubApiUrlOption = Annotated[str, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")]
GitHubPatTokenOption = Annotated[str | None, Option(envvar="GITHUB_PAT_TOKEN", help="GitHub Personal Access Token.")]
GitHubAppIdOption = Annotated[int | None, Option(envvar="GITHUB_APP_ID", help="GitHub App ID.")]
GitHubAppPrivateKeyPathOption = Annotated[Path | None, Option(envvar="GITHUB_APP_PRIVATE_KEY_PATH", help="Path to GitHub App private key.")]
GitHubAppInstallationIdOption = Annotated[int | None, Option(envvar="GITHUB_APP_INSTALLATION_ID", help="GitHub App Installation ID.")]
LinearApiKeyOption = Annotated[str | None, Option(envvar="LINEAR_API_KEY", help="Linear personal API key.")]
LinearApiUrlOption = Annotated[str, Option(envvar="LINEAR_API_URL", help="Linear GraphQL API URL.")]
DebugOption = Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")]


def fail(message: str) -> typer.Exit:
    """Report a fatal error on stderr and build the exit to raise."""
    typer.echo(message, err=True)
    return typer.Exit(1)


def issue_rows(issues: list[SourceIssue]) -> list[dict[str, object]]:
    return [
        {
            "Repository": issue.repository,
            "Number": issue.number,
            "Title": issue.title,
            "State": issue.state.value,
            "Author": issue.author,
            "Updated": issue.updated_at.strftime("%Y-%m-%d"),
        }
        for issue in issues
    ]


def print_sync_summary(results: SyncResults) -> None:
    """Print what a batch created, updated, skipped and failed."""
    typer.echo(f"Synced {len(results.succeeded)} issue(s): {results.created_count} created, {results.updated_count} updated")
    for success in results.successes:
        typer.echo(f"  {success.mirror_record.identifier or success.mirror_record.id}: {success.mirror_record.title}")
    if results.skipped:
        typer.echo(f"Skipped {len(results.skipped)} issue(s):")
        for skip in results.skipped:
            typer.echo(f"  {skip.reason}")
    if results.errors:
        typer.echo(f"Failed to sync {len(results.errors)} issue(s):", err=True)
        for error in results.errors:
            typer.echo(f"  {error.source_issue.url}: {error.reason}", err=True)


async def sync_github_issues(config: SyncConfig) -> SyncResults | None:
    """Fetch, filter, confirm and synchronize the configured GitHub issues.

    Returns None when there was nothing to do or the user cancelled.
    """
    github_adapter = await GitHubKitAdapter.create(config.github)
    linear_adapter = LinearAdapter.create(config.linear)
    try:
        if config.authors:
            exists = await asyncio.gather(*(github_adapter.user_exists(author) for author in config.authors))
            invalid_authors = [author for author, found in zip(config.authors, exists) if not found]
            if invalid_authors:
                raise fail(f"Invalid GitHub username(s): {', '.join(invalid_authors)}")

        await github_adapter.validate_token()
        preconditions = await resolve_batch_preconditions(linear_adapter, config.project, config.team_id)

        typer.echo(f"Fetching issues from {len(config.repos)} repository(ies)")
        source_issues = await github_adapter.fetch_issues(config.repos, authors=config.authors, since=config.since)
        if not source_issues:
            typer.echo("No GitHub issues found to sync")
            return None

        preflight = await filter_syncable_issues(linear_adapter, source_issues)
        if preflight.dropped:
            typer.echo(f"Ignoring {len(preflight.dropped)} closed issue(s) that were never synced to Linear")
        if not preflight.syncable:
            typer.echo("No GitHub issues left to sync")
            return None

        print_table(
            [{"Linear Title": derived_title(issue), "State": issue.state.value, "GitHub": issue.url} for issue in preflight.syncable],
            title=f"{len(preflight.syncable)} issue(s) to sync",
        )
        if config.interactive and not typer.confirm("Proceed with the sync?", default=False):
            typer.echo("Sync cancelled")
            return None

        return await run_sync_workflow(
            linear_adapter,
            github_adapter,
            preflight.syncable,
            project_reference=config.project,
            team_id=config.team_id,
            max_concurrency=config.max_concurrency,
            preconditions=preconditions,
        )
    finally:
        await linear_adapter.aclose()


@typer_app.command(name="sync")
def sync_cli(
    repos: Annotated[list[str], Option("--repos", "-r", help="Repository (owner/repo) to sync; may be repeated.")],
    team_id: Annotated[str, Option("--team", "-t", envvar="LINEAR_TEAM_ID", help="Linear team ID.")],
    project: Annotated[str, Option("--project", "-p", envvar="LINEAR_PROJECT", help="Linear project ID, slug or URL.")],
    authors: Annotated[list[str] | None, Option("--authors", "-a", help="Only sync issues opened by this GitHub user; may be repeated.")] = None,
    since: Annotated[str | None, Option("--since", "-s", help="Only sync issues updated since this date (YYYY-MM-DD).")] = None,
    interactive: Annotated[bool, Option("--interactive/--no-interactive", help="Preview the issues and ask for confirmation.")] = True,
    max_concurrency: Annotated[
        int, Option(envvar="SYNC_MAX_CONCURRENCY", help="Maximum number of issues synced at once (0 for no limit).")
    ] = settings.SYNC_MAX_CONCURRENCY,
    debug: DebugOption = settings.DEBUG,
    github_api_url: GitHubApiUrlOption = settings.GITHUB_API_URL,
    github_pat_token: GitHubPatTokenOption = None,
    github_app_id: GitHubAppIdOption = None,
    github_app_private_key_path: GitHubAppPrivateKeyPathOption = None,
    github_app_installation_id: GitHubAppInstallationIdOption = None,
    linear_api_key: LinearApiKeyOption = None,
    linear_api_url: LinearApiUrlOption = settings.LINEAR_API_URL,
) -> None:
    """Mirror GitHub issues into a Linear project."""
    configure_logging(debug)
    try:
        config = get_sync_config(
            repos=repos,
            team_id=team_id,
            project=project,
            authors=authors,
            since=since,
            interactive=interactive,
            max_concurrency=max_concurrency,
            debug=debug,
            github_api_url=github_api_url,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            linear_api_key=linear_api_key,
            linear_api_url=linear_api_url,
        )
    except ConfigurationError as exc:
        raise fail(str(exc)) from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    try:
        results = asyncio.run(sync_github_issues(config))
    except ConfigurationError as exc:
        raise fail(str(exc)) from exc

    if results is None:
        return
    print_sync_summary(results)
    if results.errors:
        raise typer.Exit(1)


# --- Linear commands ---
linear_app = typer.Typer(help="Linear-related commands")
linear_ls_app = typer.Typer(help="List Linear resources")


@linear_app.callback()
def linear_callback(
    ctx: typer.Context,
    linear_api_key: LinearApiKeyOption = None,
    linear_api_url: LinearApiUrlOption = settings.LINEAR_API_URL,
    debug: DebugOption = settings.DEBUG,
) -> None:
    """Set the Linear credentials for the current context."""
    configure_logging(debug)
    ctx.ensure_object(dict)
    try:
        ctx.obj["linear_config"] = get_linear_config(linear_api_key, linear_api_url)
    except ConfigurationError as exc:
        raise fail(str(exc)) from exc


async def _list_linear_resources(config: LinearConfig, teams: bool = True, projects: bool = True) -> dict[str, list[LinearTeam] | list[LinearProject]]:
    adapter = LinearAdapter.create(config)
    try:
        resources: dict[str, list[LinearTeam] | list[LinearProject]] = {}
        if teams:
            resources["teams"] = await adapter.list_teams()
        if projects:
            resources["projects"] = await adapter.list_projects()
        return resources
    finally:
        await adapter.aclose()


def _print_teams(teams: list[LinearTeam]) -> None:
    print_table(
        [
            {"Name": team.name, "ID": team.id, "Key": team.key, "Issue Count": team.issue_count, "Private": "Yes" if team.private else "No"}
            for team in teams
        ],
        title="Linear Teams",
    )


def _print_projects(projects: list[LinearProject]) -> None:
    print_table(
        [{"Name": project.name, "ID": project.id, "Slug": project.slug_id, "URL": project.url} for project in projects],
        title="Linear Projects",
    )


@linear_ls_app.callback(invoke_without_command=True)
def linear_ls_cli(ctx: typer.Context) -> None:
    """List the Linear teams and projects available to the API key."""
    if ctx.invoked_subcommand is not None:
        return
    resources = asyncio.run(_list_linear_resources(ctx.obj["linear_config"]))
    _print_teams(resources["teams"])
    _print_projects(resources["projects"])


@linear_ls_app.command(name="team")
def linear_ls_team_cli(
    ctx: typer.Context,
    as_json: Annotated[bool, Option("--json", help="Print JSON instead of a table.")] = False,
) -> None:
    """List the Linear teams available to the API key."""
    teams = asyncio.run(_list_linear_resources(ctx.obj["linear_config"], projects=False))["teams"]
    if as_json:
        print_json(teams)
        return
    _print_teams(teams)


@linear_ls_app.command(name="projects")
def linear_ls_projects_cli(
    ctx: typer.Context,
    as_json: Annotated[bool, Option("--json", help="Print JSON instead of a table.")] = False,
) -> None:
    """List the Linear projects available to the API key."""
    projects = asyncio.run(_list_linear_resources(ctx.obj["linear_config"], teams=False))["projects"]
    if as_json:
        print_json(projects)
        return
    _print_projects(projects)


linear_app.add_typer(linear_ls_app, name="ls")
typer_app.add_typer(linear_app, name="linear")


# --- GitHub commands ---
github_app = typer.Typer(help="GitHub-related commands")
github_ls_app = typer.Typer(help="List GitHub resources")


@github_app.callback()
def github_callback(
    ctx: typer.Context,
    github_api_url: GitHubApiUrlOption = settings.GITHUB_API_URL,
    github_pat_token: GitHubPatTokenOption = None,
    github_app_id: GitHubAppIdOption = None,
    github_app_private_key_path: GitHubAppPrivateKeyPathOption = None,
    github_app_installation_id: GitHubAppInstallationIdOption = None,
    debug: DebugOption = settings.DEBUG,
) -> None:
    """Set the GitHub credentials for the current context."""
    configure_logging(debug)
    ctx.ensure_object(dict)
    try:
        ctx.obj["github_config"] = get_github_config(
            github_api_url=github_api_url,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
        )
    except ConfigurationError as exc:
        raise fail(str(exc)) from exc


async def _list_organizations(config: GitHubConfig) -> list[dict[str, object]]:
    adapter = await GitHubKitAdapter.create(config)
    memberships = await adapter.list_organization_memberships()
    return [{"Organization": membership.organization.login, "Role": membership.role, "State": membership.state} for membership in memberships]


@github_ls_app.command(name="orgs")
def github_ls_orgs_cli(
    ctx: typer.Context,
    as_json: Annotated[bool, Option("--json", help="Print JSON instead of a table.")] = False,
) -> None:
    """List the organizations the authenticated user belongs to."""
    organizations = asyncio.run(_list_organizations(ctx.obj["github_config"]))
    if as_json:
        print_json(organizations)
        return
    print_table(organizations, title="GitHub Organizations")


async def _list_issues(config: GitHubConfig, org: str | None, repo: str | None, author: str | None, since: datetime | None) -> list[SourceIssue]:
    adapter = await GitHubKitAdapter.create(config)
    if repo:
        repos = [repo]
    elif org:
        repos = [repository.full_name for repository in await adapter.list_organization_repositories(org)]
    else:
        repos = [repository.full_name for repository in await adapter.list_user_repositories()]
    return await adapter.fetch_issues(repos, authors=[author] if author else None, since=since)


@github_ls_app.command(name="issues")
def github_ls_issues_cli(
    ctx: typer.Context,
    org: Annotated[str | None, Option("--org", "-o", help="List issues of every repository in this organization.")] = None,
    repo: Annotated[str | None, Option("--repo", "-r", help="List issues of this repository (owner/repo); wins over --org.")] = None,
    author: Annotated[str | None, Option("--author", "-a", help="Only list issues opened by this GitHub user.")] = None,
    since: Annotated[str | None, Option("--since", "-s", help="Only list issues updated since this date (YYYY-MM-DD).")] = None,
    as_json: Annotated[bool, Option("--json", help="Print JSON instead of a table.")] = False,
) -> None:
    """List GitHub issues of a repository, an organization or the authenticated user's repositories."""
    try:
        since_date = parse_since(since)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--since") from exc
    try:
        issues = asyncio.run(_list_issues(ctx.obj["github_config"], org=org, repo=repo, author=author, since=since_date))
    except ValueError as exc:
        raise fail(str(exc)) from exc
    if as_json:
        print_json(issues)
        return
    if not issues:
        console.print("No GitHub issues found")
        return
    print_table(issue_rows(issues), title="GitHub Issues")


github_app.add_typer(github_ls_app, name="ls")
typer_app.add_typer(github_app, name="github")
