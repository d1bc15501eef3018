"""Reconcile configuration between CLI arguments and environment variables."""

from datetime import datetime, timezone
from pathlib import Path

from github_linear_sync.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    RequiredConfigurationElementError,
)
from github_linear_sync.configuration.models import (
    GitHubAuthenticationType,
    GitHubConfig,
    LinearConfig,
    SyncConfig,
)
from github_linear_sync.utils.github import split_repository


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Args:
        github_pat_token (str | None): The GitHub PAT token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (Path | None): The path to the GitHub App private key.
        github_app_installation_id (int | None): The GitHub App installation ID.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If both or neither of PAT and App configurations are defined,
            or if the App configuration is incomplete.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    app_settings = {
        "GitHub App ID": (github_app_id, "--github-app-id", "GITHUB_APP_ID"),
        "GitHub App private key path": (github_app_private_key_path, "--github-app-private-key-path", "GITHUB_APP_PRIVATE_KEY_PATH"),
        "GitHub App installation ID": (github_app_installation_id, "--github-app-installation-id", "GITHUB_APP_INSTALLATION_ID"),
    }
    any_app_setting = any(value for value, _, _ in app_settings.values())

    if github_pat_token and any_app_setting:
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if not any_app_setting:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please provide either a PAT or a GitHub App configuration."
        )

    missing = [f"{name} (command line option {cli_name}, environment variable {env_name})" for name, (value, cli_name, env_name) in app_settings.items() if not value]
    if missing:
        raise GitHubAuthenticationConfigurationUndefinedError("Incomplete GitHub App configuration - missing settings include " + ", ".join(missing))
    return GitHubAuthenticationType.APP


async def validate_linear_configuration(linear_api_key: str | None, linear_api_url: str) -> LinearConfig:
    """Validates that a Linear API key is configured.

    Raises:
        RequiredConfigurationElementError: If no Linear API key is provided.
    """
    if not linear_api_key:
        raise RequiredConfigurationElementError(name="Linear API key", cli_name="--linear-api-key", env_name="LINEAR_API_KEY")
    return LinearConfig(linear_api_key=linear_api_key, linear_api_url=linear_api_url)


def parse_since(since: str | None) -> datetime | None:
    """Parse a YYYY-MM-DD date into a timezone-aware UTC datetime at midnight.

    Raises:
        ValueError: If the value is not a valid YYYY-MM-DD date.
    """
    if not since:
        return None
    try:
        parsed = datetime.strptime(since, "%Y-%m-%d")
    except ValueError as exc:
        raise ValueError(f"Invalid date {since!r}, expected YYYY-MM-DD") from exc
    return parsed.replace(tzinfo=timezone.utc)


async def reconcile_github_configuration(
    github_api_url: str,
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubConfig:
    """Build the GitHub configuration after validating the authentication settings."""
    github_auth_type = await validate_github_authentication_configuration(
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
    )
    return GitHubConfig(
        github_api_url=github_api_url,
        github_authentication_type=github_auth_type,
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
    )


async def reconcile_sync_configuration(
    cli_repos: list[str],
    cli_team_id: str,
    cli_project: str,
    cli_authors: list[str] | None,
    cli_since: str | None,
    cli_interactive: bool,
    cli_max_concurrency: int | None,
    cli_debug: bool,
    cli_github_api_url: str,
    cli_github_pat_token: str | None,
    cli_github_app_id: int | None,
    cli_github_app_private_key_path: Path | None,
    cli_github_app_installation_id: int | None,
    cli_linear_api_key: str | None,
    cli_linear_api_url: str,
) -> SyncConfig:
    """Reconciles the sync command configuration.

    Validates credentials for both systems and the format of every repository
    before anything talks to a remote API.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If GitHub authentication is not usable.
        RequiredConfigurationElementError: If the Linear API key is missing.
        ValueError: If a repository or the since date is malformed.
    """
    github_config = await reconcile_github_configuration(
        github_api_url=cli_github_api_url,
        github_pat_token=cli_github_pat_token,
        github_app_id=cli_github_app_id,
        github_app_private_key_path=cli_github_app_private_key_path,
        github_app_installation_id=cli_github_app_installation_id,
    )
    linear_config = await validate_linear_configuration(cli_linear_api_key, cli_linear_api_url)
    for repo in cli_repos:
        split_repository(repo)
    return SyncConfig(
        github=github_config,
        linear=linear_config,
        repos=cli_repos,
        team_id=cli_team_id,
        project=cli_project,
        authors=list(cli_authors or []),
        since=parse_since(cli_since),
        interactive=cli_interactive,
        max_concurrency=cli_max_concurrency or None,
        debug=cli_debug,
    )
