"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio
from pathlib import Path

from github_linear_sync.configuration import reconcile
from github_linear_sync.configuration.models import GitHubConfig, LinearConfig, SyncConfig
from github_linear_sync.utils.constants import DEFAULT_GITHUB_API_URL, DEFAULT_LINEAR_API_URL


def get_sync_config(
    repos: list[str],
    team_id: str,
    project: str,
    authors: list[str] | None = None,
    since: str | None = None,
    interactive: bool = True,
    max_concurrency: int | None = None,
    debug: bool = False,
    github_api_url: str = DEFAULT_GITHUB_API_URL,
    github_pat_token: str | None = None,
    github_app_id: int | None = None,
    github_app_private_key_path: Path | None = None,
    github_app_installation_id: int | None = None,
    linear_api_key: str | None = None,
    linear_api_url: str = DEFAULT_LINEAR_API_URL,
) -> SyncConfig:
    """Synchronously get the reconciled sync configuration."""
    return asyncio.run(
        reconcile.reconcile_sync_configuration(
            cli_repos=repos,
            cli_team_id=team_id,
            cli_project=project,
            cli_authors=authors,
            cli_since=since,
            cli_interactive=interactive,
            cli_max_concurrency=max_concurrency,
            cli_debug=debug,
            cli_github_api_url=github_api_url,
            cli_github_pat_token=github_pat_token,
            cli_github_app_id=github_app_id,
            cli_github_app_private_key_path=github_app_private_key_path,
            cli_github_app_installation_id=github_app_installation_id,
            cli_linear_api_key=linear_api_key,
            cli_linear_api_url=linear_api_url,
        )
    )


def get_github_config(
    github_api_url: str = DEFAULT_GITHUB_API_URL,
    github_pat_token: str | None = None,
    github_app_id: int | None = None,
    github_app_private_key_path: Path | None = None,
    github_app_installation_id: int | None = None,
) -> GitHubConfig:
    """Synchronously get the reconciled GitHub configuration for the listing commands."""
    return asyncio.run(
        reconcile.reconcile_github_configuration(
            github_api_url=github_api_url,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
        )
    )


def get_linear_config(linear_api_key: str | None = None, linear_api_url: str = DEFAULT_LINEAR_API_URL) -> LinearConfig:
    """Synchronously get the reconciled Linear configuration for the listing commands."""
    return asyncio.run(reconcile.validate_linear_configuration(linear_api_key, linear_api_url))
