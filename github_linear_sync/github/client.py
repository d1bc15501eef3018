"""Sets up the authenticated githubkit client."""

from pathlib import Path
from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import (
    AppAuthStrategy,
    AppInstallationAuthStrategy,
    TokenAuthStrategy,
)

from github_linear_sync.configuration.models import GitHubAuthenticationType, GitHubConfig

GitHubClient: TypeAlias = GitHub[AppInstallationAuthStrategy] | GitHub[TokenAuthStrategy]


async def get_github_app_client(
    github_app_id: int,
    github_app_private_key_path: Path,
    github_app_installation_id: int,
    github_api_url: str,
) -> GitHub[AppInstallationAuthStrategy]:
    """Returns an authenticated GitHub client scoped to a GitHub App installation."""
    try:
        private_key = Path(github_app_private_key_path).read_text()
    except OSError as e:
        raise ValueError(f"Failed to read GitHub App private key from {github_app_private_key_path}: {e}") from e
    auth = AppAuthStrategy(app_id=github_app_id, private_key=private_key)
    # Disable HTTP caching to always get fresh data
    app_client = GitHub(auth=auth, base_url=github_api_url, http_cache=False)
    return app_client.with_auth(app_client.auth.as_installation(github_app_installation_id))


async def get_github_pat_client(github_pat_token: str, github_api_url: str) -> GitHub[TokenAuthStrategy]:
    """Returns an authenticated GitHub client using GitHub PAT credentials."""
    # Disable HTTP caching to always get fresh data
    return GitHub(auth=TokenAuthStrategy(github_pat_token), base_url=github_api_url, http_cache=False)


async def get_github_client(config: GitHubConfig) -> GitHubClient:
    """Returns an authenticated GitHub client using either GitHub App or PAT credentials.

    Supports custom base URL for GitHub Enterprise Server (GHES).
    Raises RuntimeError if the credentials for the configured authentication type are missing.
    """
    if config.github_authentication_type == GitHubAuthenticationType.APP:
        if not (config.github_app_id and config.github_app_private_key_path and config.github_app_installation_id):
            raise RuntimeError("GitHub App authentication requires app_id, private_key_path, and installation_id in config.")
        return await get_github_app_client(
            config.github_app_id,
            config.github_app_private_key_path,
            config.github_app_installation_id,
            config.github_api_url,
        )
    if not config.github_pat_token:
        raise RuntimeError("GitHub PAT authentication requires github_pat_token in config.")
    return await get_github_pat_client(config.github_pat_token, config.github_api_url)
