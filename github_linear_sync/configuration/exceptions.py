"""Contains exceptions raised when reconciling application configuration.

Every exception here is fatal to a whole run. They are raised before any
issue is synchronized and reported by the CLI entry point.
"""


class ConfigurationError(Exception):
    """Base class for errors that abort a run before any issue is processed."""

    pass


class GitHubAuthenticationConfigurationUndefinedError(ConfigurationError):
    """Raised when the GitHub authentication configuration is undefined."""

    pass


class GitHubTokenScopeError(ConfigurationError):
    """Raised when the GitHub token lacks a scope required for synchronization."""

    def __init__(self, missing_scope: str, current_scopes: list[str]) -> None:
        """Initializes the exception with the missing scope and the scopes the token has."""
        super().__init__(f"GitHub token missing required {missing_scope} scope (current scopes: {', '.join(current_scopes) or 'none'})")
        self.missing_scope = missing_scope
        self.current_scopes = current_scopes


class RequiredConfigurationElementError(ConfigurationError):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, cli_name: str, env_name: str) -> None:
        """Initializes the exception with the name of the missing element."""
        super().__init__(f"Missing required configuration element: {name} (command line option {cli_name}, environment variable {env_name})")
        self.name = name
        self.cli_name = cli_name
        self.env_name = env_name


class ProjectNotFoundError(ConfigurationError):
    """Raised when a Linear project reference matches none of the accessible projects."""

    def __init__(self, reference: str) -> None:
        """Initializes the exception with the unresolved project reference."""
        super().__init__(f"Linear project not found: {reference}")
        self.reference = reference


class MissingWorkflowStatesError(ConfigurationError):
    """Raised when a Linear team lacks a workflow state the synchronization relies on."""

    def __init__(self, team_id: str, missing: list[str]) -> None:
        """Initializes the exception with the team and the names of the missing states."""
        super().__init__(f"Required workflow states missing for team {team_id}: {', '.join(missing)}")
        self.team_id = team_id
        self.missing = missing
