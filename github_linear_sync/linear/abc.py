"""Base ABC for the mirror system client."""

from abc import ABC, abstractmethod

from github_linear_sync.synchronize.models import LinearProject, LinearTeam, MirrorRecord, TargetState, WorkflowState


class MirrorSystemBase(ABC):
    """Operations the synchronization engine and CLI need from the mirror system."""

    @abstractmethod
    async def list_projects(self) -> list[LinearProject]:
        """List every accessible project."""
        pass

    @abstractmethod
    async def list_teams(self) -> list[LinearTeam]:
        """List every accessible team."""
        pass

    @abstractmethod
    async def list_workflow_states(self, team_id: str) -> list[WorkflowState]:
        """List the workflow states of a team."""
        pass

    @abstractmethod
    async def query_issues(self, description_contains: str, title_equals: str) -> list[MirrorRecord]:
        """Find issues whose description contains a substring or whose title equals a string."""
        pass

    @abstractmethod
    async def create_issue(self, target_state: TargetState, project_id: str, team_id: str) -> MirrorRecord:
        """Create an issue in a project and team."""
        pass

    @abstractmethod
    async def update_issue(self, issue_id: str, target_state: TargetState) -> MirrorRecord:
        """Update an existing issue."""
        pass
