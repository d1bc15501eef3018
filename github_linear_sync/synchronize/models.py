"""Data models shared by the synchronization engine."""

from datetime import datetime
from enum import Enum
from typing import Any

from githubkit.versions.latest.models import Issue
from pydantic import BaseModel, ConfigDict

from github_linear_sync.utils.constants import LAST_SYNCED_LINE_PREFIX
from github_linear_sync.utils.github import repository_from_url


class IssueState(str, Enum):
    """Lifecycle state of a GitHub issue."""

    OPEN = "open"
    CLOSED = "closed"

    @classmethod
    def parse(cls, value: str) -> "IssueState":
        """Parse a state string case-insensitively."""
        return cls(value.lower())


class SourceIssue(BaseModel):
    """A GitHub issue as seen by the synchronization engine."""

    model_config = ConfigDict(frozen=True)

    id: int
    number: int
    title: str
    body: str | None = None
    state: IssueState
    url: str
    repository: str
    author: str | None = None
    updated_at: datetime

    @property
    def is_closed(self) -> bool:
        """Whether the GitHub issue is closed."""
        return self.state == IssueState.CLOSED

    @classmethod
    def from_github(cls, issue: Issue) -> "SourceIssue":
        """Build a source issue from a githubkit issue."""
        repository_url = getattr(issue, "repository_url", None)
        repository = repository_from_url(repository_url if isinstance(repository_url, str) and repository_url else issue.html_url)
        user = getattr(issue, "user", None)
        return cls(
            id=issue.id,
            number=issue.number,
            title=issue.title,
            body=issue.body or None,
            state=IssueState.parse(issue.state),
            url=issue.html_url,
            repository=repository,
            author=getattr(user, "login", None),
            updated_at=issue.updated_at,
        )


class MirrorRecord(BaseModel):
    """A Linear issue mirroring a GitHub issue."""

    id: str
    identifier: str | None = None
    title: str
    description: str | None = None
    state_id: str | None = None
    state_name: str | None = None
    project_id: str | None = None
    team_id: str | None = None
    url: str | None = None

    @classmethod
    def from_linear(cls, node: dict[str, Any]) -> "MirrorRecord":
        """Build a mirror record from a Linear GraphQL issue node."""
        state = node.get("state") or {}
        project = node.get("project") or {}
        team = node.get("team") or {}
        return cls(
            id=node["id"],
            identifier=node.get("identifier"),
            title=node["title"],
            description=node.get("description"),
            state_id=state.get("id"),
            state_name=state.get("name"),
            project_id=project.get("id"),
            team_id=team.get("id"),
            url=node.get("url"),
        )


class LinearProject(BaseModel):
    """A Linear project."""

    id: str
    name: str
    slug_id: str
    url: str

    @classmethod
    def from_linear(cls, node: dict[str, Any]) -> "LinearProject":
        """Build a project from a Linear GraphQL project node."""
        return cls(id=node["id"], name=node["name"], slug_id=node["slugId"], url=node["url"])


class LinearTeam(BaseModel):
    """A Linear team."""

    id: str
    name: str
    key: str
    issue_count: int | None = None
    private: bool = False

    @classmethod
    def from_linear(cls, node: dict[str, Any]) -> "LinearTeam":
        """Build a team from a Linear GraphQL team node."""
        return cls(
            id=node["id"],
            name=node["name"],
            key=node["key"],
            issue_count=node.get("issueCount"),
            private=bool(node.get("private")),
        )


class WorkflowState(BaseModel):
    """A Linear workflow state."""

    id: str
    name: str
    type: str | None = None


class WorkflowStagePair(BaseModel):
    """The two workflow states a mirrored issue can be placed in."""

    model_config = ConfigDict(frozen=True)

    backlog: WorkflowState
    done: WorkflowState


class TargetState(BaseModel):
    """The state a Linear issue should be in after synchronization."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    state_id: str

    def without_sync_timestamp(self) -> "TargetState":
        """Return a copy whose description lacks the Last Synced line."""
        lines = [line for line in self.description.split("\n") if not line.startswith(LAST_SYNCED_LINE_PREFIX)]
        return self.model_copy(update={"description": "\n".join(lines)})
