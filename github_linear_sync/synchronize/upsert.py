"""Creates or updates the Linear issue mirroring a GitHub issue."""

from dataclasses import dataclass

import structlog

from github_linear_sync.configuration.exceptions import MissingWorkflowStatesError, ProjectNotFoundError
from github_linear_sync.linear.abc import MirrorSystemBase
from github_linear_sync.synchronize.exceptions import SkippedClosedIssueError
from github_linear_sync.synchronize.models import LinearProject, MirrorRecord, SourceIssue, TargetState, WorkflowStagePair
from github_linear_sync.utils.constants import BACKLOG_STATE_NAME, DONE_STATE_NAME

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ProjectResolved:
    """A project reference matched an accessible Linear project."""

    project: LinearProject


@dataclass(frozen=True)
class ProjectNotFound:
    """A project reference matched no accessible Linear project."""

    reference: str


ProjectResolution = ProjectResolved | ProjectNotFound


def resolve_project(projects: list[LinearProject], reference: str) -> ProjectResolution:
    """Resolve a loosely-specified project reference.

    The reference may be a project ID, a slug ID or any fragment of the
    project URL. Exact ID matches win over slug matches, which win over URL
    fragments; within a kind the first project listed wins.
    """
    reference = reference.strip()
    if reference:
        for matches in (
            lambda project: project.id == reference,
            lambda project: project.slug_id == reference,
            lambda project: reference in project.url,
        ):
            for project in projects:
                if matches(project):
                    return ProjectResolved(project)
    return ProjectNotFound(reference)


async def require_project(linear_adapter: MirrorSystemBase, reference: str) -> LinearProject:
    """Resolve a project reference against the accessible Linear projects.

    Raises:
        ProjectNotFoundError: If the reference matches no project.
    """
    projects = await linear_adapter.list_projects()
    resolution = resolve_project(projects, reference)
    if isinstance(resolution, ProjectNotFound):
        logger.error("No Linear project found matching reference", reference=reference, project_count=len(projects))
        raise ProjectNotFoundError(reference)
    logger.info("Resolved Linear project", reference=reference, project_id=resolution.project.id, project_name=resolution.project.name)
    return resolution.project


async def get_workflow_stage_pair(linear_adapter: MirrorSystemBase, team_id: str) -> WorkflowStagePair:
    """Look up the Backlog and Done workflow states of a team.

    Raises:
        MissingWorkflowStatesError: If either state does not exist for the team.
    """
    states = await linear_adapter.list_workflow_states(team_id)
    backlog = next((state for state in states if state.name == BACKLOG_STATE_NAME), None)
    done = next((state for state in states if state.name == DONE_STATE_NAME), None)
    if backlog is None or done is None:
        missing = [name for name, state in ((BACKLOG_STATE_NAME, backlog), (DONE_STATE_NAME, done)) if state is None]
        raise MissingWorkflowStatesError(team_id, missing)
    return WorkflowStagePair(backlog=backlog, done=done)


async def apply_target_state(
    linear_adapter: MirrorSystemBase,
    existing_issue: MirrorRecord | None,
    source_issue: SourceIssue,
    target_state: TargetState,
    project: LinearProject,
    team_id: str,
) -> tuple[MirrorRecord, bool]:
    """Write the target state to Linear with exactly one create or update call.

    Returns the resulting Linear issue and whether it was created.

    Raises:
        SkippedClosedIssueError: If the GitHub issue is closed and has no Linear issue yet.
    """
    if existing_issue is None and source_issue.is_closed:
        logger.info("Refusing to create Linear issue for closed GitHub issue", issue_url=source_issue.url)
        raise SkippedClosedIssueError(source_issue.url)

    if existing_issue is not None:
        record = await linear_adapter.update_issue(existing_issue.id, target_state)
        return record, False
    record = await linear_adapter.create_issue(target_state, project_id=project.id, team_id=team_id)
    return record, True
