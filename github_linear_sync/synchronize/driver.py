"""Orchestrates the synchronization of GitHub issues into Linear."""

import structlog

from github_linear_sync.github.abc import SourceTrackerBase
from github_linear_sync.linear.abc import MirrorSystemBase
from github_linear_sync.synchronize.issues import sync_issues
from github_linear_sync.synchronize.models import LinearProject, SourceIssue, WorkflowStagePair
from github_linear_sync.synchronize.results import SyncResults
from github_linear_sync.synchronize.upsert import get_workflow_stage_pair, require_project

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

BatchPreconditions = tuple[LinearProject, WorkflowStagePair]


async def resolve_batch_preconditions(linear_adapter: MirrorSystemBase, project_reference: str, team_id: str) -> BatchPreconditions:
    """Resolve the Linear project and the team's Backlog and Done states.

    Raises a ConfigurationError when either cannot be resolved.
    """
    project = await require_project(linear_adapter, project_reference)
    stages = await get_workflow_stage_pair(linear_adapter, team_id)
    logger.info(
        "Resolved batch preconditions",
        project_id=project.id,
        team_id=team_id,
        backlog_state_id=stages.backlog.id,
        done_state_id=stages.done.id,
    )
    return project, stages


async def run_sync_workflow(
    linear_adapter: MirrorSystemBase,
    github_adapter: SourceTrackerBase,
    source_issues: list[SourceIssue],
    project_reference: str,
    team_id: str,
    max_concurrency: int | None = None,
    preconditions: BatchPreconditions | None = None,
) -> SyncResults:
    """Run the sync workflow for a batch of GitHub issues.

    The project and the team's workflow states are resolved once, before any
    issue is touched, unless already resolved ones are passed in. Failing to
    resolve either raises a ConfigurationError and aborts the whole batch.
    """
    if preconditions is None:
        preconditions = await resolve_batch_preconditions(linear_adapter, project_reference, team_id)
    project, stages = preconditions
    return await sync_issues(
        linear_adapter,
        github_adapter,
        source_issues,
        project=project,
        team_id=team_id,
        stages=stages,
        max_concurrency=max_concurrency,
    )
