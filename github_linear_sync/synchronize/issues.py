"""Contains synchronization logic for mirroring GitHub issues into Linear."""

import asyncio
import contextlib
import time
from datetime import datetime, timezone

import structlog

from github_linear_sync.github.abc import SourceTrackerBase
from github_linear_sync.linear.abc import MirrorSystemBase
from github_linear_sync.synchronize.matcher import find_existing_issue
from github_linear_sync.synchronize.models import LinearProject, SourceIssue, WorkflowStagePair
from github_linear_sync.synchronize.results import SyncFailed, SyncOutcome, SyncResults, SyncSucceeded
from github_linear_sync.synchronize.state import derive_target_state
from github_linear_sync.synchronize.upsert import apply_target_state

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def sync_issue(
    linear_adapter: MirrorSystemBase,
    github_adapter: SourceTrackerBase,
    source_issue: SourceIssue,
    project: LinearProject,
    team_id: str,
    stages: WorkflowStagePair,
    now: datetime | None = None,
) -> SyncOutcome:
    """Mirror one GitHub issue into Linear and report the outcome.

    Never raises: every exception is converted into a SyncFailed outcome so
    that one issue cannot affect the others in its batch.
    """
    log = logger.bind(issue_url=source_issue.url)
    try:
        existing_issue = await find_existing_issue(linear_adapter, source_issue)
        source_still_live = await github_adapter.issue_exists(source_issue.url)
        target_state = derive_target_state(
            source_issue,
            mirror_exists=existing_issue is not None,
            source_still_live=source_still_live,
            stages=stages,
            now=now or datetime.now(timezone.utc),
        )
        record, created = await apply_target_state(linear_adapter, existing_issue, source_issue, target_state, project, team_id)
    except Exception as exc:
        failure = SyncFailed(source_issue=source_issue, reason=str(exc) or type(exc).__name__, cause=exc)
        if failure.skipped:
            log.info("Skipped GitHub issue", reason=failure.reason)
        else:
            log.error("Failed to sync GitHub issue", reason=failure.reason, error_type=type(exc).__name__)
        return failure
    log.info("Synced GitHub issue", linear_id=record.id, identifier=record.identifier, created=created)
    return SyncSucceeded(source_issue=source_issue, mirror_record=record, created=created)


async def sync_issues(
    linear_adapter: MirrorSystemBase,
    github_adapter: SourceTrackerBase,
    source_issues: list[SourceIssue],
    project: LinearProject,
    team_id: str,
    stages: WorkflowStagePair,
    max_concurrency: int | None = None,
    now: datetime | None = None,
) -> SyncResults:
    """Mirror every GitHub issue concurrently and wait for all of them to settle.

    `max_concurrency` bounds how many issues are in flight at once; None or
    zero means no bound.
    """
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def _bounded(source_issue: SourceIssue) -> SyncOutcome:
        async with semaphore if semaphore is not None else contextlib.nullcontext():
            return await sync_issue(linear_adapter, github_adapter, source_issue, project, team_id, stages, now=now)

    start_time = time.time()
    logger.info("Syncing GitHub issues to Linear", issue_count=len(source_issues), max_concurrency=max_concurrency)
    outcomes = await asyncio.gather(*(_bounded(source_issue) for source_issue in source_issues))
    results = SyncResults(outcomes=list(outcomes))
    logger.info(
        "Synced GitHub issues to Linear",
        duration=round(time.time() - start_time, 2),
        created=results.created_count,
        updated=results.updated_count,
        skipped=len(results.skipped),
        failed=len(results.errors),
    )
    return results
