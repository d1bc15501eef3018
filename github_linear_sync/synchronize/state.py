"""Computes the state a Linear issue should be in for a GitHub issue."""

from datetime import datetime

import structlog

from github_linear_sync.synchronize.models import SourceIssue, TargetState, WorkflowStagePair, WorkflowState
from github_linear_sync.synchronize.utils import derived_title, format_sync_timestamp
from github_linear_sync.utils.constants import GITHUB_URL_LINE_TEMPLATE, LAST_SYNCED_LINE_PREFIX, ORPHAN_WARNING_LINE

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def build_description(source_issue: SourceIssue, source_still_live: bool, now: datetime) -> str:
    """Build the Linear description for a GitHub issue.

    The GitHub body is kept exactly as written and is followed by the GitHub
    URL, the deleted-issue warning when the GitHub issue is gone, and the
    synchronization timestamp. Empty segments are dropped and the rest are
    newline-joined.
    """
    body = source_issue.body if source_issue.body and source_issue.body.strip() else ""
    segments = [
        body,
        GITHUB_URL_LINE_TEMPLATE.format(url=source_issue.url),
        "" if source_still_live else ORPHAN_WARNING_LINE,
        f"{LAST_SYNCED_LINE_PREFIX}{format_sync_timestamp(now)}",
    ]
    return "\n".join(segment for segment in segments if segment)


def select_workflow_state(source_issue: SourceIssue, source_still_live: bool, stages: WorkflowStagePair) -> WorkflowState:
    """Closed GitHub issues and deleted ones belong in Done, everything else in Backlog."""
    if source_issue.is_closed or not source_still_live:
        return stages.done
    return stages.backlog


def derive_target_state(
    source_issue: SourceIssue,
    mirror_exists: bool,
    source_still_live: bool,
    stages: WorkflowStagePair,
    now: datetime,
) -> TargetState:
    """Compute the title, description and workflow state for a GitHub issue's Linear mirror."""
    workflow_state = select_workflow_state(source_issue, source_still_live, stages)
    logger.debug(
        "Derived target state",
        issue_url=source_issue.url,
        mirror_exists=mirror_exists,
        source_still_live=source_still_live,
        workflow_state=workflow_state.name,
    )
    return TargetState(
        title=derived_title(source_issue),
        description=build_description(source_issue, source_still_live, now),
        state_id=workflow_state.id,
    )
