"""Drops GitHub issues that would only be refused before a batch runs."""

import asyncio
from dataclasses import dataclass, field

import structlog

from github_linear_sync.linear.abc import MirrorSystemBase
from github_linear_sync.synchronize.matcher import find_existing_issue
from github_linear_sync.synchronize.models import SourceIssue

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


@dataclass
class PreflightResult:
    """GitHub issues split into those worth synchronizing and those dropped."""

    syncable: list[SourceIssue] = field(default_factory=list)
    dropped: list[SourceIssue] = field(default_factory=list)


async def should_sync(linear_adapter: MirrorSystemBase, source_issue: SourceIssue) -> bool:
    """Closed GitHub issues without a Linear issue are not worth synchronizing.

    Open issues are kept without a lookup. When the lookup fails the issue is
    kept so that the failure is reported by the batch itself.
    """
    if not source_issue.is_closed:
        return True
    try:
        existing_issue = await find_existing_issue(linear_adapter, source_issue)
    except Exception as exc:
        logger.warning("Could not look up Linear issue during pre-flight", issue_url=source_issue.url, error=str(exc))
        return True
    return existing_issue is not None


async def filter_syncable_issues(linear_adapter: MirrorSystemBase, source_issues: list[SourceIssue]) -> PreflightResult:
    """Split GitHub issues into syncable and dropped ones, looking up Linear concurrently."""
    decisions = await asyncio.gather(*(should_sync(linear_adapter, issue) for issue in source_issues))
    result = PreflightResult()
    for source_issue, keep in zip(source_issues, decisions):
        (result.syncable if keep else result.dropped).append(source_issue)
    logger.info(
        "Filtered closed GitHub issues without Linear issues",
        total=len(source_issues),
        syncable=len(result.syncable),
        dropped=len(result.dropped),
    )
    return result
