"""Finds the Linear issue mirroring a GitHub issue."""

import structlog

from github_linear_sync.linear.abc import MirrorSystemBase
from github_linear_sync.synchronize.models import MirrorRecord, SourceIssue
from github_linear_sync.synchronize.utils import derived_title

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def choose_existing_issue(candidates: list[MirrorRecord], issue_url: str, title: str) -> MirrorRecord | None:
    """Pick the best match among Linear issues returned for a GitHub issue.

    A record whose description embeds the GitHub URL wins over a record that
    only matches by title. Within each group the first record in Linear's
    result order is taken; that order carries no further meaning.
    """
    for candidate in candidates:
        if candidate.description and issue_url in candidate.description:
            return candidate
    for candidate in candidates:
        if candidate.title == title:
            return candidate
    return candidates[0] if candidates else None


async def find_existing_issue(linear_adapter: MirrorSystemBase, source_issue: SourceIssue) -> MirrorRecord | None:
    """Find the Linear issue mirroring a GitHub issue, if any.

    Matches on the GitHub URL appearing in the description or on the derived
    title. Query failures propagate to the caller.
    """
    title = derived_title(source_issue)
    candidates = await linear_adapter.query_issues(description_contains=source_issue.url, title_equals=title)
    existing_issue = choose_existing_issue(candidates, source_issue.url, title)
    if existing_issue is None:
        logger.debug("No Linear issue found for GitHub issue", issue_url=source_issue.url)
    else:
        if len(candidates) > 1:
            logger.warning(
                "Multiple Linear issues match GitHub issue",
                issue_url=source_issue.url,
                candidate_ids=[candidate.id for candidate in candidates],
                chosen_id=existing_issue.id,
            )
        logger.debug("Found Linear issue for GitHub issue", issue_url=source_issue.url, linear_id=existing_issue.id)
    return existing_issue
