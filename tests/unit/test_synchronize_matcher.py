"""Unit tests for finding the Linear issue mirroring a GitHub issue."""

from typing import Callable
from unittest.mock import AsyncMock

import pytest

from github_linear_sync.linear.abc import MirrorSystemBase
from github_linear_sync.linear.exceptions import LinearAPIError
from github_linear_sync.synchronize.matcher import choose_existing_issue, find_existing_issue
from github_linear_sync.synchronize.models import MirrorRecord, SourceIssue

ISSUE_URL = "https://github.com/acme/widgets/issues/1"
TITLE = "[🛠️GH] acme/widgets#1: Issue 1"


def test_choose_prefers_url_match_over_title_match(make_mirror_record: Callable[..., MirrorRecord]) -> None:
    """A record embedding the URL wins even when a title match comes first."""
    title_match = make_mirror_record("lin-title", title=TITLE, description="unrelated")
    url_match = make_mirror_record("lin-url", title="Renamed in Linear", description=f"body\n\nGitHub: {ISSUE_URL}")
    assert choose_existing_issue([title_match, url_match], ISSUE_URL, TITLE) == url_match


def test_choose_falls_back_to_title_match(make_mirror_record: Callable[..., MirrorRecord]) -> None:
    """Without a URL match the title match is chosen."""
    other = make_mirror_record("lin-other", title="Something else", description=None)
    title_match = make_mirror_record("lin-title", title=TITLE, description="no link")
    assert choose_existing_issue([other, title_match], ISSUE_URL, TITLE) == title_match


def test_choose_first_url_match_wins(make_mirror_record: Callable[..., MirrorRecord]) -> None:
    """Among several URL matches the first one returned by Linear is chosen."""
    first = make_mirror_record("lin-1", description=f"GitHub: {ISSUE_URL}")
    second = make_mirror_record("lin-2", description=f"GitHub: {ISSUE_URL}")
    assert choose_existing_issue([first, second], ISSUE_URL, TITLE) == first


def test_choose_nothing() -> None:
    """No candidates means no existing issue."""
    assert choose_existing_issue([], ISSUE_URL, TITLE) is None


@pytest.mark.asyncio
async def test_find_existing_issue_queries_url_and_title(
    make_source_issue: Callable[..., SourceIssue], make_mirror_record: Callable[..., MirrorRecord]
) -> None:
    """The lookup asks Linear for the URL in the description or the derived title."""
    record = make_mirror_record(title=TITLE)
    linear_adapter = AsyncMock(spec=MirrorSystemBase)
    linear_adapter.query_issues.return_value = [record]

    assert await find_existing_issue(linear_adapter, make_source_issue()) == record
    linear_adapter.query_issues.assert_awaited_once_with(description_contains=ISSUE_URL, title_equals=TITLE)


@pytest.mark.asyncio
async def test_find_existing_issue_none(make_source_issue: Callable[..., SourceIssue]) -> None:
    """An empty result means the GitHub issue was never mirrored."""
    linear_adapter = AsyncMock(spec=MirrorSystemBase)
    linear_adapter.query_issues.return_value = []
    assert await find_existing_issue(linear_adapter, make_source_issue()) is None


@pytest.mark.asyncio
async def test_find_existing_issue_propagates_errors(make_source_issue: Callable[..., SourceIssue]) -> None:
    """Query failures are not mistaken for a missing mirror."""
    linear_adapter = AsyncMock(spec=MirrorSystemBase)
    linear_adapter.query_issues.side_effect = LinearAPIError("boom")
    with pytest.raises(LinearAPIError):
        await find_existing_issue(linear_adapter, make_source_issue())
