"""Contains unit tests for the synchronize utils."""

from datetime import datetime, timezone
from typing import Callable

import pytest

from github_linear_sync.synchronize.models import SourceIssue
from github_linear_sync.synchronize.utils import create_github_title, derived_title, format_sync_timestamp


def test_create_github_title() -> None:
    """Test the derived title format."""
    assert create_github_title("acme/widgets", 42, "Fix the thing") == "[🛠️GH] acme/widgets#42: Fix the thing"


def test_derived_title_uses_issue_fields(make_source_issue: Callable[..., SourceIssue]) -> None:
    """Test that the derived title of a source issue uses its repository, number and title."""
    source_issue = make_source_issue(number=8, title="Broken link", repository="acme/docs")
    assert derived_title(source_issue) == "[🛠️GH] acme/docs#8: Broken link"


@pytest.mark.parametrize(
    "first,second",
    [
        pytest.param(("acme/widgets", 1, "Bug"), ("acme/widgets", 2, "Bug"), id="different number"),
        pytest.param(("acme/widgets", 1, "Bug"), ("acme/gadgets", 1, "Bug"), id="different repository"),
        pytest.param(("acme/widgets", 1, "Bug"), ("acme/widgets", 1, "Bug fix"), id="different title"),
        pytest.param(("acme/widgets", 1, "Bug"), ("other/widgets", 1, "Bug"), id="different owner"),
    ],
)
def test_derived_title_distinguishes_issues(first: tuple[str, int, str], second: tuple[str, int, str]) -> None:
    """Test that distinct issues never share a derived title."""
    assert create_github_title(*first) != create_github_title(*second)


@pytest.mark.parametrize(
    "now,expected",
    [
        pytest.param(datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc), "2024-01-02T03:04:05.678Z", id="truncates microseconds"),
        pytest.param(datetime(2024, 1, 2, 3, 4, 5), "2024-01-02T03:04:05.000Z", id="naive treated as utc"),
    ],
)
def test_format_sync_timestamp(now: datetime, expected: str) -> None:
    """Test the ISO-8601 timestamp format."""
    assert format_sync_timestamp(now) == expected
