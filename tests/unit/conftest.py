"""Fixtures for unit tests."""

from datetime import datetime, timezone
from typing import Any, Callable, Generator

import httpx
import pytest
import structlog
from githubkit import Response
from githubkit.exception import RequestFailed

from github_linear_sync.synchronize.models import IssueState, LinearProject, MirrorRecord, SourceIssue, WorkflowStagePair, WorkflowState

@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_source_issue() -> Callable[..., SourceIssue]:
    """Build GitHub issues with sensible defaults."""

    def _make(number: int = 1, state: IssueState = IssueState.OPEN, **overrides: Any) -> SourceIssue:
        repository = overrides.pop("repository", "acme/widgets")
        fields: dict[str, Any] = {
            "id": 1000 + number,
            "number": number,
            "title": f"Issue {number}",
            "body": f"Body of issue {number}",
            "state": state,
            "url": f"https://github.com/{repository}/issues/{number}",
            "repository": repository,
            "author": "octocat",
            "updated_at": datetime(2024, 4, 1, tzinfo=timezone.utc),
        }
        fields.update(overrides)
        return SourceIssue(**fields)

    return _make


@pytest.fixture
def make_mirror_record() -> Callable[..., MirrorRecord]:
    """Build Linear issues with sensible defaults."""

    def _make(linear_id: str = "lin-1", title: str = "Linear issue", description: str | None = None, **overrides: Any) -> MirrorRecord:
        return MirrorRecord(id=linear_id, identifier=overrides.pop("identifier", "ENG-1"), title=title, description=description, **overrides)

    return _make


@pytest.fixture
def sync_time() -> datetime:
    """A fixed synchronization time."""
    return datetime(2024, 5, 1, 12, 30, 45, 123000, tzinfo=timezone.utc)


@pytest.fixture
def stages() -> WorkflowStagePair:
    """The Backlog and Done workflow states of a team."""
    return WorkflowStagePair(
        backlog=WorkflowState(id="state-backlog", name="Backlog", type="backlog"),
        done=WorkflowState(id="state-done", name="Done", type="completed"),
    )


@pytest.fixture
def project() -> LinearProject:
    """A Linear project."""
    return LinearProject(id="project-1", name="Widgets", slug_id="widgets-1a2b3c", url="https://linear.app/acme/project/widgets-1a2b3c")


@pytest.fixture
def make_request_failed() -> Callable[..., RequestFailed]:
    """Build githubkit RequestFailed exceptions around real HTTP responses."""

    def _make(status_code: int, headers: dict[str, str] | None = None, message: str = "Request failed") -> RequestFailed:
        request = httpx.Request("GET", "https://api.github.com/repos/acme/widgets/issues/1")
        raw_response = httpx.Response(status_code, headers=headers or {}, json={"message": message}, request=request)
        return RequestFailed(Response(raw_response, Any))

    return _make
