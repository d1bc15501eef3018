"""Unit tests for the Linear GraphQL client and adapter."""

import json
from typing import Any, Callable

import httpx
import pytest

from github_linear_sync.linear.adapter import LinearAdapter
from github_linear_sync.linear.client import LinearClient
from github_linear_sync.linear.exceptions import LinearAPIError, LinearGraphQLError
from github_linear_sync.synchronize.models import TargetState

API_URL = "https://api.linear.app/graphql"


def make_client(handler: Callable[[httpx.Request], httpx.Response]) -> LinearClient:
    return LinearClient(api_key="lin_api_key", api_url=API_URL, http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def issue_node(issue_id: str = "lin-1", title: str = "[🛠️GH] acme/widgets#1: Issue 1") -> dict[str, Any]:
    return {
        "id": issue_id,
        "identifier": "ENG-1",
        "title": title,
        "description": "GitHub: https://github.com/acme/widgets/issues/1",
        "url": "https://linear.app/acme/issue/ENG-1",
        "state": {"id": "state-backlog", "name": "Backlog"},
        "project": {"id": "project-1"},
        "team": {"id": "team-1"},
    }


@pytest.mark.asyncio
async def test_execute_sends_api_key_and_returns_data() -> None:
    """Test that requests carry the API key verbatim and return the data object."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": {"viewer": {"id": "user-1"}}})

    client = make_client(handler)
    assert await client.execute("query { viewer { id } }") == {"viewer": {"id": "user-1"}}
    assert seen[0].headers["Authorization"] == "lin_api_key"
    assert json.loads(seen[0].content) == {"query": "query { viewer { id } }", "variables": {}}
    await client.aclose()


@pytest.mark.asyncio
async def test_execute_raises_graphql_errors() -> None:
    """Test that GraphQL errors in the response body raise LinearGraphQLError."""
    client = make_client(lambda request: httpx.Response(200, json={"data": None, "errors": [{"message": "Entity not found"}]}))
    with pytest.raises(LinearGraphQLError, match="Entity not found"):
        await client.execute("query { issue(id: \"x\") { id } }")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        pytest.param(httpx.Response(500, text="Internal Server Error"), id="server error"),
        pytest.param(httpx.Response(200, json={"unexpected": True}), id="no data"),
    ],
)
async def test_execute_raises_api_errors(response: httpx.Response) -> None:
    """Test that HTTP failures and malformed responses raise LinearAPIError."""
    client = make_client(lambda request: response)
    with pytest.raises(LinearAPIError):
        await client.execute("query { viewer { id } }")


@pytest.mark.asyncio
async def test_execute_wraps_transport_errors() -> None:
    """Test that transport failures raise LinearAPIError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LinearAPIError, match="request failed"):
        await make_client(handler).execute("query { viewer { id } }")


@pytest.mark.asyncio
async def test_list_projects_follows_pagination() -> None:
    """Test that connections are collected across pages."""
    pages = {
        None: {"nodes": [{"id": "p-1", "name": "Alpha", "slugId": "alpha-1", "url": "https://linear.app/acme/project/alpha-1"}], "pageInfo": {"hasNextPage": True, "endCursor": "c1"}},
        "c1": {"nodes": [{"id": "p-2", "name": "Beta", "slugId": "beta-2", "url": "https://linear.app/acme/project/beta-2"}], "pageInfo": {"hasNextPage": False, "endCursor": None}},
    }

    def handler(request: httpx.Request) -> httpx.Response:
        after = json.loads(request.content)["variables"]["after"]
        return httpx.Response(200, json={"data": {"projects": pages[after]}})

    projects = await LinearAdapter(make_client(handler)).list_projects()
    assert [(project.id, project.slug_id) for project in projects] == [("p-1", "alpha-1"), ("p-2", "beta-2")]


@pytest.mark.asyncio
async def test_query_issues_sends_url_and_title() -> None:
    """Test that issue lookups filter on the URL and the derived title."""
    variables: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        variables.append(json.loads(request.content)["variables"])
        return httpx.Response(200, json={"data": {"issues": {"nodes": [issue_node()], "pageInfo": {"hasNextPage": False, "endCursor": None}}}})

    records = await LinearAdapter(make_client(handler)).query_issues(
        description_contains="https://github.com/acme/widgets/issues/1", title_equals="[🛠️GH] acme/widgets#1: Issue 1"
    )

    assert variables[0]["url"] == "https://github.com/acme/widgets/issues/1"
    assert variables[0]["title"] == "[🛠️GH] acme/widgets#1: Issue 1"
    assert records[0].id == "lin-1"
    assert (records[0].state_name, records[0].project_id, records[0].team_id) == ("Backlog", "project-1", "team-1")


@pytest.mark.asyncio
async def test_create_issue_sends_project_and_team() -> None:
    """Test that issue creation places the issue in the project and team."""
    inputs: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        inputs.append(json.loads(request.content)["variables"]["input"])
        return httpx.Response(200, json={"data": {"issueCreate": {"success": True, "issue": issue_node("lin-new")}}})

    target = TargetState(title="[🛠️GH] acme/widgets#1: Issue 1", description="desc", state_id="state-backlog")
    record = await LinearAdapter(make_client(handler)).create_issue(target, project_id="project-1", team_id="team-1")

    assert record.id == "lin-new"
    assert inputs[0] == {
        "title": target.title,
        "description": "desc",
        "stateId": "state-backlog",
        "projectId": "project-1",
        "teamId": "team-1",
    }


@pytest.mark.asyncio
async def test_update_issue_leaves_project_and_team_alone() -> None:
    """Test that updates only change the title, description and workflow state."""
    requests: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(json.loads(request.content)["variables"])
        return httpx.Response(200, json={"data": {"issueUpdate": {"success": True, "issue": issue_node("lin-7")}}})

    target = TargetState(title="title", description="desc", state_id="state-done")
    await LinearAdapter(make_client(handler)).update_issue("lin-7", target)

    assert requests[0] == {"id": "lin-7", "input": {"title": "title", "description": "desc", "stateId": "state-done"}}


@pytest.mark.asyncio
async def test_unsuccessful_mutation_raises() -> None:
    """Test that a mutation reporting success false raises LinearAPIError."""
    client = make_client(lambda request: httpx.Response(200, json={"data": {"issueUpdate": {"success": False, "issue": None}}}))
    with pytest.raises(LinearAPIError, match="issueUpdate did not succeed"):
        await LinearAdapter(client).update_issue("lin-7", TargetState(title="t", description="d", state_id="s"))
