"""Linear client adapter translating GraphQL responses into synchronization models."""

from typing import Any, Self

import structlog

from github_linear_sync.configuration.models import LinearConfig
from github_linear_sync.synchronize.models import LinearProject, LinearTeam, MirrorRecord, TargetState, WorkflowState

from .abc import MirrorSystemBase
from .client import LinearClient
from .exceptions import LinearAPIError

logger = structlog.get_logger(__name__)

PAGE_SIZE = 100

ISSUE_FIELDS = """
    id
    identifier
    title
    description
    url
    state { id name }
    project { id }
    team { id }
"""

PROJECTS_QUERY = """
query Projects($first: Int!, $after: String) {
  projects(first: $first, after: $after) {
    nodes { id name slugId url }
    pageInfo { hasNextPage endCursor }
  }
}
"""

TEAMS_QUERY = """
query Teams($first: Int!, $after: String) {
  teams(first: $first, after: $after) {
    nodes { id name key private issueCount }
    pageInfo { hasNextPage endCursor }
  }
}
"""

WORKFLOW_STATES_QUERY = """
query WorkflowStates($first: Int!, $after: String, $teamId: ID!) {
  workflowStates(first: $first, after: $after, filter: { team: { id: { eq: $teamId } } }) {
    nodes { id name type }
    pageInfo { hasNextPage endCursor }
  }
}
"""

ISSUES_QUERY = f"""
query MatchingIssues($first: Int!, $after: String, $url: String!, $title: String!) {{
  issues(
    first: $first
    after: $after
    filter: {{ or: [{{ description: {{ contains: $url }} }}, {{ title: {{ eq: $title }} }}] }}
  ) {{
    nodes {{ {ISSUE_FIELDS} }}
    pageInfo {{ hasNextPage endCursor }}
  }}
}}
"""

CREATE_ISSUE_MUTATION = f"""
mutation CreateIssue($input: IssueCreateInput!) {{
  issueCreate(input: $input) {{
    success
    issue {{ {ISSUE_FIELDS} }}
  }}
}}
"""

UPDATE_ISSUE_MUTATION = f"""
mutation UpdateIssue($id: String!, $input: IssueUpdateInput!) {{
  issueUpdate(id: $id, input: $input) {{
    success
    issue {{ {ISSUE_FIELDS} }}
  }}
}}
"""


class LinearAdapter(MirrorSystemBase):
    """Linear client adapter for the Linear GraphQL API."""

    def __init__(self, client: LinearClient) -> None:
        """Initialize the adapter with an already-initialized client."""
        self.client = client

    @classmethod
    def create(cls, config: LinearConfig) -> Self:
        """Create a new Linear adapter from the reconciled configuration."""
        logger.info("Creating client for Linear API", linear_api_url=config.linear_api_url)
        return cls(LinearClient.from_config(config))

    async def aclose(self) -> None:
        """Close the underlying client."""
        await self.client.aclose()

    async def _paginate(self, query: str, connection: str, variables: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Collect the nodes of a Relay-style connection across every page."""
        nodes: list[dict[str, Any]] = []
        after: str | None = None
        while True:
            data = await self.client.execute(query, {**(variables or {}), "first": PAGE_SIZE, "after": after})
            try:
                page = data[connection]
                nodes.extend(page["nodes"])
                page_info = page["pageInfo"]
            except (KeyError, TypeError) as exc:
                raise LinearAPIError(f"Unexpected Linear response shape for {connection}: {exc}") from exc
            if not page_info.get("hasNextPage"):
                return nodes
            after = page_info.get("endCursor")

    async def list_projects(self) -> list[LinearProject]:
        """List every project visible to the API key."""
        nodes = await self._paginate(PROJECTS_QUERY, "projects")
        return [LinearProject.from_linear(node) for node in nodes]

    async def list_teams(self) -> list[LinearTeam]:
        """List every team visible to the API key."""
        nodes = await self._paginate(TEAMS_QUERY, "teams")
        return [LinearTeam.from_linear(node) for node in nodes]

    async def list_workflow_states(self, team_id: str) -> list[WorkflowState]:
        """List the workflow states of a team."""
        nodes = await self._paginate(WORKFLOW_STATES_QUERY, "workflowStates", {"teamId": team_id})
        return [WorkflowState(id=node["id"], name=node["name"], type=node.get("type")) for node in nodes]

    async def query_issues(self, description_contains: str, title_equals: str) -> list[MirrorRecord]:
        """Find issues whose description contains a substring or whose title equals a string.

        Results are returned in Linear's own order.
        """
        nodes = await self._paginate(ISSUES_QUERY, "issues", {"url": description_contains, "title": title_equals})
        return [MirrorRecord.from_linear(node) for node in nodes]

    async def _mutate_issue(self, mutation: str, operation: str, variables: dict[str, Any]) -> MirrorRecord:
        data = await self.client.execute(mutation, variables)
        payload = data.get(operation) or {}
        if not payload.get("success") or not payload.get("issue"):
            raise LinearAPIError(f"Linear {operation} did not succeed")
        return MirrorRecord.from_linear(payload["issue"])

    async def create_issue(self, target_state: TargetState, project_id: str, team_id: str) -> MirrorRecord:
        """Create an issue in a project and team."""
        issue_input = {
            "title": target_state.title,
            "description": target_state.description,
            "stateId": target_state.state_id,
            "projectId": project_id,
            "teamId": team_id,
        }
        record = await self._mutate_issue(CREATE_ISSUE_MUTATION, "issueCreate", {"input": issue_input})
        logger.info("Created Linear issue", linear_id=record.id, identifier=record.identifier, title=record.title)
        return record

    async def update_issue(self, issue_id: str, target_state: TargetState) -> MirrorRecord:
        """Update the title, description and workflow state of an existing issue."""
        issue_input = {
            "title": target_state.title,
            "description": target_state.description,
            "stateId": target_state.state_id,
        }
        record = await self._mutate_issue(UPDATE_ISSUE_MUTATION, "issueUpdate", {"id": issue_id, "input": issue_input})
        logger.info("Updated Linear issue", linear_id=record.id, identifier=record.identifier, title=record.title)
        return record
