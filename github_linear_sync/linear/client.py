"""Sets up the authenticated httpx client for the Linear GraphQL API."""

from types import TracebackType
from typing import Any, Self

import httpx
import structlog

from github_linear_sync.configuration.models import LinearConfig

from .exceptions import LinearAPIError, LinearGraphQLError

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(timeout=30.0, connect=10.0)


class LinearClient:
    """Minimal asynchronous client for the Linear GraphQL API."""

    def __init__(self, api_key: str, api_url: str, http_client: httpx.AsyncClient | None = None) -> None:
        """Initialize the client.

        Args:
            api_key: Linear personal API key, sent verbatim in the Authorization header
            api_url: GraphQL endpoint URL
            http_client: Optional preconfigured httpx client (used by tests)
        """
        self.api_url = api_url
        self._http_client = http_client or httpx.AsyncClient(
            timeout=DEFAULT_TIMEOUT,
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
        )
        self._headers = {"Authorization": api_key, "Content-Type": "application/json"}

    @classmethod
    def from_config(cls, config: LinearConfig) -> Self:
        """Create a client from the reconciled Linear configuration."""
        return cls(api_key=config.linear_api_key, api_url=config.linear_api_url)

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL operation and return its `data` object.

        Raises:
            LinearAPIError: On transport failures and non-2xx responses.
            LinearGraphQLError: When the response carries GraphQL errors.
        """
        payload = {"query": query, "variables": variables or {}}
        try:
            response = await self._http_client.post(self.api_url, json=payload, headers=self._headers)
        except httpx.HTTPError as exc:
            raise LinearAPIError(f"Linear API request failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("errors"):
            logger.error("Linear API returned GraphQL errors", status_code=response.status_code, errors=body["errors"])
            raise LinearGraphQLError(body["errors"])
        if response.is_error:
            raise LinearAPIError(f"Linear API responded with HTTP {response.status_code}", status_code=response.status_code)
        if not isinstance(body, dict) or not isinstance(body.get("data"), dict):
            raise LinearAPIError("Linear API response did not contain a data object", status_code=response.status_code)
        return body["data"]

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http_client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.aclose()
