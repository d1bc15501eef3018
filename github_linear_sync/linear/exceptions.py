"""Exceptions raised by the Linear client."""

from typing import Any


class LinearAPIError(Exception):
    """Raised when a request to the Linear API fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initializes the exception with a message and the HTTP status code, if any."""
        super().__init__(message)
        self.status_code = status_code


class LinearGraphQLError(LinearAPIError):
    """Raised when the Linear API answers a GraphQL request with errors."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        """Initializes the exception with the GraphQL error objects."""
        messages = "; ".join(str(error.get("message", error)) for error in errors)
        super().__init__(f"Linear GraphQL error: {messages}")
        self.errors = errors
