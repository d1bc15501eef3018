"""Utility modules for shared functionality."""

from .constants import (
    BACKLOG_STATE_NAME,
    DONE_STATE_NAME,
    GITHUB_TITLE_PREFIX,
    ORPHAN_WARNING_LINE,
)
from .retry import retry_on_rate_limit

__all__ = [
    "GITHUB_TITLE_PREFIX",
    "ORPHAN_WARNING_LINE",
    "BACKLOG_STATE_NAME",
    "DONE_STATE_NAME",
    "retry_on_rate_limit",
]
