"""Shared constants used across the application."""

# Derived Title Constants
# -----------------------

GITHUB_TITLE_PREFIX = "[🛠️GH]"
"""Marker prepended to the title of every Linear issue mirrored from GitHub."""

# Linear Description Constants
# ----------------------------

GITHUB_URL_LINE_TEMPLATE = "GitHub: {url}"
"""Footer line linking a Linear issue back to its GitHub issue."""

ORPHAN_WARNING_LINE = "⚠️ Original GitHub issue was deleted"
"""Footer line added when the GitHub issue no longer exists."""

LAST_SYNCED_LINE_PREFIX = "Last Synced: "
"""Prefix of the footer line recording when the issue was last synchronized."""

# Linear Workflow Constants
# -------------------------

BACKLOG_STATE_NAME = "Backlog"
"""Name of the Linear workflow state used for open GitHub issues."""

DONE_STATE_NAME = "Done"
"""Name of the Linear workflow state used for closed or deleted GitHub issues."""

# API Defaults
# ------------

DEFAULT_GITHUB_API_URL = "https://api.github.com"

DEFAULT_LINEAR_API_URL = "https://api.linear.app/graphql"

DEFAULT_MAX_CONCURRENCY = 10
"""Default number of issues synchronized concurrently."""
