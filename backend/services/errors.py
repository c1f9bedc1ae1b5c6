"""
Error taxonomy for the actions dashboard.

Per-repository fetch failures are not exceptions: they are recorded inline on
the result entry (see PARTIAL_FETCH_FAILURE) so one bad repository never
aborts a page.
"""

from datetime import datetime, timezone

PARTIAL_FETCH_FAILURE = "Failed to fetch workflow runs"


class DashboardError(Exception):
    """Base class for all dashboard errors."""


class MissingCredential(DashboardError):
    """No GitHub token was supplied with the request."""

    def __init__(self, message: str = "GitHub token is required"):
        super().__init__(message)


class RateLimitExceeded(DashboardError):
    """The GitHub quota is exhausted until reset_at."""

    def __init__(self, reset_at: datetime, wait_seconds: int | None = None):
        self.reset_at = reset_at
        if wait_seconds is None:
            wait_seconds = int((reset_at - datetime.now(timezone.utc)).total_seconds())
        self.wait_seconds = max(0, wait_seconds)
        super().__init__(
            f"GitHub API rate limit exceeded, resets at {reset_at.isoformat()}"
        )


class UpstreamError(DashboardError):
    """A non-success response (or transport failure) from the GitHub API."""

    def __init__(self, message: str, status_code: int | None = None, repo: str | None = None):
        self.status_code = status_code
        self.repo = repo
        super().__init__(message)
