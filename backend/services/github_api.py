"""
GitHub API Service - REST calls authenticated with a personal access token.

Every privileged call checks the rate limit first and fails fast when the
quota is exhausted; nothing here sleeps or retries.
"""

from datetime import datetime, timedelta, timezone
from urllib.parse import quote

import requests

from .errors import MissingCredential, RateLimitExceeded, UpstreamError
from .models import RateLimitSnapshot, Repository, WorkflowRun, _as_int, parse_timestamp

try:
    from ..config import GITHUB_API_URL, GITHUB_API_VERSION, REQUEST_TIMEOUT, MAX_PER_PAGE, RUNS_PER_REPO, RATE_LIMIT_RETRY_SECONDS
except ImportError:
    from config import GITHUB_API_URL, GITHUB_API_VERSION, REQUEST_TIMEOUT, MAX_PER_PAGE, RUNS_PER_REPO, RATE_LIMIT_RETRY_SECONDS


def _headers(token):
    return {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {token}",
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
    }


def _github_get(token, path, params=None):
    """GET a GitHub API path. Transport failures become UpstreamError."""
    if not token:
        raise MissingCredential()
    try:
        return requests.get(
            f"{GITHUB_API_URL}{path}",
            headers=_headers(token),
            params=params,
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        raise UpstreamError(f"Request to {path} failed: {e}") from e


def _path(*segments):
    """Join path segments, escaping each one so '/' or '?' can't change the endpoint."""
    return "/" + "/".join(quote(str(s), safe="") for s in segments)


def _reset_from_headers(headers, now=None):
    """Reset time of a rate-limited response, always in the future.

    Falls back to Retry-After, then to one minute, when X-RateLimit-Reset
    is missing, unparseable or already past.
    """
    now = now or datetime.now(timezone.utc)
    reset_at = parse_timestamp(_as_int(headers.get("X-RateLimit-Reset"), 0))
    if reset_at is not None and reset_at > now:
        return reset_at
    retry_after = _as_int(headers.get("Retry-After"), 0)
    return now + timedelta(seconds=retry_after if retry_after > 0 else RATE_LIMIT_RETRY_SECONDS)


def _raise_for_status(response, context, repo=None):
    """Raise the matching dashboard error for a non-2xx response."""
    status = response.status_code
    if 200 <= status < 300:
        return
    headers = response.headers or {}
    if status in (403, 429) and headers.get("X-RateLimit-Remaining") == "0":
        reset_at = _reset_from_headers(headers)
        print(f"[RATE] Quota exhausted during {context}, resets at {reset_at.isoformat()}")
        raise RateLimitExceeded(reset_at)
    raise UpstreamError(f"GitHub returned {status} for {context}", status_code=status, repo=repo)


def _json(response, context, expected=dict, repo=None):
    try:
        data = response.json()
    except ValueError as e:
        raise UpstreamError(f"Invalid JSON from GitHub for {context}", repo=repo) from e
    if not isinstance(data, expected):
        raise UpstreamError(
            f"Unexpected response shape from GitHub for {context}: {type(data).__name__}",
            status_code=response.status_code,
            repo=repo,
        )
    return data


def get_rate_limit(token):
    """Query the current rate limit snapshot. Does not count against the quota."""
    response = _github_get(token, "/rate_limit")
    _raise_for_status(response, "rate limit check")
    data = _json(response, "rate limit check")
    return RateLimitSnapshot.from_api(data.get("rate") or {})


def check_rate_limit(token, now=None):
    """Return the current snapshot, or raise RateLimitExceeded if the quota is spent.

    A spent quota whose reset time has already passed is treated as available,
    since GitHub has rolled the window over.
    """
    snapshot = get_rate_limit(token)
    if snapshot.exhausted:
        now = now or datetime.now(timezone.utc)
        wait_seconds = int((snapshot.reset_at - now).total_seconds())
        if wait_seconds > 0:
            print(f"[RATE] Rate limit exceeded. Resets in {wait_seconds}s at {snapshot.reset_at.isoformat()}")
            raise RateLimitExceeded(snapshot.reset_at, wait_seconds)
    return snapshot


def list_org_repos(token, org, page_size=MAX_PER_PAGE):
    """Get one page of an organization's repositories, most recently updated first."""
    snapshot = check_rate_limit(token)
    per_page = max(1, min(int(page_size), MAX_PER_PAGE))
    response = _github_get(token, _path("orgs", org, "repos"), params={
        "sort": "updated",
        "direction": "desc",
        "per_page": per_page,
    })
    _raise_for_status(response, f"repositories of {org}")
    data = _json(response, f"repositories of {org}", expected=list)
    repos = [Repository.from_api(item) for item in data if isinstance(item, dict)]
    return repos, RateLimitSnapshot.from_headers(response.headers) or snapshot


def list_workflow_runs(token, owner, repo, limit=RUNS_PER_REPO):
    """Get the most recent workflow runs of a repository, in GitHub's order.

    A 404 means the repository has no Actions configured and yields no runs.
    """
    snapshot = check_rate_limit(token)
    response = _github_get(token, _path("repos", owner, repo, "actions", "runs"), params={"per_page": limit})
    if response.status_code == 404:
        return [], RateLimitSnapshot.from_headers(response.headers) or snapshot
    context = f"workflow runs of {owner}/{repo}"
    _raise_for_status(response, context, repo=repo)
    data = _json(response, context, repo=repo)
    items = data.get("workflow_runs") or []
    if not isinstance(items, list):
        raise UpstreamError(f"Unexpected response shape from GitHub for {context}", repo=repo)
    runs = [WorkflowRun.from_api(item) for item in items if isinstance(item, dict)]
    return runs[:limit], RateLimitSnapshot.from_headers(response.headers) or snapshot


def list_workflows(token, owner, repo):
    """Get the workflow definitions of a repository."""
    snapshot = check_rate_limit(token)
    response = _github_get(token, _path("repos", owner, repo, "actions", "workflows"))
    if response.status_code == 404:
        return [], RateLimitSnapshot.from_headers(response.headers) or snapshot
    context = f"workflows of {owner}/{repo}"
    _raise_for_status(response, context, repo=repo)
    data = _json(response, context, repo=repo)
    items = data.get("workflows") or []
    if not isinstance(items, list):
        raise UpstreamError(f"Unexpected response shape from GitHub for {context}", repo=repo)
    workflows = [
        {
            "id": w.get("id"),
            "name": w.get("name"),
            "path": w.get("path"),
            "state": w.get("state"),
            "html_url": w.get("html_url"),
        }
        for w in items
        if isinstance(w, dict)
    ]
    return workflows, RateLimitSnapshot.from_headers(response.headers) or snapshot
