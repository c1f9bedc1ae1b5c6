"""
Sequential aggregator - one page of repositories with their latest workflow runs.

Repositories are fetched one at a time on purpose: the rate limit is a single
shared counter, and one call in flight keeps the snapshot fresh between checks.
"""

import math
import time

from .errors import MissingCredential, PARTIAL_FETCH_FAILURE, UpstreamError
from .github_api import list_org_repos, list_workflow_runs
from .models import AggregatedPage, Pagination, RepositoryResult

try:
    from ..config import MAX_PER_PAGE, REPOS_PER_PAGE, RUNS_PER_REPO
except ImportError:
    from config import MAX_PER_PAGE, REPOS_PER_PAGE, RUNS_PER_REPO


def page_bounds(page, page_size, total):
    """Return (start, end) indices of `page` (1-based) within `total` items."""
    start = (page - 1) * page_size
    end = min(start + page_size, total)
    return start, max(start, end)


def aggregate_page(token, org, page=1, page_size=REPOS_PER_PAGE):
    """Build an AggregatedPage for `org`.

    Raises MissingCredential, RateLimitExceeded or UpstreamError. A rate limit
    hit while fetching runs aborts the whole page; any other per-repository
    failure is recorded on that entry and the loop moves on.
    """
    if not token:
        raise MissingCredential()
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be >= 1")

    start_total = time.time()
    repos, rate_limit = list_org_repos(token, org, MAX_PER_PAGE)

    total_repos = len(repos)
    total_pages = math.ceil(total_repos / page_size)
    start, end = page_bounds(page, page_size, total_repos)
    page_repos = repos[start:end]

    print(f"[PERF] Fetching workflow runs for {len(page_repos)} of {total_repos} repos in {org} (page {page}/{total_pages})")

    results = []
    for repo in page_repos:
        try:
            runs, rate_limit = list_workflow_runs(token, org, repo.name, RUNS_PER_REPO)
            results.append(RepositoryResult(repository=repo, workflow_runs=runs))
        except UpstreamError as e:
            print(f"[GITHUB] Error fetching workflow runs for {repo.name}: {e}")
            results.append(RepositoryResult(repository=repo, workflow_runs=[], error=PARTIAL_FETCH_FAILURE))

    print(f"[PERF] aggregate_page {org} page {page}: {time.time() - start_total:.2f}s, "
          f"{rate_limit.remaining}/{rate_limit.limit} requests left")

    return AggregatedPage(
        organization=org,
        repositories=results,
        rate_limit=rate_limit,
        pagination=Pagination(
            page=page,
            total_pages=total_pages,
            total_repos=total_repos,
            repos_per_page=page_size,
        ),
    )
