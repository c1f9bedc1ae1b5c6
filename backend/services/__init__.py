"""
Services package initialization
"""

from .cache import PageCache, MemoryPageCache, cache_key
from .errors import (
    DashboardError,
    MissingCredential,
    RateLimitExceeded,
    UpstreamError,
    PARTIAL_FETCH_FAILURE
)
from .github_api import (
    get_rate_limit,
    check_rate_limit,
    list_org_repos,
    list_workflow_runs,
    list_workflows
)
from .aggregator import aggregate_page

__all__ = [
    'PageCache',
    'MemoryPageCache',
    'cache_key',
    'DashboardError',
    'MissingCredential',
    'RateLimitExceeded',
    'UpstreamError',
    'PARTIAL_FETCH_FAILURE',
    'get_rate_limit',
    'check_rate_limit',
    'list_org_repos',
    'list_workflow_runs',
    'list_workflows',
    'aggregate_page'
]
