"""
Actions Dashboard Configuration Constants
"""

import os

# GitHub API
GITHUB_API_URL = os.environ.get("GITHUB_API_URL", "https://api.github.com").rstrip("/")
GITHUB_API_VERSION = "2022-11-28"
REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "15"))  # seconds per upstream call

# Organization shown when the caller does not pass ?org=
DEFAULT_ORG = os.environ.get("DEFAULT_ORG", "django-cms")

# API limits
MAX_PER_PAGE = 100  # GitHub hard ceiling for per_page
REPOS_PER_PAGE = 10
RUNS_PER_REPO = 5
RATE_LIMIT_RETRY_SECONDS = 60  # wait assumed when a rate-limited response has no usable reset
STANDARD_RATE_LIMIT = 5000  # personal token quota per hour

# Page cache settings
PAGE_CACHE_TTL_MS = 7_200_000  # 2 hours
CACHE_DIR = os.environ.get(
    "CACHE_DIR",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), ".cache", "pages"),
)

API_VERSION = "1.0.0"
