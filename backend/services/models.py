"""
Value objects for the actions dashboard.

Upstream payloads are inconsistent about which fields are present or null, so
every field is read defensively in from_api() and normalized once here.
Nothing downstream looks at raw GitHub JSON.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

try:
    from ..config import STANDARD_RATE_LIMIT
except ImportError:
    from config import STANDARD_RATE_LIMIT

RUN_STATUSES = ("queued", "in_progress", "completed")
RUN_CONCLUSIONS = ("success", "failure", "cancelled", "skipped", "timed_out")

# GitHub reports these for runs that have not started yet
_PENDING_STATUSES = {"waiting", "requested", "pending"}


def parse_timestamp(value) -> datetime | None:
    """Parse an ISO-8601 string or epoch seconds into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _as_int(value, default=0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def normalize_status(value) -> str | None:
    if not value:
        return None
    if value in RUN_STATUSES:
        return value
    if value in _PENDING_STATUSES:
        return "queued"
    return None


def normalize_conclusion(value) -> str | None:
    if not value:
        return None
    if value in RUN_CONCLUSIONS:
        return value
    return "other"


@dataclass(frozen=True)
class RateLimitSnapshot:
    """Quota state echoed back by the GitHub API."""
    limit: int
    remaining: int
    reset_at: datetime
    used: int

    @classmethod
    def from_api(cls, rate: dict) -> "RateLimitSnapshot":
        """Build from the `rate` object of GET /rate_limit."""
        return cls(
            limit=_as_int(rate.get("limit")),
            remaining=max(0, _as_int(rate.get("remaining"))),
            reset_at=parse_timestamp(_as_int(rate.get("reset"))),
            used=_as_int(rate.get("used")),
        )

    @classmethod
    def from_headers(cls, headers) -> "RateLimitSnapshot | None":
        """Build from X-RateLimit-* response headers, or None if they are absent."""
        if headers is None or headers.get("X-RateLimit-Remaining") is None:
            return None
        return cls.from_api({
            "limit": headers.get("X-RateLimit-Limit"),
            "remaining": headers.get("X-RateLimit-Remaining"),
            "reset": headers.get("X-RateLimit-Reset"),
            "used": headers.get("X-RateLimit-Used"),
        })

    @property
    def exhausted(self) -> bool:
        return self.remaining < 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "limit": self.limit,
            "remaining": self.remaining,
            "reset": format_timestamp(self.reset_at),
            "used": self.used,
            "enterprise_limit": self.limit > STANDARD_RATE_LIMIT,
        }


@dataclass(frozen=True)
class Repository:
    id: int
    name: str
    full_name: str
    html_url: str
    description: str | None
    owner_login: str
    owner_avatar_url: str | None
    private: bool
    updated_at: datetime | None

    @classmethod
    def from_api(cls, data: dict) -> "Repository":
        owner = data.get("owner") or {}
        name = data.get("name") or ""
        return cls(
            id=_as_int(data.get("id")),
            name=name,
            full_name=data.get("full_name") or f"{owner.get('login', '')}/{name}",
            html_url=data.get("html_url") or "",
            description=data.get("description"),
            owner_login=owner.get("login") or "",
            owner_avatar_url=owner.get("avatar_url"),
            private=bool(data.get("private", False)),
            updated_at=parse_timestamp(data.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "full_name": self.full_name,
            "html_url": self.html_url,
            "description": self.description,
            "owner": {"login": self.owner_login, "avatar_url": self.owner_avatar_url},
            "private": self.private,
            "updated_at": format_timestamp(self.updated_at),
        }


@dataclass(frozen=True)
class WorkflowRun:
    id: int
    name: str | None
    run_number: int
    status: str | None
    conclusion: str | None
    html_url: str
    head_branch: str | None = None
    event: str | None = None
    head_commit: dict | None = None
    actor: dict | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    repository_id: int | None = None

    @classmethod
    def from_api(cls, data: dict) -> "WorkflowRun":
        commit = data.get("head_commit")
        if commit:
            author = commit.get("author") or {}
            commit = {
                "id": commit.get("id"),
                "message": commit.get("message") or "",
                "author_name": author.get("name"),
            }
        actor = data.get("actor")
        if actor:
            actor = {"login": actor.get("login"), "avatar_url": actor.get("avatar_url")}
        repository = data.get("repository") or {}
        return cls(
            id=_as_int(data.get("id")),
            name=data.get("name"),
            run_number=_as_int(data.get("run_number")),
            status=normalize_status(data.get("status")),
            conclusion=normalize_conclusion(data.get("conclusion")),
            html_url=data.get("html_url") or "",
            head_branch=data.get("head_branch"),
            event=data.get("event"),
            head_commit=commit or None,
            actor=actor or None,
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
            repository_id=repository.get("id"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "run_number": self.run_number,
            "status": self.status,
            "conclusion": self.conclusion,
            "head_branch": self.head_branch,
            "event": self.event,
            "head_commit": self.head_commit,
            "actor": self.actor,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
            "html_url": self.html_url,
            "repository_id": self.repository_id,
        }


@dataclass
class RepositoryResult:
    """One entry of an aggregated page; error is set when the run fetch failed."""
    repository: Repository
    workflow_runs: list[WorkflowRun] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result = {
            "repository": self.repository.to_dict(),
            "workflow_runs": [run.to_dict() for run in self.workflow_runs],
        }
        if self.error:
            result["error"] = self.error
        return result


@dataclass(frozen=True)
class Pagination:
    page: int
    total_pages: int
    total_repos: int
    repos_per_page: int

    def to_dict(self) -> dict[str, int]:
        return {
            "page": self.page,
            "total_pages": self.total_pages,
            "total_repos": self.total_repos,
            "repos_per_page": self.repos_per_page,
        }


@dataclass
class AggregatedPage:
    organization: str
    repositories: list[RepositoryResult]
    rate_limit: RateLimitSnapshot
    pagination: Pagination

    @property
    def failed_repositories(self) -> list[str]:
        return [r.repository.name for r in self.repositories if r.error]

    def to_dict(self) -> dict[str, Any]:
        return {
            "organization": self.organization,
            "repositories": [r.to_dict() for r in self.repositories],
            "pagination": self.pagination.to_dict(),
            "rate_limit": self.rate_limit.to_dict(),
        }
