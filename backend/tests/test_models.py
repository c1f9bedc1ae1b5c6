"""Tests for the value objects and their upstream normalization."""

from datetime import datetime, timezone

from conftest import repo_payload, run_payload
from services.models import (
    RateLimitSnapshot,
    Repository,
    RepositoryResult,
    WorkflowRun,
    normalize_conclusion,
    normalize_status,
    parse_timestamp,
)


class TestParseTimestamp:

    def test_iso_with_z_suffix(self):
        assert parse_timestamp("2026-10-01T12:00:00Z") == datetime(2026, 10, 1, 12, tzinfo=timezone.utc)

    def test_epoch_seconds(self):
        assert parse_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_empty_and_garbage(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None
        assert parse_timestamp("not a date") is None


class TestNormalization:

    def test_known_statuses_pass_through(self):
        for status in ("queued", "in_progress", "completed"):
            assert normalize_status(status) == status

    def test_pending_statuses_become_queued(self):
        assert normalize_status("waiting") == "queued"
        assert normalize_status("requested") == "queued"

    def test_unknown_conclusion_becomes_other(self):
        assert normalize_conclusion("neutral") == "other"
        assert normalize_conclusion("timed_out") == "timed_out"
        assert normalize_conclusion(None) is None


class TestRepository:

    def test_from_api_and_to_dict(self):
        repo = Repository.from_api(repo_payload(3))

        assert repo.to_dict() == {
            "id": 1003,
            "name": "repo-3",
            "full_name": "acme/repo-3",
            "html_url": "https://github.com/acme/repo-3",
            "description": None,
            "owner": {"login": "acme", "avatar_url": "https://avatars.example/acme"},
            "private": False,
            "updated_at": "2026-10-01T12:00:00Z",
        }

    def test_tolerates_missing_fields(self):
        repo = Repository.from_api({"id": 1, "name": "bare", "owner": None, "updated_at": None})

        assert repo.owner_login == ""
        assert repo.updated_at is None
        assert repo.full_name == "/bare"


class TestWorkflowRun:

    def test_flattens_commit_and_actor(self):
        run = WorkflowRun.from_api(run_payload(4))

        assert run.head_commit == {"id": "abc123", "message": "Fix tests", "author_name": "dev"}
        assert run.actor == {"login": "dev", "avatar_url": None}
        assert run.repository_id == 1000
        assert run.to_dict()["updated_at"] == "2026-10-01T12:05:00Z"

    def test_nullable_fields(self):
        run = WorkflowRun.from_api({"id": 9, "run_number": 1, "status": None, "head_commit": None, "actor": None})

        assert run.name is None
        assert run.status is None
        assert run.head_commit is None
        assert run.actor is None


class TestRateLimitSnapshot:

    def test_from_headers_returns_none_without_headers(self):
        assert RateLimitSnapshot.from_headers({}) is None

    def test_enterprise_flag(self):
        snapshot = RateLimitSnapshot.from_api({"limit": 15000, "remaining": 1, "reset": 0, "used": 14999})
        assert snapshot.to_dict()["enterprise_limit"] is True

    def test_reset_serialized_as_iso(self):
        snapshot = RateLimitSnapshot.from_api({"limit": 5000, "remaining": 1, "reset": 1800000000, "used": 4999})
        assert snapshot.to_dict()["reset"] == "2027-01-15T08:00:00Z"


class TestRepositoryResult:

    def test_error_key_only_present_when_failed(self):
        repo = Repository.from_api(repo_payload(1))

        assert "error" not in RepositoryResult(repository=repo).to_dict()
        assert RepositoryResult(repository=repo, error="boom").to_dict()["error"] == "boom"
