"""Pytest configuration - add backend/ to sys.path so tests can import modules."""

import sys
import os
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

# Add the backend directory to sys.path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


def make_response(status_code=200, body=None, headers=None):
    """Build a fake requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.headers = headers or {}
    response.json.return_value = body
    return response


def rate_limit_body(remaining=4999, limit=5000, reset_in=3600):
    reset = int((datetime.now(timezone.utc) + timedelta(seconds=reset_in)).timestamp())
    return {"rate": {"limit": limit, "remaining": remaining, "reset": reset, "used": limit - remaining}}


def repo_payload(i, org="acme"):
    return {
        "id": 1000 + i,
        "name": f"repo-{i}",
        "full_name": f"{org}/repo-{i}",
        "html_url": f"https://github.com/{org}/repo-{i}",
        "description": None,
        "owner": {"login": org, "avatar_url": "https://avatars.example/acme"},
        "private": False,
        "updated_at": "2026-10-01T12:00:00Z",
    }


def run_payload(i, conclusion="success"):
    return {
        "id": 5000 + i,
        "name": "CI",
        "run_number": i,
        "status": "completed",
        "conclusion": conclusion,
        "head_branch": "main",
        "event": "push",
        "head_commit": {"id": "abc123", "message": "Fix tests", "author": {"name": "dev"}},
        "actor": {"login": "dev", "avatar_url": None},
        "created_at": "2026-10-01T12:00:00Z",
        "updated_at": "2026-10-01T12:05:00Z",
        "html_url": f"https://github.com/acme/repo/actions/runs/{5000 + i}",
        "repository": {"id": 1000},
    }


@pytest.fixture(autouse=True)
def disable_file_cache(monkeypatch):
    """Keep tests from writing to the real cache directory."""
    monkeypatch.setenv("CACHE_DISABLED", "1")
