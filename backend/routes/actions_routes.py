"""
Actions routes - aggregated workflow runs per organization page.
"""

from flask import current_app, request, jsonify
from werkzeug.exceptions import HTTPException

from . import bp

try:
    from ..services import (
        aggregate_page,
        get_rate_limit,
        list_workflows,
        MissingCredential,
        RateLimitExceeded,
        UpstreamError,
    )
    from ..helpers import format_duration, rate_limit_info
    from ..config import DEFAULT_ORG, REPOS_PER_PAGE
except ImportError:
    from services import (
        aggregate_page,
        get_rate_limit,
        list_workflows,
        MissingCredential,
        RateLimitExceeded,
        UpstreamError,
    )
    from helpers import format_duration, rate_limit_info
    from config import DEFAULT_ORG, REPOS_PER_PAGE


def get_request_token():
    """Extract the token from an `Authorization: Bearer <token>` header."""
    header = request.headers.get("Authorization", "").strip()
    scheme, _, token = header.partition(" ")
    if scheme.lower() not in ("bearer", "token"):
        return None
    return token.strip() or None


def _page_cache():
    return current_app.config.get("PAGE_CACHE")


def _rate_limited_response(e):
    return jsonify({
        "error": "GitHub API rate limit exceeded",
        "rate_limit": {
            "reset_at": e.reset_at.isoformat(),
            "wait_time": format_duration(e.wait_seconds),
            "wait_seconds": e.wait_seconds,
        },
    }), 429


@bp.errorhandler(Exception)
def handle_unexpected_error(e):
    """Answer unhandled errors with the JSON error body clients expect."""
    if isinstance(e, HTTPException):
        return e
    print(f"[ERROR] Unhandled {type(e).__name__} on {request.path}: {e}")
    return jsonify({"error": "Internal server error"}), 500


@bp.route("/api/actions", methods=["GET"])
def api_actions():
    """Get one page of an organization's repositories with their latest workflow runs."""
    token = get_request_token()
    if not token:
        return jsonify({"error": str(MissingCredential())}), 401

    org = request.args.get("org", "").strip() or DEFAULT_ORG
    try:
        page = int(request.args.get("page", "1"))
    except ValueError:
        return jsonify({"error": "page must be an integer"}), 400
    if page < 1:
        return jsonify({"error": "page must be >= 1"}), 400
    force_refresh = request.args.get("refresh", "").lower() in ("1", "true", "yes")

    cache = _page_cache()
    if cache is not None and not force_refresh:
        cached = cache.get(org, page)
        if cached:
            response = jsonify(cached)
            response.headers["X-Cache"] = "HIT"
            return response

    try:
        result = aggregate_page(token, org, page, REPOS_PER_PAGE)
    except RateLimitExceeded as e:
        return _rate_limited_response(e)
    except UpstreamError as e:
        print(f"[GITHUB] Error fetching GitHub Actions data for {org}: {e}")
        return jsonify({"error": "Failed to fetch GitHub Actions data"}), 500

    payload = result.to_dict()
    payload["_rate_limit_info"] = rate_limit_info(result.rate_limit)

    if cache is not None:
        cache.put(org, page, payload)

    response = jsonify(payload)
    response.headers["X-Cache"] = "BYPASS" if force_refresh else "MISS"
    return response


@bp.route("/api/workflows", methods=["GET"])
def api_workflows():
    """Get the workflow definitions of one repository."""
    token = get_request_token()
    if not token:
        return jsonify({"error": str(MissingCredential())}), 401

    org = request.args.get("org", "").strip() or DEFAULT_ORG
    repo = request.args.get("repo", "").strip()
    if not repo:
        return jsonify({"error": "Missing repo"}), 400

    try:
        workflows, snapshot = list_workflows(token, org, repo)
    except RateLimitExceeded as e:
        return _rate_limited_response(e)
    except UpstreamError as e:
        print(f"[GITHUB] Error fetching workflows for {org}/{repo}: {e}")
        return jsonify({"error": "Failed to fetch workflows"}), 500

    return jsonify({
        "organization": org,
        "repository": repo,
        "workflows": workflows,
        "rate_limit": snapshot.to_dict(),
    })


@bp.route("/api/rate-limit", methods=["GET"])
def api_rate_limit():
    """Get the caller's current GitHub rate limit."""
    token = get_request_token()
    if not token:
        return jsonify({"error": str(MissingCredential())}), 401

    try:
        snapshot = get_rate_limit(token)
    except RateLimitExceeded as e:
        return _rate_limited_response(e)
    except UpstreamError as e:
        print(f"[GITHUB] Error checking rate limit: {e}")
        return jsonify({"error": "Failed to fetch rate limit"}), 500

    return jsonify({
        "rate_limit": snapshot.to_dict(),
        "_rate_limit_info": rate_limit_info(snapshot),
    })


@bp.route("/api/clear-cache", methods=["POST"])
def api_clear_cache():
    """Clear cached pages, optionally for one org or one (org, page)."""
    data = request.get_json(silent=True) or {}
    org = data.get("org") or None
    page = data.get("page")
    if page is not None:
        try:
            page = int(page)
        except (TypeError, ValueError):
            return jsonify({"success": False, "error": "page must be an integer"}), 400

    cache = _page_cache()
    cleared = cache.invalidate(org, page) if cache is not None else 0
    return jsonify({"success": True, "cleared": cleared, "message": "Cache cleared"})
