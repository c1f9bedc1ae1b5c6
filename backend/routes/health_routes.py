"""
Health routes - healthcheck endpoint.
"""

from flask import current_app, jsonify

from . import bp

try:
    from ..config import API_VERSION, DEFAULT_ORG
except ImportError:
    from config import API_VERSION, DEFAULT_ORG


@bp.route("/api/healthcheck", methods=["GET"])
def api_healthcheck():
    """Health check endpoint for monitoring."""
    cache = current_app.config.get("PAGE_CACHE")
    return jsonify({
        "success": True,
        "status": "healthy",
        "default_org": DEFAULT_ORG,
        "api_version": API_VERSION,
        "cache": cache.stats() if cache is not None else {"enabled": False},
    })
