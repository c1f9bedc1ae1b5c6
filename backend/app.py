"""
Actions Dashboard - API Backend for GitHub Actions monitoring

This Flask app serves the JSON API behind the dashboard frontend. The caller
supplies a GitHub personal access token with each request.
"""

import os

from flask import Flask, request, jsonify

# Import the blueprint with all routes registered
try:
    from .routes import bp
    from .services import PageCache
except ImportError:
    from routes import bp
    from services import PageCache

# URL prefix for deployment behind a reverse proxy, e.g. URL_PREFIX="/actions"
URL_PREFIX = os.environ.get("URL_PREFIX", "")

app = Flask(__name__)
app.config["PAGE_CACHE"] = PageCache()


# ============ CORS Support ============
@app.after_request
def add_cors_headers(response):
    """Add CORS headers for development with the frontend dev server."""
    origin = request.headers.get('Origin', '')
    if origin in ['http://localhost:3000', 'http://127.0.0.1:3000', 'http://localhost:5173']:
        response.headers['Access-Control-Allow-Origin'] = origin
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
        response.headers['Access-Control-Allow-Headers'] = 'Content-Type, Authorization'
        response.headers['Access-Control-Expose-Headers'] = 'X-Cache'
    return response


@app.route('/')
def api_root():
    """API info endpoint."""
    return jsonify({"message": "GitHub Actions Dashboard API", "docs": f"{URL_PREFIX}/api/"})


app.register_blueprint(bp, url_prefix=URL_PREFIX or None)


if __name__ == "__main__":
    # Set FLASK_ENV=development to enable debug mode in local development
    debug_mode = os.environ.get("FLASK_ENV") == "development"
    app.run(debug=debug_mode, port=int(os.environ.get("PORT", "5000")))
