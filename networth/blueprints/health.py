"""Health check blueprint."""

from flask import Blueprint, Response, current_app, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.route("/healthz")
def health_check() -> Response:
    """Health check endpoint.

    Returns:
        JSON response with status and projection cache occupancy
    """
    service = current_app.extensions["projection_service"]
    return jsonify({"status": "ok", "cached_projections": service.engine.cache_size})
