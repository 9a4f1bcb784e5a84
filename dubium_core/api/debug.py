"""Development-only endpoints.

Every route answers 404 unless settings.enable_debug_endpoints is true.
Not authenticated: a production deployment must leave them disabled.

- GET    /debug/users  - List all users (no password hashes)
- GET    /debug/stats  - User count and database connectivity
- DELETE /debug/users  - Delete every user
"""

import logging

from flask import Blueprint, abort, jsonify

from ..auth.service import get_identity_service
from ..config import settings

logger = logging.getLogger(__name__)

debug_bp = Blueprint("debug", __name__, url_prefix="/debug")


@debug_bp.before_request
def require_debug_enabled():
    if not settings.enable_debug_endpoints:
        abort(404)


@debug_bp.get("/users")
def list_users():
    users = get_identity_service().list_all()
    return jsonify({
        "success": True,
        "data": {
            "total": len(users),
            "users": [user.model_dump(mode="json") for user in users],
        },
    }), 200


@debug_bp.get("/stats")
def stats():
    return jsonify({
        "success": True,
        "data": get_identity_service().stats().model_dump(),
    }), 200


@debug_bp.delete("/users")
def clear_users():
    logger.warning("Clear-all requested through debug endpoint")
    deleted = get_identity_service().repository.clear_all()
    return jsonify({
        "success": True,
        "message": f"Deleted {deleted} users",
    }), 200
