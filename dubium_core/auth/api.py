"""Authentication API endpoints for Dubium Core.

These endpoints translate HTTP requests into identity service calls and
return JSON responses:
- Registration and login (both return a JWT token)
- Token verification
- Stateless logout
- User profile retrieval

Token issuance happens here, after the identity service has accepted the
credentials.
"""

import logging

from flask import Blueprint, g, jsonify

from ..api.validation import validate_request
from ..exceptions import (
    AuthenticationError,
    IncorrectPassword,
    InvalidToken,
    NotFoundError,
    UserNotFound,
)
from . import token
from .decorators import auth_required
from .schemas import AuthResponse, LoginRequest, RegisterRequest, TokenVerificationResponse
from .service import get_identity_service

logger = logging.getLogger(__name__)


auth_bp = Blueprint("auth", __name__)


# ============================================================================
# Registration and Login
# ============================================================================


@auth_bp.route("/auth/register", methods=["POST"])
@validate_request
def register(data: RegisterRequest):
    """
    Create an account and return a JWT token.

    Example request:
    ```json
    {"username": "alice_1", "password": "pass123"}
    ```

    Example response (201):
    ```json
    {
        "success": true,
        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
        "user": {"id": 1, "username": "alice_1", "created_at": "2024-10-18T10:30:00Z"},
        "message": "User registered successfully"
    }
    ```
    """
    user = get_identity_service().register(data.username, data.password)
    access_token = token.generate_access_token(user.id, user.username)

    return jsonify(
        AuthResponse(
            token=access_token,
            user=user,
            message="User registered successfully"
        ).model_dump(mode="json")
    ), 201


@auth_bp.route("/auth/login", methods=["POST"])
@validate_request
def login(data: LoginRequest):
    """
    Authenticate and return a JWT token.

    Unknown usernames and wrong passwords get the same response.
    """
    try:
        user = get_identity_service().login(data.username, data.password)
    except (UserNotFound, IncorrectPassword):
        raise AuthenticationError("Invalid username or password")

    access_token = token.generate_access_token(user.id, user.username)

    return jsonify(
        AuthResponse(
            token=access_token,
            user=user,
            message="Login successful"
        ).model_dump(mode="json")
    ), 200


# ============================================================================
# Token Endpoints
# ============================================================================


@auth_bp.route("/auth/verify", methods=["GET"])
@auth_required
def verify():
    """
    Check the bearer token and return the user it belongs to.

    The token itself is verified without storage; the account is then
    re-checked so tokens of cleared accounts are reported invalid.
    """
    try:
        user = get_identity_service().get_by_id(g.user_id)
    except NotFoundError:
        raise InvalidToken("Token user no longer exists")

    return jsonify(
        TokenVerificationResponse(
            success=True,
            valid=True,
            user=user,
            message="Token is valid"
        ).model_dump(mode="json")
    ), 200


@auth_bp.route("/auth/logout", methods=["POST"])
@auth_required
def logout():
    """
    Logout (stateless).

    Tokens cannot be revoked; the client discards its copy.
    """
    logger.info(f"Logout: {g.username}")
    return jsonify({"success": True, "message": "Logged out successfully"}), 200


# ============================================================================
# User Profile
# ============================================================================


@auth_bp.route("/user/profile", methods=["GET"])
@auth_required
def profile():
    """Current user's public identity."""
    user = get_identity_service().get_by_id(g.user_id)
    return jsonify({"success": True, "data": user.model_dump(mode="json")}), 200
