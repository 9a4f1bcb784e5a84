"""Authentication decorator for protected endpoints.

- @auth_required - Requires a valid JWT bearer token

Authenticated user information is stored in flask.g:
- g.user_id: Account id from the token
- g.username: Username from the token
- g.token_payload: Full TokenPayload
"""

import logging
from functools import wraps

from flask import g, request

from ..exceptions import AuthenticationError, InvalidToken
from . import token

logger = logging.getLogger(__name__)


def _authenticate_request():
    """
    Validate the Authorization: Bearer <token> header of the current request.

    Raises:
        AuthenticationError: If the header is missing or malformed
        InvalidToken: If the token fails verification
    """
    auth_header = request.headers.get("Authorization")
    if auth_header is None:
        logger.warning("Unauthenticated request to protected endpoint")
        raise AuthenticationError(
            "Authentication required",
            {"code": "missing_auth", "expected": "Authorization: Bearer <token>"}
        )

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError(
            "Invalid authorization header format",
            {"code": "invalid_header", "expected": "Authorization: Bearer <token>"}
        )

    try:
        payload = token.validate_access_token(parts[1])
    except InvalidToken as e:
        logger.warning(f"JWT rejected: {e.message}")
        raise

    g.user_id = payload.user_id
    g.username = payload.username
    g.token_payload = payload
    logger.debug(f"JWT authentication successful for user {g.username}")


def auth_required(f):
    """
    Decorator to require a valid bearer token for endpoint access.

    Example:
    ```python
    @auth_required
    def protected_endpoint():
        user_id = g.user_id
        ...
    ```
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        _authenticate_request()
        return f(*args, **kwargs)

    return wrapper
