"""Credential shape rules.

Pure functions, no I/O. The identity service runs them before touching
storage so malformed input never costs a database round-trip.
"""

import re

from ..config import settings
from ..exceptions import InvalidPassword, InvalidUsername

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


def validate_username(username: str) -> str:
    """
    Check username shape.

    Rules, checked in order:
    1. Non-empty after trimming whitespace
    2. Length within [username_min_length, username_max_length]
    3. Only letters, digits and underscore

    Args:
        username: Candidate username

    Returns:
        The username, unchanged

    Raises:
        InvalidUsername: With the first rule that failed as the message
    """
    if not username or not username.strip():
        raise InvalidUsername("Username is required", {"field": "username"})

    min_length = settings.username_min_length
    max_length = settings.username_max_length
    if len(username) < min_length:
        raise InvalidUsername(
            f"Username must be at least {min_length} characters",
            {"field": "username", "min_length": min_length}
        )
    if len(username) > max_length:
        raise InvalidUsername(
            f"Username cannot exceed {max_length} characters",
            {"field": "username", "max_length": max_length}
        )
    if not USERNAME_PATTERN.fullmatch(username):
        raise InvalidUsername(
            "Username may only contain letters, digits and underscore",
            {"field": "username"}
        )

    return username


def validate_password(password: str) -> str:
    """
    Check password shape.

    Rules, checked in order:
    1. Not blank
    2. Length within [password_min_length, password_max_length]
    3. No space character

    Error messages never echo the password.

    Raises:
        InvalidPassword: With the first rule that failed as the message
    """
    if not password or not password.strip():
        raise InvalidPassword("Password is required", {"field": "password"})

    min_length = settings.password_min_length
    max_length = settings.password_max_length
    if len(password) < min_length:
        raise InvalidPassword(
            f"Password must be at least {min_length} characters",
            {"field": "password", "min_length": min_length}
        )
    if len(password) > max_length:
        raise InvalidPassword(
            f"Password cannot exceed {max_length} characters",
            {"field": "password", "max_length": max_length}
        )
    if " " in password:
        raise InvalidPassword("Password cannot contain spaces", {"field": "password"})

    return password
