"""Authentication Pydantic schemas for API validation."""

from .auth import (
    Account,
    AuthResponse,
    LoginRequest,
    PublicIdentity,
    RegisterRequest,
    TokenPayload,
    TokenVerificationResponse,
    UserCredentials,
    UserStats,
)

__all__ = [
    "Account",
    "AuthResponse",
    "LoginRequest",
    "PublicIdentity",
    "RegisterRequest",
    "TokenPayload",
    "TokenVerificationResponse",
    "UserCredentials",
    "UserStats",
]
