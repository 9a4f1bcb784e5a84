"""Pydantic schemas for accounts, tokens and auth responses."""

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field

from ...utils import isodatetime


# ============================================================================
# Requests
# ============================================================================


class UserCredentials(BaseModel):
    """Username/password pair sent by the client.

    Shape rules are enforced by auth.validation, not here, so that the
    identity service reports InvalidUsername/InvalidPassword consistently
    for every caller.
    """

    username: str = Field(..., description="Account username")
    password: str = Field(..., description="Plaintext password")


class RegisterRequest(UserCredentials):
    """Body of POST /auth/register."""
    pass


class LoginRequest(UserCredentials):
    """Body of POST /auth/login."""
    pass


# ============================================================================
# Accounts
# ============================================================================


class PublicIdentity(BaseModel):
    """Externally shareable projection of an account."""

    id: int
    username: str
    created_at: datetime


class Account(BaseModel):
    """Persisted account record, including the password hash.

    Never leaves the identity service / repository boundary.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    password_hash: str = Field(..., repr=False)
    created_at: datetime

    def to_public(self) -> PublicIdentity:
        """Project to the public identity (drops password_hash)."""
        return PublicIdentity(
            id=self.id,
            username=self.username,
            created_at=self.created_at
        )


class UserStats(BaseModel):
    """Basic account statistics for the debug endpoints."""

    total_users: int
    database_connected: bool


# ============================================================================
# Tokens
# ============================================================================


class TokenPayload(BaseModel):
    """Claims of a verified access token."""

    user_id: int
    username: str
    iat: int
    exp: int
    iss: str
    aud: str

    @property
    def issued_at(self) -> datetime:
        return isodatetime.from_unix(self.iat)

    @property
    def expires_at(self) -> datetime:
        return isodatetime.from_unix(self.exp)

    def is_expiring_soon(self, hours: int = 24) -> bool:
        """True if the token expires within the next ``hours`` hours."""
        threshold = isodatetime.now_unix() + int(timedelta(hours=hours).total_seconds())
        return self.exp < threshold

    def hours_until_expiry(self) -> int:
        """Whole hours until expiry (negative once expired)."""
        return (self.exp - isodatetime.now_unix()) // 3600


# ============================================================================
# Responses
# ============================================================================


class AuthResponse(BaseModel):
    """Response of a successful register or login."""

    success: bool = True
    token: str | None = None
    user: PublicIdentity | None = None
    message: str | None = None


class TokenVerificationResponse(BaseModel):
    """Response of GET /auth/verify."""

    success: bool
    valid: bool
    user: PublicIdentity | None = None
    message: str | None = None
