"""Exception hierarchy for Dubium Core.

Every error carries a human-readable ``message`` and an optional ``details``
dict. Messages and details never contain plaintext passwords, password
hashes, or the signing secret.

The transport layer maps the families below to HTTP status codes:

- ValidationError     -> 400
- AuthenticationError -> 401
- NotFoundError       -> 404
- RegistrationError   -> 409
- StorageError        -> 500
"""


class DubiumError(Exception):
    """Base exception for all Dubium errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


# ============================================================================
# Validation (no I/O attempted)
# ============================================================================


class ValidationError(DubiumError):
    """Malformed input detected before any storage access."""
    pass


class InvalidUsername(ValidationError):
    """Username does not satisfy the shape rules."""
    pass


class InvalidPassword(ValidationError):
    """Password does not satisfy the shape rules."""
    pass


# ============================================================================
# Registration
# ============================================================================


class RegistrationError(DubiumError):
    """Registration was rejected for a domain reason."""
    pass


class UsernameTaken(RegistrationError):
    """Another account already holds the username."""

    def __init__(self, username: str):
        super().__init__(
            f"Username '{username}' is already taken",
            {"username": username}
        )


# ============================================================================
# Authentication
# ============================================================================


class AuthenticationError(DubiumError):
    """Credentials or token were rejected."""
    pass


class MissingCredentials(AuthenticationError):
    """Username or password was blank."""
    pass


class UserNotFound(AuthenticationError):
    """No account exists for the given username."""
    pass


class IncorrectPassword(AuthenticationError):
    """Password does not match the stored hash."""
    pass


class InvalidToken(AuthenticationError):
    """Token failed signature, issuer, audience, expiry or claim checks."""

    def __init__(self, message: str = "Invalid token", expired: bool = False):
        self.expired = expired
        super().__init__(
            message,
            {"code": "token_expired" if expired else "invalid_token"}
        )


# ============================================================================
# Lookup
# ============================================================================


class NotFoundError(DubiumError):
    """Requested account could not be returned."""
    pass


class InvalidId(NotFoundError):
    """Account id is not a positive integer."""
    pass


class AccountNotFound(NotFoundError):
    """No account exists with the given id."""
    pass


# ============================================================================
# Storage
# ============================================================================


class StorageError(DubiumError):
    """Connectivity or unexpected backend failure."""
    pass


class DuplicateUsername(StorageError):
    """The storage unique constraint rejected an insert.

    Raised by the repository only. The identity service translates it
    into UsernameTaken.
    """

    def __init__(self, username: str):
        super().__init__(
            "Username violates unique constraint",
            {"username": username}
        )
