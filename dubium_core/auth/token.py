"""JWT token service for bearer authentication.

Tokens are stateless and non-revocable: validity is a function of the
signature, issuer, audience and expiry only. No storage lookup is needed
to verify one.

Claims carried by every token:
- userId: account id (int > 0)
- username: account username
- iat / exp: issue and expiry time (unix seconds)
- iss / aud: configured issuer and audience
"""

import logging
from datetime import timedelta

import jwt

from ..config import settings
from ..exceptions import InvalidToken
from ..utils import isodatetime
from .schemas import TokenPayload

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["userId", "username", "iat", "exp", "iss", "aud"]


class TokenService:
    """Issues and verifies signed access tokens.

    Holds only immutable configuration, so one instance can be shared
    between request threads.
    """

    def __init__(
        self,
        secret_key: str,
        issuer: str,
        audience: str,
        lifetime: timedelta = timedelta(days=30),
    ):
        self._secret_key = secret_key
        self.issuer = issuer
        self.audience = audience
        self.lifetime = lifetime

    @classmethod
    def from_settings(cls) -> "TokenService":
        """Build a service from the current application settings."""
        return cls(
            secret_key=settings.jwt_secret_key,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            lifetime=timedelta(days=settings.jwt_expiry_days),
        )

    def issue(self, user_id: int, username: str) -> str:
        """
        Issue a signed access token.

        Args:
            user_id: Account id
            username: Account username

        Returns:
            Encoded JWT string
        """
        now_ts = isodatetime.now_unix()
        payload = {
            "userId": user_id,
            "username": username,
            "iat": now_ts,
            "exp": now_ts + int(self.lifetime.total_seconds()),
            "iss": self.issuer,
            "aud": self.audience,
        }
        return jwt.encode(payload, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenPayload:
        """
        Verify a token and return its claims.

        Raises:
            InvalidToken: On bad signature, wrong issuer or audience,
                expiry in the past, malformed token, or missing/malformed
                userId/username claims. Nothing else escapes.
        """
        if not isinstance(token, str) or not token:
            raise InvalidToken("Missing token")

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                audience=self.audience,
                issuer=self.issuer,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidToken("Token has expired", expired=True)
        except jwt.InvalidTokenError as e:
            logger.debug(f"Token rejected: {type(e).__name__}")
            raise InvalidToken("Invalid token")

        user_id = payload["userId"]
        username = payload["username"]
        if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
            raise InvalidToken("Invalid userId claim")
        if not isinstance(username, str) or not username.strip():
            raise InvalidToken("Invalid username claim")

        return TokenPayload(
            user_id=user_id,
            username=username,
            iat=payload["iat"],
            exp=payload["exp"],
            iss=payload["iss"],
            aud=payload["aud"],
        )


def get_token_service() -> TokenService:
    """Token service configured from the current settings."""
    return TokenService.from_settings()


def generate_access_token(user_id: int, username: str) -> str:
    """Issue a token with the default service."""
    return get_token_service().issue(user_id, username)


def validate_access_token(token: str) -> TokenPayload:
    """Verify a token with the default service."""
    return get_token_service().verify(token)


def decode_token_no_validation(token: str) -> dict:
    """
    Decode token claims WITHOUT checking the signature or expiry.

    For debugging and introspection only. Never use the result for
    authorization decisions.

    Raises:
        InvalidToken: If the token is not structurally a JWT
    """
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        raise InvalidToken("Malformed token")


def get_token_expiry_remaining(token: str) -> timedelta | None:
    """Time until expiry of a valid token, or None if invalid/expired."""
    try:
        payload = validate_access_token(token)
    except InvalidToken:
        return None
    return timedelta(seconds=payload.exp - isodatetime.now_unix())


def is_token_expired(token: str) -> bool:
    """True if the token is expired or otherwise invalid."""
    return get_token_expiry_remaining(token) is None
