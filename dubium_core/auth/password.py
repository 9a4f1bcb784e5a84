"""Password hashing and verification using bcrypt."""

import logging

import bcrypt

from ..config import settings

logger = logging.getLogger(__name__)

# bcrypt only uses the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """
    Hash a password with a fresh salt.

    Hashing the same password twice yields two different strings.

    Args:
        password: Plaintext password

    Returns:
        bcrypt hash string ($2b$<cost>$..., 60 characters)
    """
    salt = bcrypt.gensalt(rounds=settings.bcrypt_work_factor)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a password against a stored hash in constant time.

    Never raises: a malformed hash or any bcrypt failure counts as a
    mismatch.
    """
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Password verification failed on unusable hash: {type(e).__name__}")
        return False


def needs_rehash(password_hash: str) -> bool:
    """True if the hash cost differs from the configured work factor."""
    # Format: $2b$<cost>$<salt+digest>
    parts = password_hash.split("$")
    if len(parts) < 4 or not parts[2].isdigit():
        return True
    return int(parts[2]) != settings.bcrypt_work_factor


# Throwaway hashes keyed by work factor, for dummy_verify
_DUMMY_HASHES: dict[int, str] = {}


def dummy_verify(password: str) -> None:
    """
    Run one bcrypt verification against a throwaway hash.

    Called when no stored hash exists, so a login for an unknown username
    costs the same as one with a wrong password.
    """
    rounds = settings.bcrypt_work_factor
    if rounds not in _DUMMY_HASHES:
        _DUMMY_HASHES[rounds] = hash_password("dubium-unknown-user")
    verify_password(password, _DUMMY_HASHES[rounds])
