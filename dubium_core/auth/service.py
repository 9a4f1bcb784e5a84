"""Identity service: registration, login and account lookup.

This is the component the transport layer calls. It combines the
credential validator, the password hasher and a user repository, and
only ever returns PublicIdentity objects. Password hashes do not leave
this module.

Failures are raised as typed exceptions (see dubium_core.exceptions).
StorageError from the repository propagates unchanged so callers can
tell backend failures from domain rejections.
"""

import logging

from ..db.repository import UserRepository
from ..exceptions import (
    AccountNotFound,
    DuplicateUsername,
    IncorrectPassword,
    InvalidId,
    MissingCredentials,
    UserNotFound,
    UsernameTaken,
)
from .password import dummy_verify, hash_password, verify_password
from .schemas import PublicIdentity, UserStats
from .validation import validate_password, validate_username

logger = logging.getLogger(__name__)


class IdentityService:
    """
    Account identity operations over an injected repository.

    The repository is any object exposing exists, create, get_by_username,
    get_by_id, list_all, count and ping with the semantics of
    UserRepository.
    """

    def __init__(self, repository: UserRepository):
        self.repository = repository

    def register(self, username: str, password: str) -> PublicIdentity:
        """
        Register a new account.

        Steps:
        1. Validate username then password (first failure wins, no I/O)
        2. Reject a username that already exists
        3. Hash the password
        4. Insert; a unique-constraint loss to a concurrent registration
           is reported the same way as step 2

        No token is issued here.

        Raises:
            InvalidUsername, InvalidPassword: Malformed input
            UsernameTaken: Username already registered
            StorageError: Backend failure
        """
        validate_username(username)
        validate_password(password)

        if self.repository.exists(username):
            logger.info(f"Registration rejected, username taken: {username}")
            raise UsernameTaken(username)

        password_hash = hash_password(password)

        try:
            account = self.repository.create(username, password_hash)
        except DuplicateUsername:
            logger.info(f"Registration lost insert race for username: {username}")
            raise UsernameTaken(username)

        logger.info(f"Registered user {account.username} (id={account.id})")
        return account.to_public()

    def login(self, username: str, password: str) -> PublicIdentity:
        """
        Authenticate a username/password pair.

        UserNotFound and IncorrectPassword are distinct here; the HTTP layer
        renders both identically so usernames cannot be enumerated.

        Raises:
            MissingCredentials: Blank username or password
            UserNotFound: No such username
            IncorrectPassword: Password does not match
            StorageError: Backend failure
        """
        if not username or not username.strip():
            raise MissingCredentials("Username is required", {"field": "username"})
        if not password or not password.strip():
            raise MissingCredentials("Password is required", {"field": "password"})

        account = self.repository.get_by_username(username)
        if account is None:
            logger.warning(f"Login failed, unknown username: {username}")
            dummy_verify(password)
            raise UserNotFound("User not found", {"username": username})

        if not verify_password(password, account.password_hash):
            logger.warning(f"Login failed, wrong password for username: {username}")
            raise IncorrectPassword("Incorrect password", {"username": username})

        logger.info(f"Successful login: {account.username}")
        return account.to_public()

    def get_by_id(self, user_id: int) -> PublicIdentity:
        """
        Look up an account by id.

        Raises:
            InvalidId: user_id <= 0 (checked before any storage access)
            AccountNotFound: No account with this id
        """
        if user_id <= 0:
            raise InvalidId("Invalid user id", {"user_id": user_id})

        account = self.repository.get_by_id(user_id)
        if account is None:
            raise AccountNotFound("User not found", {"user_id": user_id})
        return account.to_public()

    def list_all(self) -> list[PublicIdentity]:
        """Every account, newest first. Debug use only."""
        return [account.to_public() for account in self.repository.list_all()]

    def exists(self, username: str) -> bool:
        return self.repository.exists(username)

    def stats(self) -> UserStats:
        """Account count and database connectivity."""
        connected = self.repository.ping()
        return UserStats(
            total_users=self.repository.count() if connected else 0,
            database_connected=connected,
        )

    def create_test_user(self, username: str = "testuser", password: str = "test123") -> PublicIdentity:
        """Register a fixed test account. Development only."""
        return self.register(username, password)


def get_identity_service() -> IdentityService:
    """Identity service backed by the configured SQLite database."""
    return IdentityService(UserRepository())
