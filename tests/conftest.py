"""Shared test fixtures for dubium-core."""

import os
import sqlite3
import tempfile

# Point the app at a throwaway database before dubium_core.main is imported
# (it initializes the configured database at import time).
_fd, _SESSION_DB_PATH = tempfile.mkstemp(suffix=".db")
os.close(_fd)
os.environ["DATABASE_PATH"] = _SESSION_DB_PATH

import pytest

from dubium_core.auth import token as auth_token
from dubium_core.auth.service import IdentityService
from dubium_core.config import settings
from dubium_core.db import apply_schema, init_db
from dubium_core.db.repository import UserRepository
from dubium_core.db.user import UserOperations
from dubium_core.main import app


@pytest.fixture(autouse=True)
def fast_hashing():
    """Use the minimum bcrypt work factor so tests stay fast."""
    original = settings.bcrypt_work_factor
    settings.bcrypt_work_factor = 4
    yield
    settings.bcrypt_work_factor = original


@pytest.fixture
def test_db():
    """Create in-memory test database with schema."""
    db = sqlite3.connect(":memory:")
    db.row_factory = sqlite3.Row
    apply_schema(db)

    yield db

    db.close()


@pytest.fixture
def user_ops(test_db):
    """UserOperations bound to the in-memory database."""
    return UserOperations(test_db)


@pytest.fixture
def db_path():
    """Temp-file database with schema applied; removed after the test."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    init_db(path)

    yield path

    for suffix in ("", "-wal", "-shm"):
        try:
            os.unlink(path + suffix)
        except FileNotFoundError:
            pass


@pytest.fixture
def repository(db_path):
    """UserRepository over a fresh temp-file database."""
    return UserRepository(db_path)


@pytest.fixture
def identity_service(repository):
    """IdentityService over a fresh temp-file database."""
    return IdentityService(repository)


@pytest.fixture
def client(db_path):
    """Create test client for API testing.

    Each test gets a fresh temp-file database.
    """
    original_db_path = settings.database_path
    settings.database_path = db_path
    try:
        app.config['TESTING'] = True
        with app.test_client() as client:
            yield client
    finally:
        settings.database_path = original_db_path


@pytest.fixture
def registered_user(identity_service):
    """Register a user and return (PublicIdentity, password)."""
    password = "pass123"
    user = identity_service.register("alice_1", password)
    return user, password


@pytest.fixture
def auth_headers(client):
    """Register a user through the API and return (user dict, headers)."""
    response = client.post(
        "/auth/register",
        json={"username": "alice_1", "password": "pass123"}
    )
    data = response.get_json()
    return data["user"], {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
def jwt_token():
    """A valid token for user id 1 / alice_1."""
    return auth_token.generate_access_token(1, "alice_1")


def pytest_sessionfinish(session, exitstatus):
    for suffix in ("", "-wal", "-shm"):
        try:
            os.unlink(_SESSION_DB_PATH + suffix)
        except FileNotFoundError:
            pass
