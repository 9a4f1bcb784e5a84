"""Tests for error handling and custom exceptions."""

import pytest
from flask import Flask

from dubium_core import main
from dubium_core.exceptions import (
    AccountNotFound,
    AuthenticationError,
    DubiumError,
    DuplicateUsername,
    IncorrectPassword,
    InvalidId,
    InvalidPassword,
    InvalidToken,
    InvalidUsername,
    MissingCredentials,
    NotFoundError,
    RegistrationError,
    StorageError,
    UserNotFound,
    UsernameTaken,
    ValidationError,
)


@pytest.fixture
def error_client():
    """Standalone app wired with the main app's error handlers."""
    test_app = Flask(__name__)
    test_app.config['TESTING'] = True

    test_app.errorhandler(ValidationError)(main.handle_validation_error)
    test_app.errorhandler(MissingCredentials)(main.handle_missing_credentials)
    test_app.errorhandler(AuthenticationError)(main.handle_authentication_error)
    test_app.errorhandler(NotFoundError)(main.handle_not_found)
    test_app.errorhandler(RegistrationError)(main.handle_registration_error)
    test_app.errorhandler(StorageError)(main.handle_storage_error)
    test_app.errorhandler(DubiumError)(main.handle_dubium_error)
    test_app.errorhandler(Exception)(main.handle_internal_error)

    raising = {
        "invalid-username": InvalidUsername("Username is required", {"field": "username"}),
        "missing-credentials": MissingCredentials("Username and password are required"),
        "incorrect-password": IncorrectPassword("Incorrect password"),
        "expired": InvalidToken("Token has expired", expired=True),
        "invalid-id": InvalidId("Account id must be a positive integer"),
        "taken": UsernameTaken("alice_1"),
        "storage": StorageError("Database error during create", {"operation": "create"}),
        "base": DubiumError("Something specific"),
        "internal": RuntimeError("Something went wrong"),
    }

    @test_app.route("/raise/<name>")
    def raise_error(name):
        raise raising[name]

    return test_app.test_client()


class TestExceptionClasses:
    """Test custom exception classes."""

    def test_base_error_with_message(self):
        error = DubiumError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.details == {}

    def test_base_error_with_details(self):
        details = {"field": "username"}
        assert DubiumError("Bad", details=details).details == details

    @pytest.mark.parametrize("cls, family", [
        (InvalidUsername, ValidationError),
        (InvalidPassword, ValidationError),
        (UsernameTaken, RegistrationError),
        (MissingCredentials, AuthenticationError),
        (UserNotFound, AuthenticationError),
        (IncorrectPassword, AuthenticationError),
        (InvalidToken, AuthenticationError),
        (InvalidId, NotFoundError),
        (AccountNotFound, NotFoundError),
        (DuplicateUsername, StorageError),
    ])
    def test_families(self, cls, family):
        assert issubclass(cls, family)
        assert issubclass(cls, DubiumError)

    def test_username_taken(self):
        error = UsernameTaken("alice_1")
        assert error.message == "Username 'alice_1' is already taken"
        assert error.details == {"username": "alice_1"}

    def test_invalid_token_codes(self):
        assert InvalidToken().details == {"code": "invalid_token"}
        assert InvalidToken().expired is False

        expired = InvalidToken("Token has expired", expired=True)
        assert expired.expired is True
        assert expired.details == {"code": "token_expired"}


class TestErrorHandlers:
    """Each family maps to its HTTP status with a JSON error body."""

    @pytest.mark.parametrize("name, status, error_type", [
        ("invalid-username", 400, "InvalidUsername"),
        ("missing-credentials", 400, "MissingCredentials"),
        ("incorrect-password", 401, "IncorrectPassword"),
        ("expired", 401, "InvalidToken"),
        ("invalid-id", 404, "InvalidId"),
        ("taken", 409, "UsernameTaken"),
        ("base", 500, "DubiumError"),
    ])
    def test_status_mapping(self, error_client, name, status, error_type):
        response = error_client.get(f"/raise/{name}")
        assert response.status_code == status
        assert response.get_json()["error"]["type"] == error_type

    def test_details_included(self, error_client):
        error = error_client.get("/raise/invalid-username").get_json()["error"]
        assert error["message"] == "Username is required"
        assert error["details"] == {"field": "username"}

    def test_details_omitted_when_empty(self, error_client):
        error = error_client.get("/raise/invalid-id").get_json()["error"]
        assert "details" not in error

    def test_storage_error_is_generic(self, error_client):
        """Storage internals stay in the server log."""
        response = error_client.get("/raise/storage")
        assert response.status_code == 500
        assert response.get_json() == {
            "error": {"type": "StorageError", "message": "A database error occurred"}
        }

    def test_unexpected_exception(self, error_client):
        response = error_client.get("/raise/internal")
        assert response.status_code == 500

        error = response.get_json()["error"]
        assert error["type"] == "InternalServerError"
        assert "Something went wrong" not in error["message"]
