"""Flask application entry point."""

import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .config import settings
from .db import init_db
from .exceptions import (
    AuthenticationError,
    DubiumError,
    MissingCredentials,
    NotFoundError,
    RegistrationError,
    StorageError,
    ValidationError,
)
from .utils import isodatetime

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# Create Flask app
app = Flask(__name__)

# CORS configuration (mobile and web clients)
CORS(app, origins=settings.cors_origins, supports_credentials=True)


# Database initialization (runs once on app startup)
def initialize_database():
    """Initialize database on app startup."""
    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


with app.app_context():
    initialize_database()


# Error handlers


def _error_response(error: DubiumError, status: int):
    response = {
        "error": {
            "type": error.__class__.__name__,
            "message": error.message
        }
    }
    if error.details:
        response["error"]["details"] = error.details
    return jsonify(response), status


@app.errorhandler(ValidationError)
def handle_validation_error(error):
    """Malformed input: 400."""
    return _error_response(error, 400)


@app.errorhandler(MissingCredentials)
def handle_missing_credentials(error):
    """Blank login fields are a bad request, not a failed login: 400."""
    return _error_response(error, 400)


@app.errorhandler(AuthenticationError)
def handle_authentication_error(error):
    """Rejected credentials or token: 401."""
    return _error_response(error, 401)


@app.errorhandler(NotFoundError)
def handle_not_found(error):
    """Unknown or invalid account id: 404."""
    return _error_response(error, 404)


@app.errorhandler(RegistrationError)
def handle_registration_error(error):
    """Username already taken: 409."""
    return _error_response(error, 409)


@app.errorhandler(StorageError)
def handle_storage_error(error):
    """Backend failure: 500. Details stay in the server log."""
    logger.error(f"Storage error: {error.message}")
    return jsonify({
        "error": {
            "type": "StorageError",
            "message": "A database error occurred"
        }
    }), 500


@app.errorhandler(DubiumError)
def handle_dubium_error(error):
    """Any other DubiumError: 500."""
    return _error_response(error, 500)


@app.errorhandler(HTTPException)
def handle_http_exception(error):
    """Werkzeug HTTP errors (404, 405, ...) as JSON."""
    return jsonify({
        "error": {
            "type": error.name.replace(" ", ""),
            "message": error.description
        }
    }), error.code


@app.errorhandler(Exception)
def handle_internal_error(error):
    """Handle internal server errors."""
    logger.error(f"Internal error: {error}")
    return jsonify({
        "error": {
            "type": "InternalServerError",
            "message": "An internal error occurred"
        }
    }), 500


# Service endpoints
@app.route("/")
def index():
    return "Dubium API is running", 200, {"Content-Type": "text/plain; charset=utf-8"}


@app.route("/health")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


@app.route("/test")
def connection_test():
    """Connectivity check for clients."""
    return jsonify({
        "status": "success",
        "message": "API working correctly",
        "timestamp": isodatetime.now(),
    })


# Register blueprints
from .api.debug import debug_bp  # noqa: E402
from .auth.api import auth_bp  # noqa: E402

app.register_blueprint(auth_bp)
app.register_blueprint(debug_bp)


if __name__ == "__main__":
    app.run(debug=True)
