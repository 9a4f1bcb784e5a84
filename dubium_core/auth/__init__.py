"""Authentication module for Dubium Core.

This module provides the account identity and token subsystem:
- Credential shape validation
- Password hashing and verification
- JWT token issuance and validation
- Identity service (register, login, lookup)
- Authentication decorator for protected endpoints

Auth endpoints:
- POST /auth/register - Create account and return JWT token
- POST /auth/login - Authenticate and return JWT token
- GET /auth/verify - Check a token and return its user
- POST /auth/logout - Stateless logout (client discards token)
- GET /user/profile - Current user info
"""

from . import password, schemas, token, validation

__all__ = ["password", "schemas", "token", "validation"]
