"""User table operations.

IMPORT CONVENTION:
- Core accesses these through core.user property
- UserRepository wraps them with one connection per call

Every method hits the database; nothing is cached. sqlite3 failures
surface as StorageError, and a unique-constraint violation on insert
surfaces as DuplicateUsername.
"""

import sqlite3

from ..auth.schemas import Account
from ..exceptions import DuplicateUsername
from ..utils import isodatetime
from . import storage_errors

_ACCOUNT_COLUMNS = "id, username, password_hash, created_at"

# Largest rowid SQLite can store; larger ints cannot be bound as parameters
SQLITE_MAX_INTEGER = 2**63 - 1


def _row_to_account(row: sqlite3.Row) -> Account:
    return Account(
        id=row["id"],
        username=row["username"],
        password_hash=row["password_hash"],
        created_at=isodatetime.to_datetime(row["created_at"]),
    )


class UserOperations:
    """User account operations on a single connection."""

    def __init__(self, conn: sqlite3.Connection):
        """Initialize user operations with a database connection.

        Args:
            conn: SQLite connection with row_factory set to sqlite3.Row
        """
        self._conn = conn

    def exists(self, username: str) -> bool:
        """True if an account holds this exact (case-sensitive) username."""
        with storage_errors("exists"):
            row = self._conn.execute(
                "SELECT 1 FROM users WHERE username = ? LIMIT 1",
                (username,)
            ).fetchone()
        return row is not None

    def create(self, username: str, password_hash: str) -> Account:
        """Insert a new account.

        Args:
            username: Already-validated username
            password_hash: bcrypt hash of the password

        Returns:
            The created Account with its storage-assigned id

        Raises:
            DuplicateUsername: If the username is already taken, whether by
                an earlier insert or a concurrent one
            StorageError: On any other database failure
        """
        now = isodatetime.now()
        with storage_errors("create"):
            try:
                cursor = self._conn.execute(
                    "INSERT INTO users (username, password_hash, created_at) VALUES (?, ?, ?)",
                    (username, password_hash, now)
                )
            except sqlite3.IntegrityError as e:
                if e.sqlite_errorname != "SQLITE_CONSTRAINT_UNIQUE":
                    raise
                raise DuplicateUsername(username) from e

        return Account(
            id=cursor.lastrowid,
            username=username,
            password_hash=password_hash,
            created_at=isodatetime.to_datetime(now),
        )

    def get_by_username(self, username: str) -> Account | None:
        """Account with this exact username, or None."""
        with storage_errors("get_by_username"):
            row = self._conn.execute(
                f"SELECT {_ACCOUNT_COLUMNS} FROM users WHERE username = ?",
                (username,)
            ).fetchone()
        return _row_to_account(row) if row else None

    def get_by_id(self, user_id: int) -> Account | None:
        """Account with this id, or None."""
        if user_id > SQLITE_MAX_INTEGER:
            return None
        with storage_errors("get_by_id"):
            row = self._conn.execute(
                f"SELECT {_ACCOUNT_COLUMNS} FROM users WHERE id = ?",
                (user_id,)
            ).fetchone()
        return _row_to_account(row) if row else None

    def list_all(self) -> list[Account]:
        """All accounts, most recently created first."""
        with storage_errors("list_all"):
            rows = self._conn.execute(
                f"SELECT {_ACCOUNT_COLUMNS} FROM users ORDER BY created_at DESC, id DESC"
            ).fetchall()
        return [_row_to_account(row) for row in rows]

    def count(self) -> int:
        """Total number of accounts."""
        with storage_errors("count"):
            row = self._conn.execute("SELECT COUNT(*) FROM users").fetchone()
        return row[0]

    def clear_all(self) -> int:
        """Delete every account. Development only.

        Returns:
            Number of deleted rows
        """
        with storage_errors("clear_all"):
            cursor = self._conn.execute("DELETE FROM users")
        return cursor.rowcount
