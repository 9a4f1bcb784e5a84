"""Database module for Dubium Core.

This module provides the Core API for database operations.
Core encapsulates connection management and provides access to the
user operations.

ARCHITECTURE:
- Core owns its connection (no global connection accessor)
- Connection closes on context exit (atomic=True) or on garbage
  collection (atomic=False, autocommit)
- UserRepository (db.repository) opens one atomic Core per call, which
  is what the identity service receives

Usage:

    Autocommit mode (single operation):
    >>> core = get_core()
    >>> account = core.user.get_by_username("alice_1")

    Atomic mode (commit together on exit):
    >>> with get_core(atomic=True) as core:
    ...     core.user.create("alice_1", password_hash)
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from ..config import settings
from ..exceptions import StorageError
from ..schema import SCHEMA_PATH

if TYPE_CHECKING:
    from .user import UserOperations

logger = logging.getLogger(__name__)

# Seconds a writer waits on a locked database before failing
BUSY_TIMEOUT = 30.0


@contextmanager
def storage_errors(operation: str):
    """Translate sqlite3 failures into StorageError.

    Dubium errors raised inside the block pass through unchanged.
    """
    try:
        yield
    except sqlite3.Error as e:
        logger.error(f"Storage failure during {operation}: {type(e).__name__}: {e}")
        raise StorageError(
            f"Database error during {operation}",
            {"operation": operation}
        ) from e


class Core:
    """
    Database Core with user operations.

    Maintains its own connection and transaction state.

    Connection Lifecycle:
    - atomic=True: Connection commits or rolls back and closes on __exit__
    - atomic=False: Autocommit connection, closed when Core is collected
    """

    def __init__(self, connection: sqlite3.Connection, atomic: bool = False):
        """Initialize Core with a database connection.

        Args:
            connection: SQLite connection with row_factory set to sqlite3.Row
            atomic: If True, Core MUST be used as context manager.
                    If False, Core has autocommit semantics.
        """
        self._conn = connection
        self._atomic = atomic
        self._user_ops = None

    @property
    def user(self) -> "UserOperations":
        """User operations.

        Lazy-loaded to avoid circular import issues.
        """
        if self._user_ops is None:
            from .user import UserOperations
            self._user_ops = UserOperations(self._conn)
        return self._user_ops

    def ping(self) -> bool:
        """Run a trivial query; True if the database answers."""
        try:
            return self._conn.execute("SELECT 1").fetchone() is not None
        except sqlite3.Error as e:
            logger.error(f"Database ping failed: {e}")
            return False

    def schema_version(self) -> str | None:
        """Version row from _schema_metadata, or None if absent."""
        row = self._conn.execute(
            "SELECT value FROM _schema_metadata WHERE key = 'version'"
        ).fetchone()
        return row[0] if row else None

    def __enter__(self) -> "Core":
        if not self._atomic:
            raise RuntimeError(
                "Core must be created with atomic=True for context manager use. "
                "Use: with db.get_core(atomic=True) as core:"
            )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self._conn.commit()
            else:
                self._conn.rollback()
        finally:
            self._conn.close()

    def __del__(self):
        if hasattr(self, "_conn") and self._conn:
            try:
                self._conn.close()
            except sqlite3.Error:
                # Connection may already be closed or invalid
                pass


def _create_connection(database_path: str | None = None, autocommit: bool = False) -> sqlite3.Connection:
    """Create a fresh database connection.

    Args:
        database_path: Path to the SQLite file (defaults to settings)
        autocommit: If True, every statement commits immediately

    Returns:
        SQLite connection with row_factory set to sqlite3.Row
    """
    db_path = Path(database_path or settings.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(
        str(db_path),
        timeout=BUSY_TIMEOUT,
        isolation_level=None if autocommit else "DEFERRED",
        check_same_thread=False,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_core(atomic: bool = False, database_path: str | None = None) -> Core:
    """
    Get a database Core instance.

    Args:
        atomic: If True, returns a Core that MUST be used as context manager.
                If False (default), returns a Core with autocommit semantics.
        database_path: Override the configured database file

    Returns:
        Core instance with user operations

    Raises:
        StorageError: If the database cannot be opened
    """
    with storage_errors("connect"):
        conn = _create_connection(database_path, autocommit=not atomic)
    return Core(conn, atomic=atomic)


# ============================================================================
# DATABASE INITIALIZATION
# ============================================================================


def apply_schema(conn: sqlite3.Connection) -> None:
    """Run schema.sql against an open connection."""
    conn.executescript(SCHEMA_PATH.read_text())
    conn.commit()


def init_db(database_path: str | None = None) -> None:
    """Initialize database by running schema.sql if not already initialized."""
    db_path = Path(database_path or settings.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    try:
        # WAL lets readers proceed while a registration is being written
        conn.execute("PRAGMA journal_mode=WAL")
        cursor = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='_schema_metadata'"
        )
        if cursor.fetchone():
            return
        apply_schema(conn)
        logger.info(f"Database schema applied at {db_path}")
    finally:
        conn.close()


def get_schema_version(database_path: str | None = None) -> str:
    """Current schema version from _schema_metadata, or 'unknown'."""
    with storage_errors("schema version lookup"), get_core(atomic=True, database_path=database_path) as core:
        version = core.schema_version()
    return version or "unknown"
