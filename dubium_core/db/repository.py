"""User repository consumed by the identity service.

Each call opens its own atomic Core, so the repository holds no
connection state and can be shared by every request thread. Results
always reflect the current durable state.
"""

import logging

from ..auth.schemas import Account
from ..exceptions import StorageError
from . import get_core, storage_errors

logger = logging.getLogger(__name__)


class UserRepository:
    """SQLite-backed account storage.

    Args:
        database_path: SQLite file to use; defaults to settings.database_path
            at call time
    """

    def __init__(self, database_path: str | None = None):
        self._database_path = database_path

    def _core(self):
        return get_core(atomic=True, database_path=self._database_path)

    def exists(self, username: str) -> bool:
        with storage_errors("exists"), self._core() as core:
            return core.user.exists(username)

    def create(self, username: str, password_hash: str) -> Account:
        """Insert an account; raises DuplicateUsername on a taken username."""
        with storage_errors("create"), self._core() as core:
            return core.user.create(username, password_hash)

    def get_by_username(self, username: str) -> Account | None:
        with storage_errors("get_by_username"), self._core() as core:
            return core.user.get_by_username(username)

    def get_by_id(self, user_id: int) -> Account | None:
        with storage_errors("get_by_id"), self._core() as core:
            return core.user.get_by_id(user_id)

    def list_all(self) -> list[Account]:
        with storage_errors("list_all"), self._core() as core:
            return core.user.list_all()

    def count(self) -> int:
        with storage_errors("count"), self._core() as core:
            return core.user.count()

    def clear_all(self) -> int:
        """Delete all accounts. Development only."""
        with storage_errors("clear_all"), self._core() as core:
            deleted = core.user.clear_all()
        logger.warning(f"Cleared {deleted} user accounts")
        return deleted

    def ping(self) -> bool:
        """True if the database can be opened and queried."""
        try:
            with self._core() as core:
                return core.ping()
        except StorageError:
            return False
