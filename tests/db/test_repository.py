"""Tests for UserRepository (connection-per-call storage)."""

import os
import tempfile

import pytest

from dubium_core.db.repository import UserRepository
from dubium_core.exceptions import DuplicateUsername, StorageError


class TestRepositoryOperations:
    """Each call reflects the durable state."""

    def test_create_then_find(self, repository):
        created = repository.create("alice_1", "hash")

        assert repository.get_by_username("alice_1") == created
        assert repository.get_by_id(created.id) == created
        assert repository.exists("alice_1") is True
        assert repository.count() == 1

    def test_writes_visible_to_other_instances(self, db_path):
        """No caching: a second repository sees the first one's insert."""
        UserRepository(db_path).create("alice_1", "hash")
        assert UserRepository(db_path).exists("alice_1") is True

    def test_duplicate_username(self, repository):
        repository.create("alice_1", "hash")
        with pytest.raises(DuplicateUsername):
            repository.create("alice_1", "hash")

    def test_failed_insert_is_rolled_back(self, repository):
        repository.create("alice_1", "hash")
        with pytest.raises(DuplicateUsername):
            repository.create("alice_1", "hash")
        assert repository.count() == 1

    def test_list_all_newest_first(self, repository):
        repository.create("user1", "hash")
        repository.create("user2", "hash")
        assert [a.username for a in repository.list_all()] == ["user2", "user1"]

    def test_clear_all(self, repository):
        repository.create("user1", "hash")
        repository.create("user2", "hash")

        assert repository.clear_all() == 2
        assert repository.count() == 0
        assert repository.list_all() == []

    def test_ping(self, repository):
        assert repository.ping() is True


class TestRepositoryStorageFailures:
    """Backend failures surface as StorageError."""

    @pytest.fixture
    def uninitialized_path(self):
        fd, path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        yield path
        os.unlink(path)

    def test_missing_schema_raises_storage_error(self, uninitialized_path):
        repository = UserRepository(uninitialized_path)
        with pytest.raises(StorageError):
            repository.count()

    def test_unopenable_database_raises_storage_error(self, tmp_path):
        # A directory cannot be opened as a database file
        repository = UserRepository(str(tmp_path))
        with pytest.raises(StorageError):
            repository.exists("alice_1")

    def test_ping_false_when_unopenable(self, tmp_path):
        assert UserRepository(str(tmp_path)).ping() is False
