"""Unit tests for UserService with a mocked repository."""

from __future__ import annotations

import threading
import uuid
from unittest.mock import MagicMock

import pytest

from user_directory_api.app.repositories.user_repository import InMemoryUserRepository
from user_directory_api.app.schemas.user import UserCreate, UserRead, UserUpdate
from user_directory_api.app.services.user_service import UserService


@pytest.fixture
def repository() -> MagicMock:
    repo = MagicMock()
    repo.save.side_effect = lambda user: user
    return repo


@pytest.fixture
def service(repository) -> UserService:
    return UserService(repository)


class TestWithMockedRepository:
    def test_list_returns_all_users(self, service, repository):
        users = [
            UserRead(id=uuid.uuid4(), name="John", age=43),
            UserRead(id=uuid.uuid4(), name="James", age=29),
        ]
        repository.find_all.return_value = users

        result = service.list()

        assert result == users
        repository.find_all.assert_called_once_with()

    def test_create_assigns_new_id_and_saves(self, service, repository):
        created = service.create(UserCreate(name="John", age=43))

        assert created.id is not None
        assert created.name == "John"
        assert created.age == 43
        repository.save.assert_called_once()
        saved = repository.save.call_args.args[0]
        assert saved.id == created.id

    def test_create_ignores_candidate_id(self, service):
        supplied = uuid.uuid4()

        created = service.create(UserCreate(id=supplied, name="John", age=43))

        assert created.id != supplied

    def test_get_existing_user(self, service, repository):
        some_id = uuid.uuid4()
        existing = UserRead(id=some_id, name="John", age=43)
        repository.find_by_id.return_value = existing

        assert service.get(some_id) == existing
        repository.find_by_id.assert_called_once_with(some_id)

    def test_get_unknown_user_returns_none(self, service, repository):
        repository.find_by_id.return_value = None

        assert service.get(uuid.uuid4()) is None

    def test_update_existing_user(self, service, repository):
        some_id = uuid.uuid4()
        repository.find_by_id.return_value = UserRead(id=some_id, name="John", age=43)

        updated = service.update(some_id, UserUpdate(name="Jeremy", age=65))

        assert updated == UserRead(id=some_id, name="Jeremy", age=65)
        repository.find_by_id.assert_called_once_with(some_id)
        repository.save.assert_called_once_with(UserRead(id=some_id, name="Jeremy", age=65))

    def test_update_unknown_user_returns_none_without_saving(self, service, repository):
        repository.find_by_id.return_value = None

        assert service.update(uuid.uuid4(), UserUpdate(name="Jeremy", age=65)) is None
        repository.save.assert_not_called()

    def test_update_replaces_omitted_fields(self, service, repository):
        some_id = uuid.uuid4()
        repository.find_by_id.return_value = UserRead(id=some_id, name="John", age=43)

        updated = service.update(some_id, UserUpdate(name="Jeremy"))

        assert updated.name == "Jeremy"
        assert updated.age is None

    def test_delete_delegates_to_repository(self, service, repository):
        some_id = uuid.uuid4()
        repository.delete_by_id.return_value = True

        assert service.delete(some_id) is True
        repository.delete_by_id.assert_called_once_with(some_id)

    def test_delete_unknown_user_is_a_noop(self, service, repository):
        repository.delete_by_id.return_value = False

        assert service.delete(uuid.uuid4()) is False


class TestDirectoryProperties:
    @pytest.fixture
    def directory(self) -> UserService:
        return UserService(InMemoryUserRepository())

    def test_created_user_is_retrievable(self, directory):
        created = directory.create(UserCreate(name="John", age=43))

        fetched = directory.get(created.id)

        assert fetched.name == "John"
        assert fetched.age == 43

    def test_same_explicit_id_yields_distinct_ids(self, directory):
        supplied = uuid.uuid4()

        first = directory.create(UserCreate(id=supplied, name="A", age=1))
        second = directory.create(UserCreate(id=supplied, name="B", age=2))

        assert first.id != second.id
        assert supplied not in {first.id, second.id}

    def test_get_after_delete_is_not_found(self, directory):
        created = directory.create(UserCreate(name="John", age=43))

        directory.delete(created.id)

        assert directory.get(created.id) is None

    def test_list_after_creates_and_deletes(self, directory):
        created = [directory.create(UserCreate(name=f"user{i}", age=i)) for i in range(5)]
        for user in created[:2]:
            directory.delete(user.id)

        remaining = directory.list()

        assert [u.id for u in remaining] == [u.id for u in created[2:]]

    def test_list_is_a_snapshot(self, directory):
        directory.create(UserCreate(name="John", age=43))

        snapshot = directory.list()
        snapshot.clear()

        assert len(directory.list()) == 1

    def test_mutating_returned_user_does_not_change_storage(self, directory):
        created = directory.create(UserCreate(name="John", age=43))

        created.name = "Mallory"

        assert directory.get(created.id).name == "John"

    def test_concurrent_creates_keep_every_user(self, directory):
        def worker(offset: int) -> None:
            for i in range(50):
                directory.create(UserCreate(name=f"w{offset}-{i}", age=i))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        users = directory.list()
        assert len(users) == 400
        assert len({u.id for u in users}) == 400
