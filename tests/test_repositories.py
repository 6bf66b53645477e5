"""Tests for the in-memory and SQLite user repositories."""

from __future__ import annotations

import sqlite3
import uuid

import pytest

from user_directory_api.app.core.config import Settings
from user_directory_api.app.core.db import init_db
from user_directory_api.app.repositories.user_repository import (
    InMemoryUserRepository,
    SqliteUserRepository,
    build_repository,
)
from user_directory_api.app.schemas.user import UserRead


@pytest.fixture(params=["memory", "sqlite"])
def repository(request, tmp_path):
    if request.param == "memory":
        return InMemoryUserRepository()
    database_url = str(tmp_path / "users.db")
    init_db(database_url)
    return SqliteUserRepository(database_url)


def _user(name: str = "John", age: int = 43) -> UserRead:
    return UserRead(id=uuid.uuid4(), name=name, age=age)


def test_save_then_find_by_id(repository):
    user = _user()

    repository.save(user)

    assert repository.find_by_id(user.id) == user


def test_find_by_unknown_id_returns_none(repository):
    assert repository.find_by_id(uuid.uuid4()) is None


def test_find_all_keeps_insertion_order(repository):
    users = [_user(name=n) for n in ("c", "a", "b")]
    for user in users:
        repository.save(user)

    assert [u.name for u in repository.find_all()] == ["c", "a", "b"]


def test_save_existing_id_replaces_in_place(repository):
    first, second = _user(name="first"), _user(name="second")
    repository.save(first)
    repository.save(second)

    repository.save(UserRead(id=first.id, name="renamed", age=1))

    assert [u.name for u in repository.find_all()] == ["renamed", "second"]
    assert repository.find_by_id(first.id).age == 1


def test_delete_by_id(repository):
    user = _user()
    repository.save(user)

    assert repository.delete_by_id(user.id) is True
    assert repository.find_by_id(user.id) is None
    assert repository.delete_by_id(user.id) is False


def test_delete_all(repository):
    repository.save(_user())
    repository.save(_user())

    repository.delete_all()

    assert repository.find_all() == []


def test_null_fields_round_trip(repository):
    user = UserRead(id=uuid.uuid4(), name=None, age=None)
    repository.save(user)

    assert repository.find_by_id(user.id) == user


def test_sqlite_data_survives_new_repository(tmp_path):
    database_url = str(tmp_path / "users.db")
    init_db(database_url)
    user = _user()
    SqliteUserRepository(database_url).save(user)

    assert SqliteUserRepository(database_url).find_by_id(user.id) == user


def test_init_db_is_idempotent(tmp_path):
    database_url = str(tmp_path / "users.db")
    init_db(database_url)
    init_db(database_url)

    conn = sqlite3.connect(database_url)
    try:
        versions = [row[0] for row in conn.execute("SELECT version FROM migrations")]
    finally:
        conn.close()
    assert versions == [1]


def test_build_repository_selects_backend(tmp_path):
    memory = build_repository(Settings(storage_backend="memory"))
    sqlite_repo = build_repository(
        Settings(storage_backend="sqlite", database_url=str(tmp_path / "users.db"))
    )

    assert isinstance(memory, InMemoryUserRepository)
    assert isinstance(sqlite_repo, SqliteUserRepository)
    assert (tmp_path / "users.db").exists()


def test_build_repository_rejects_unknown_backend():
    with pytest.raises(ValueError, match="Unknown storage backend"):
        build_repository(Settings(storage_backend="mongo"))
