"""
Storage backends for user records.

Both repositories expose the same small interface (``save``,
``find_by_id``, ``find_all``, ``delete_by_id``, ``delete_all``) so the
``UserService`` does not care where users live:

* ``InMemoryUserRepository`` keeps users in a lock-guarded list.  It is
  meant for demos and tests only; nothing survives a restart.
* ``SqliteUserRepository`` stores users in the ``users`` table created
  by ``core.db.init_db``.  Every call is one connection and one
  transaction.

Records handed out by either backend are copies, so callers cannot
change stored state without going through ``save``.
"""

import logging
import sqlite3
import threading
from typing import List, Optional, Protocol
from uuid import UUID

from user_directory_api.app.core.config import Settings
from user_directory_api.app.core.db import get_connection, get_cursor, init_db
from user_directory_api.app.schemas.user import UserRead


logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    def save(self, user: UserRead) -> UserRead: ...

    def find_by_id(self, user_id: UUID) -> Optional[UserRead]: ...

    def find_all(self) -> List[UserRead]: ...

    def delete_by_id(self, user_id: UUID) -> bool: ...

    def delete_all(self) -> None: ...


class InMemoryUserRepository:
    """Simple list-backed store.  NOT PRODUCTION SAFE."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: List[UserRead] = []

    def save(self, user: UserRead) -> UserRead:
        stored = user.model_copy()
        with self._lock:
            for index, existing in enumerate(self._users):
                if existing.id == stored.id:
                    self._users[index] = stored
                    break
            else:
                self._users.append(stored)
        return stored.model_copy()

    def find_by_id(self, user_id: UUID) -> Optional[UserRead]:
        with self._lock:
            for user in self._users:
                if user.id == user_id:
                    return user.model_copy()
        return None

    def find_all(self) -> List[UserRead]:
        with self._lock:
            return [user.model_copy() for user in self._users]

    def delete_by_id(self, user_id: UUID) -> bool:
        with self._lock:
            for index, user in enumerate(self._users):
                if user.id == user_id:
                    del self._users[index]
                    return True
        return False

    def delete_all(self) -> None:
        with self._lock:
            self._users.clear()


class SqliteUserRepository:
    """Repository persisting users in SQLite."""

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    def save(self, user: UserRead) -> UserRead:
        # Upsert keeps ``seq`` (and therefore list order) stable on update.
        with get_cursor(self.database_url) as cursor:
            cursor.execute(
                """
                INSERT INTO users (id, name, age) VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    age = excluded.age,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (str(user.id), user.name, user.age),
            )
        return user.model_copy()

    def find_by_id(self, user_id: UUID) -> Optional[UserRead]:
        conn = get_connection(self.database_url)
        try:
            row = conn.execute(
                "SELECT id, name, age FROM users WHERE id = ?",
                (str(user_id),),
            ).fetchone()
            if not row:
                return None
            return self._row_to_user_read(row)
        finally:
            conn.close()

    def find_all(self) -> List[UserRead]:
        conn = get_connection(self.database_url)
        try:
            rows = conn.execute("SELECT id, name, age FROM users ORDER BY seq ASC").fetchall()
            return [self._row_to_user_read(row) for row in rows]
        finally:
            conn.close()

    def delete_by_id(self, user_id: UUID) -> bool:
        with get_cursor(self.database_url) as cursor:
            cursor.execute("DELETE FROM users WHERE id = ?", (str(user_id),))
            return cursor.rowcount > 0

    def delete_all(self) -> None:
        with get_cursor(self.database_url) as cursor:
            cursor.execute("DELETE FROM users")

    @staticmethod
    def _row_to_user_read(row: sqlite3.Row) -> UserRead:
        return UserRead(id=UUID(row["id"]), name=row["name"], age=row["age"])


def build_repository(settings: Settings) -> UserRepository:
    """Create the repository selected by ``settings.storage_backend``.

    The SQLite backend has its migrations applied before it is returned.
    """
    backend = settings.storage_backend.lower()
    if backend == "memory":
        logger.info("Using in-memory user storage")
        return InMemoryUserRepository()
    if backend == "sqlite":
        logger.info("Using SQLite user storage at %s", settings.database_url)
        init_db(settings.database_url)
        return SqliteUserRepository(settings.database_url)
    raise ValueError(f"Unknown storage backend {settings.storage_backend!r}")
