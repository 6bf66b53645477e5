"""
Business logic for users.

``UserService`` is the user directory: it owns the repository, assigns
identifiers and serialises every operation behind a single re-entrant
lock.  Request handlers run in a threadpool, so without the lock an
update could interleave with a concurrent delete or a listing could
observe a half-applied change.

A missing user is reported as ``None`` rather than an exception; the
HTTP layer decides which status code that becomes.
"""

import logging
import threading
import uuid
from typing import List, Optional
from uuid import UUID

from ..repositories.user_repository import UserRepository
from ..schemas.user import UserCreate, UserRead, UserUpdate


logger = logging.getLogger(__name__)


class UserService:
    """User directory backed by a ``UserRepository``."""

    def __init__(self, repository: UserRepository) -> None:
        self.repository = repository
        self._lock = threading.RLock()

    def list(self) -> List[UserRead]:
        """Return all users in insertion order."""
        with self._lock:
            return list(self.repository.find_all())

    def get(self, user_id: UUID) -> Optional[UserRead]:
        """Return the user with ``user_id`` or ``None`` if there is none."""
        with self._lock:
            user = self.repository.find_by_id(user_id)
        if user is None:
            logger.debug("User %s not found", user_id)
        return user

    def create(self, candidate: UserCreate) -> UserRead:
        """Store a new user under a freshly generated id.

        Any ``id`` carried by the candidate is discarded.
        """
        with self._lock:
            user = UserRead(id=uuid.uuid4(), name=candidate.name, age=candidate.age)
            created = self.repository.save(user)
        logger.info("Created user %s", created.id)
        return created

    def update(self, user_id: UUID, changes: UserUpdate) -> Optional[UserRead]:
        """Replace name and age of an existing user.

        Returns the updated user, or ``None`` if ``user_id`` is unknown.
        """
        with self._lock:
            user = self.repository.find_by_id(user_id)
            if user is None:
                logger.debug("Cannot update unknown user %s", user_id)
                return None
            user.name = changes.name
            user.age = changes.age
            updated = self.repository.save(user)
        logger.info("Updated user %s", user_id)
        return updated

    def delete(self, user_id: UUID) -> bool:
        """Remove a user.

        Deleting an unknown id is a no-op; the return value tells
        whether a record was actually removed.
        """
        with self._lock:
            deleted = self.repository.delete_by_id(user_id)
        if deleted:
            logger.info("Deleted user %s", user_id)
        return deleted
