"""
Persistence layer for the user directory.

The service layer depends only on the ``UserRepository`` interface;
``build_repository`` picks the concrete backend from the settings.
"""

from .user_repository import (  # noqa: F401
    InMemoryUserRepository,
    SqliteUserRepository,
    UserRepository,
    build_repository,
)
