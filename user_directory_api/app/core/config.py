"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts with an in-memory store and a single demo account.  In
a deployment you should at least override ``SECRET_KEY`` and
``AUTH_PASSWORD``.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "User Directory API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Routes are mounted under this prefix.  Empty by default so the
    # users resource lives at ``/users``.
    api_prefix: str = os.getenv("API_PREFIX", "")

    # Backend for the user directory: ``memory`` keeps users in a
    # process-local list, ``sqlite`` persists them to ``database_url``.
    storage_backend: str = os.getenv("STORAGE_BACKEND", "memory")

    # Path for the SQLite database.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "users.db")

    # When disabled every route is open to anonymous callers.
    security_enabled: bool = _env_flag("SECURITY_ENABLED", "true")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    # The single account allowed to modify users.  Accepted both as
    # HTTP Basic credentials and through ``POST /auth/login``.
    auth_username: str = os.getenv("AUTH_USERNAME", "user")
    auth_password: str = os.getenv("AUTH_PASSWORD", "password")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
