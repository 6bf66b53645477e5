"""Shared fixtures for the user directory test suite."""

from __future__ import annotations

import base64

import pytest
from starlette.testclient import TestClient

from user_directory_api.app.core.config import Settings
from user_directory_api.app.main import create_app


USERNAME = "tester"
PASSWORD = "s3cret"


def basic_auth(username: str = USERNAME, password: str = PASSWORD) -> dict:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def make_settings(tmp_path):
    """Return a factory for isolated settings (secret, account, sqlite path)."""

    def _make(**overrides) -> Settings:
        values = dict(
            storage_backend="memory",
            database_url=str(tmp_path / "users.db"),
            security_enabled=True,
            secret_key="test-secret",
            auth_username=USERNAME,
            auth_password=PASSWORD,
        )
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture(params=["memory", "sqlite"])
def client(request, make_settings) -> TestClient:
    """Client for a secured app, once per storage backend."""
    app = create_app(make_settings(storage_backend=request.param))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers() -> dict:
    return basic_auth()
