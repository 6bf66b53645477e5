"""
Main entrypoint for the User Directory API.

This module assembles the FastAPI application: it sets up logging,
builds the user directory on top of the configured storage backend
and includes the versioned routers.  ``create_app`` returns a fully
configured app; an instance built from the environment is created at
import time as ``app`` so it can be served directly::

    uvicorn user_directory_api.app.main:app --reload
"""

import logging
from typing import Optional

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.logging_config import setup_logging
from .core.security import AccountStore
from .repositories.user_repository import build_repository
from .services.user_service import UserService


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the settings read from the
        environment at import time.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings

    # Initialise logging before anything else so that the setup below
    # can log.
    setup_logging(settings.log_level, settings.log_file)
    logger = logging.getLogger(__name__)

    app = FastAPI(title=settings.project_name, version=settings.api_version)

    # The directory and the account live on the app, not in module
    # globals, so every app built by ``create_app`` is isolated.
    app.state.settings = settings
    app.state.user_service = UserService(build_repository(settings))
    app.state.accounts = AccountStore(settings.auth_username, settings.auth_password)

    app.include_router(v1_router, prefix=settings.api_prefix)

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok"}

    logger.info(
        "%s %s ready (storage=%s, security=%s)",
        settings.project_name,
        settings.api_version,
        settings.storage_backend,
        "on" if settings.security_enabled else "off",
    )
    return app


app = create_app()
