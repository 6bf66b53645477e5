"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules: ``core`` (settings, logging, database, security),
``repositories`` (storage backends), ``services`` (the user
directory), ``schemas`` and the versioned routers under ``api``.
"""

from .main import app  # noqa: F401
