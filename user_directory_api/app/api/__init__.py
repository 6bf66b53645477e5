"""
API package containing versioned routes.

Each version subpackage (currently only ``v1``) exposes a top-level
``router`` that includes its resource endpoints.
"""
