"""
Pydantic schema definitions for API payloads.

Schemas are separated from storage so the API representation of a
user does not depend on how it is persisted.
"""
