"""
Pydantic models for user data.

A user has an opaque UUID identifier assigned by the directory, a
name and an age.  Clients never choose the identifier: ``UserCreate``
tolerates an ``id`` in the payload but the directory discards it.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# Ages outside this range are rejected with 422 before reaching storage.
MAX_AGE = 150


class UserBase(BaseModel):
    name: Optional[str] = Field(None, examples=["John"])
    age: Optional[int] = Field(None, ge=0, le=MAX_AGE, examples=[43])


class UserCreate(UserBase):
    """Candidate submitted by a caller before an id is assigned."""

    id: Optional[UUID] = Field(None, description="Ignored; the directory assigns the identifier")


class UserUpdate(UserBase):
    """Changes applied by ``PUT /users/{id}``.

    Both fields replace the stored values.  A field left out of the
    payload is stored as ``null``.
    """


class UserRead(UserBase):
    """Schema for reading a user from the API."""

    id: UUID

    model_config = ConfigDict(from_attributes=True)
