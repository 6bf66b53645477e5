"""
User endpoints for API v1.

CRUD over the user directory.  Listing is public; reading a single
user, creating, updating and deleting require an authenticated
caller (see ``core.security``).  Handlers are plain functions so
FastAPI runs them in its threadpool; the directory itself serialises
access.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from user_directory_api.app.core.security import get_current_user
from user_directory_api.app.schemas.user import UserCreate, UserRead, UserUpdate
from user_directory_api.app.services.user_service import UserService


router = APIRouter()


def get_user_service(request: Request) -> UserService:
    """Return the directory owned by the running application."""
    return request.app.state.user_service


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.get("", response_model=List[UserRead])
def list_users(service: UserService = Depends(get_user_service)) -> List[UserRead]:
    """Return all users in the order they were created.

    Open to anonymous callers.
    """
    return service.list()


@router.get("/{user_id}", response_model=UserRead, name="get_user")
def get_user(
    user_id: UUID,
    service: UserService = Depends(get_user_service),
    current_user: dict = Depends(get_current_user),
) -> UserRead:
    """Retrieve a single user.  Returns HTTP 404 if the id is unknown."""
    user = service.get(user_id)
    if user is None:
        raise _not_found()
    return user


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    candidate: UserCreate,
    request: Request,
    response: Response,
    service: UserService = Depends(get_user_service),
    current_user: dict = Depends(get_current_user),
) -> UserRead:
    """Create a user.

    The ``id`` in the payload, if any, is ignored.  The response
    carries a ``Location`` header pointing at the new resource.
    """
    user = service.create(candidate)
    response.headers["Location"] = str(request.url_for("get_user", user_id=str(user.id)))
    return user


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: UUID,
    changes: UserUpdate,
    service: UserService = Depends(get_user_service),
    current_user: dict = Depends(get_current_user),
) -> UserRead:
    """Replace name and age of an existing user."""
    user = service.update(user_id, changes)
    if user is None:
        raise _not_found()
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: UUID,
    service: UserService = Depends(get_user_service),
    current_user: dict = Depends(get_current_user),
) -> Response:
    """Delete a user.  Unknown ids are accepted silently."""
    service.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
