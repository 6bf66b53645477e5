"""
Authentication endpoints for API v1.

``POST /auth/login`` exchanges the configured account's username and
password for a bearer token.  Clients that prefer HTTP Basic do not
need this endpoint.
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel

from user_directory_api.app.core.security import create_access_token


logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, request: Request) -> TokenResponse:
    """Authenticate the account and return a signed access token."""
    settings = request.app.state.settings
    accounts = request.app.state.accounts
    if not accounts.authenticate(credentials.username, credentials.password):
        logger.warning("Failed login for %s", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = create_access_token(
        {"sub": credentials.username},
        secret_key=settings.secret_key,
        expires_delta=settings.access_token_expire_minutes * 60,
    )
    logger.info("Issued access token for %s", credentials.username)
    return TokenResponse(access_token=token)
