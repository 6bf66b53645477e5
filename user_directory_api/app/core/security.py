"""
Security helpers for password hashing and authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC-SHA256 signatures and base64url encoding.  Tokens carry a
subject (``sub``) and an expiration timestamp (``exp``) and are signed
with ``Settings.secret_key``.  Passwords are hashed with PBKDF2-HMAC
SHA-256 and compared in constant time.

Requests authenticate in one of two ways:

* ``Authorization: Basic ...`` with the configured account, or
* ``Authorization: Bearer <token>`` with a token from ``POST /auth/login``.

Settings are read from ``request.app.state.settings`` so each
application instance carries its own secret and account.
"""

import base64
import binascii
import hashlib
import hmac
import json
import logging
import os
import time
from typing import Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings


logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC-SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, str], secret_key: str, expires_delta: int) -> str:
    """Create a signed JWT token with the given payload.

    The payload is extended with an ``exp`` field representing the
    expiration time as a UNIX timestamp.  The token is a string of the
    form ``header.payload.signature``, each part base64url encoded.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. ``{"sub": "user"}``).
    secret_key : str
        HMAC key used for the signature.
    expires_delta : int
        Lifetime of the token in seconds.

    Returns
    -------
    str
        A signed JWT token.
    """
    to_encode = dict(data)
    to_encode["exp"] = int(time.time()) + expires_delta
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, secret_key: str) -> Optional[Dict[str, str]]:
    """Verify and decode a JWT token.

    Returns the payload if the signature matches and the token has not
    expired, otherwise ``None``.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    try:
        actual_sig = _b64_url_decode(signature_b64)
        if not hmac.compare_digest(_sign(signing_input, secret_key), actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        if not isinstance(data, dict) or data.get("exp") is None:
            return None
        if int(data["exp"]) < int(time.time()):
            return None
    except (binascii.Error, UnicodeDecodeError, ValueError, TypeError, OverflowError):
        return None
    return data


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    Returns the random 16-byte salt and the derived key, both hex
    encoded and separated by ``$``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored salt+hash string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


class AccountStore:
    """The single account allowed to modify users.

    Only the hashed password is kept in memory.
    """

    def __init__(self, username: str, password: str) -> None:
        self.username = username
        self._password_hash = hash_password(password)

    def authenticate(self, username: Optional[str], password: Optional[str]) -> bool:
        if username is None or password is None:
            return False
        # Hash check runs for every username.
        password_ok = verify_password(password, self._password_hash)
        return hmac.compare_digest(username.encode("utf-8"), self.username.encode("utf-8")) and password_ok


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": 'Basic realm="users", Bearer'},
    )


def _parse_basic(token: str) -> Optional[tuple]:
    try:
        decoded = base64.b64decode(token, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return username, password


security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Dict[str, str]:
    """Dependency that retrieves the current authenticated caller.

    When security is disabled every request is treated as the
    anonymous caller.  Otherwise a valid Basic or Bearer credential is
    required and an HTTP 401 error is raised if it is missing or wrong.
    """
    settings: Settings = request.app.state.settings
    if not settings.security_enabled:
        return {"sub": "anonymous"}

    header = request.headers.get("Authorization")
    if not header:
        raise _unauthorized("Not authenticated")

    scheme, _, value = header.partition(" ")
    accounts: AccountStore = request.app.state.accounts

    if scheme.lower() == "basic":
        parsed = _parse_basic(value.strip())
        if parsed and accounts.authenticate(*parsed):
            return {"sub": parsed[0]}
        logger.warning("Rejected basic credentials for %s", request.url.path)
        raise _unauthorized("Invalid credentials")

    if scheme.lower() == "bearer":
        # HTTPBearer yields no credentials for an empty token.
        token = credentials.credentials if credentials is not None else ""
        payload = decode_access_token(token, settings.secret_key) if token else None
        if payload and payload.get("sub") == accounts.username:
            return payload
        logger.warning("Rejected bearer token for %s", request.url.path)
        raise _unauthorized("Invalid or expired token")

    raise _unauthorized("Unsupported authorization scheme")
