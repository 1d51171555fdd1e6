"""
auth.py — Identity collaborator
Sign-in and sessions live with the external identity provider. This module
only verifies the bearer tokens it issues and extracts the owner id.
"""

import logging

from fastapi import Request, HTTPException, status
from jose import jwt, JWTError

from fintrack import config

logger = logging.getLogger(__name__)


def verify_token(token: str) -> dict | None:
    """Decode and verify a JWT token. Returns the payload or None on failure."""
    try:
        return jwt.decode(
            token,
            config.AUTH_JWT_SECRET,
            algorithms=config.AUTH_JWT_ALGORITHMS,
            audience=config.AUTH_JWT_AUDIENCE,
            issuer=config.AUTH_JWT_ISSUER,
            options={"verify_aud": config.AUTH_JWT_AUDIENCE is not None},
        )
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(request: Request) -> str:
    """
    FastAPI dependency — extracts the Bearer token from the Authorization
    header, verifies it, and returns the owner id (the ``sub`` claim).
    Raises HTTP 401 if the token is missing or invalid.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise _unauthorized("Missing or invalid Authorization header")

    payload = verify_token(auth_header.split(" ", 1)[1])
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Token payload missing required claims")

    return str(user_id)
