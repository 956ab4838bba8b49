"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

import logging

import jwt
from fastapi import Depends, Header, Request, status

from core.errors import AppError

from . import security

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AppError("No token provided", status.HTTP_401_UNAUTHORIZED)
    return authorization[len(BEARER_PREFIX):]


def verify_token(token: str) -> str:
    """
    Return the `userId` claim of a validly signed token.
    """
    try:
        claims = security.decode_access_token(token)
    except jwt.InvalidTokenError as exc:
        logger.warning("JWT verification error: %s", exc)
        raise AppError("Invalid token", status.HTTP_401_UNAUTHORIZED) from exc

    user_id = claims.get("userId")
    if user_id is None or str(user_id).strip() == "":
        logger.warning("JWT verification error: token has no userId claim")
        raise AppError("Invalid token", status.HTTP_401_UNAUTHORIZED)
    return str(user_id)


async def authenticate(
    request: Request,
    authorization: str | None = Header(default=None),
) -> str:
    token = extract_bearer_token(authorization)
    user_id = verify_token(token)
    request.state.user_id = user_id
    return user_id


async def current_user_id(user_id: str = Depends(authenticate)) -> int:
    """
    Authenticated user id as the integer primary key of `users`.
    """
    # Tokens carry the id as a string; one that is not a row id names nobody.
    if not user_id.isdigit():
        logger.warning("JWT verification error: non-numeric userId %r", user_id)
        raise AppError("Invalid token", status.HTTP_401_UNAUTHORIZED)
    return int(user_id)
