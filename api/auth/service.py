"""
Auth business logic.
"""

from __future__ import annotations

import logging
import secrets
import time

from fastapi import status

from core.db import Database
from core.errors import AppError

from . import repository, schemas, security

logger = logging.getLogger(__name__)


def _to_user_response(*, user_id: int, username: str, email: str, is_guest: bool) -> schemas.UserResponse:
    return schemas.UserResponse(id=user_id, username=username, email=email, is_guest=is_guest)


async def register(db: Database, payload: schemas.RegisterRequest) -> schemas.AuthResponse:
    existing = await repository.find_user_by_email_or_username(
        db,
        email=payload.email,
        username=payload.username,
    )
    if existing is not None:
        raise AppError("User already exists", status.HTTP_409_CONFLICT)

    password_hash = security.hash_password(payload.password)
    email = repository.normalize_email(payload.email)
    username = payload.username.strip()

    async with db.transaction() as conn:
        user_id = await repository.create_user(
            conn,
            username=username,
            email=email,
            password_hash=password_hash,
        )
        if payload.guest_id is not None:
            migrated = await repository.migrate_guest_data(conn, guest_id=payload.guest_id, user_id=user_id)
            if not migrated:
                logger.warning("Ignoring guestId %s: not a guest account", payload.guest_id)
        await repository.create_profile(conn, user_id=user_id, name=username)

    token = security.build_access_token(user_id=user_id)
    user = _to_user_response(user_id=user_id, username=username, email=email, is_guest=False)
    return schemas.AuthResponse(token=token, user=user)


async def login(db: Database, payload: schemas.LoginRequest) -> schemas.AuthResponse:
    user_row = await repository.get_user_by_email(db, payload.email)
    if user_row is None:
        raise AppError("Invalid credentials", status.HTTP_401_UNAUTHORIZED)

    is_valid = security.verify_password(payload.password, str(user_row.get("password_hash") or ""))
    if not is_valid:
        raise AppError("Invalid credentials", status.HTTP_401_UNAUTHORIZED)

    user_id = int(user_row["id"])
    token = security.build_access_token(user_id=user_id)
    user = _to_user_response(
        user_id=user_id,
        username=str(user_row["username"]),
        email=str(user_row["email"]),
        is_guest=bool(user_row.get("is_guest", False)),
    )
    return schemas.AuthResponse(token=token, user=user)


async def guest_login(db: Database) -> schemas.AuthResponse:
    # The suffix keeps two guests created in the same millisecond apart.
    guest_name = f"guest_{int(time.time() * 1000)}_{secrets.token_hex(3)}"
    guest_email = f"{guest_name}@guest.local"

    async with db.transaction() as conn:
        user_id = await repository.create_user(
            conn,
            username=guest_name,
            email=guest_email,
            password_hash="",
            is_guest=True,
        )
        await repository.create_profile(conn, user_id=user_id, name="Guest User")

    token = security.build_access_token(user_id=user_id, expires_in=security.GUEST_TOKEN_EXPIRES_IN)
    user = _to_user_response(user_id=user_id, username=guest_name, email=guest_email, is_guest=True)
    return schemas.AuthResponse(token=token, user=user)
