"""
Auth persistence helpers.
"""

from __future__ import annotations

import asyncpg

from core.db import Database


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def find_user_by_email_or_username(db: Database, *, email: str, username: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id
        FROM users
        WHERE lower(email) = lower($1) OR username = $2
        """,
        normalize_email(email),
        username.strip(),
    )


async def get_user_by_email(db: Database, email: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, username, email, password_hash, is_guest
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def create_user(
    conn: asyncpg.Connection,
    *,
    username: str,
    email: str,
    password_hash: str,
    is_guest: bool = False,
) -> int:
    row = await conn.fetchrow(
        """
        INSERT INTO users (username, email, password_hash, is_guest)
        VALUES ($1, $2, $3, $4)
        RETURNING id
        """,
        username.strip(),
        normalize_email(email),
        password_hash,
        is_guest,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return int(row["id"])


async def create_profile(conn: asyncpg.Connection, *, user_id: int, name: str) -> None:
    await conn.execute(
        "INSERT INTO user_profiles (user_id, name) VALUES ($1, $2)",
        user_id,
        name,
    )


async def migrate_guest_data(conn: asyncpg.Connection, *, guest_id: int, user_id: int) -> bool:
    """
    Move a guest's chat history to `user_id` and delete the guest account.

    Returns False (and touches nothing) if `guest_id` is not a guest account.
    """
    guest = await conn.fetchrow(
        "SELECT id FROM users WHERE id = $1 AND is_guest = TRUE",
        guest_id,
    )
    if guest is None:
        return False

    await conn.execute(
        "UPDATE chat_messages SET user_id = $1 WHERE user_id = $2",
        user_id,
        guest_id,
    )
    await conn.execute("DELETE FROM users WHERE id = $1", guest_id)
    return True
