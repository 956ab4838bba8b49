"""
Chat message persistence helpers.
"""

from __future__ import annotations

from core.db import Database


async def list_messages(db: Database, *, user_id: int, target_id: str) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, user_id, target_id, sender, text, insight, timestamp
        FROM chat_messages
        WHERE user_id = $1 AND target_id = $2
        ORDER BY timestamp ASC
        """,
        user_id,
        target_id,
    )


async def insert_message(
    db: Database,
    *,
    user_id: int,
    target_id: str,
    sender: str,
    text: str,
    insight: str,
    timestamp: int,
) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO chat_messages (user_id, target_id, sender, text, insight, timestamp)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING id, user_id, target_id, sender, text, insight, timestamp
        """,
        user_id,
        target_id,
        sender,
        text,
        insight,
        timestamp,
    )
    if row is None:
        raise RuntimeError("Failed to insert chat message.")
    return row


async def delete_messages(db: Database, *, user_id: int, target_id: str) -> None:
    await db.execute(
        "DELETE FROM chat_messages WHERE user_id = $1 AND target_id = $2",
        user_id,
        target_id,
    )
