"""
Simulated-chat history endpoints.

Messages are stored per (user, target) pair so the persona simulator can be
resumed later.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth.dependencies import current_user_id
from core.db import Database, get_db

from . import repository, schemas

router = APIRouter(prefix="/api/chat")


@router.get("/{target_id}")
async def list_messages(
    target_id: str,
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> list[dict]:
    return await repository.list_messages(db, user_id=user_id, target_id=target_id)


@router.post("/{target_id}", status_code=status.HTTP_201_CREATED)
async def save_message(
    target_id: str,
    payload: schemas.SaveMessageRequest,
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    return await repository.insert_message(
        db,
        user_id=user_id,
        target_id=target_id,
        sender=payload.sender,
        text=payload.text,
        insight=payload.insight or "",
        timestamp=payload.timestamp,
    )


@router.delete("/{target_id}")
async def clear_messages(
    target_id: str,
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    await repository.delete_messages(db, user_id=user_id, target_id=target_id)
    return {"success": True}
