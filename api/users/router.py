"""
User profile API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth.dependencies import current_user_id
from core.db import Database, get_db

from . import schemas, service

router = APIRouter(prefix="/api/user")


@router.get("/profile")
async def get_profile(
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    result = await service.get_profile(db, user_id)
    return result.model_dump(by_alias=True)


@router.put("/profile")
async def update_profile(
    payload: schemas.ProfileUpdateRequest,
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    return await service.update_profile(db, user_id, payload)


@router.get("/payments")
async def payments(
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> list[dict]:
    return await service.payments(db, user_id)
