"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core.db import Database, get_db

from . import schemas, service

router = APIRouter(prefix="/api/auth")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: schemas.RegisterRequest,
    db: Database = Depends(get_db),
) -> dict:
    result = await service.register(db, payload)
    return result.model_dump(by_alias=True)


@router.post("/login")
async def login(
    payload: schemas.LoginRequest,
    db: Database = Depends(get_db),
) -> dict:
    result = await service.login(db, payload)
    return result.model_dump(by_alias=True)


@router.post("/guest")
async def guest(db: Database = Depends(get_db)) -> dict:
    result = await service.guest_login(db)
    return result.model_dump(by_alias=True)
