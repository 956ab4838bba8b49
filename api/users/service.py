"""
User profile business logic.
"""

from __future__ import annotations

from fastapi import status

from core.db import Database
from core.errors import AppError

from . import repository, schemas


def _to_profile_response(row: dict) -> schemas.UserProfileResponse:
    profile = schemas.Profile(
        name=row.get("name") or row["username"],
        occupation=row.get("occupation") or "",
        bio=row.get("bio") or "",
        age=row.get("age") or "",
        avatar_b64=row.get("avatar_b64") or "",
        additional_images=list(row.get("additional_images") or []),
        social_links=row.get("social_links") or "",
        ai_model_preference=row.get("ai_model_preference"),
        analysis_model_preference=row.get("analysis_model_preference"),
        api_endpoint=row.get("api_endpoint"),
    )
    return schemas.UserProfileResponse(
        id=int(row["id"]),
        username=str(row["username"]),
        email=str(row["email"]),
        is_guest=bool(row.get("is_guest", False)),
        profile=profile,
    )


async def get_profile(db: Database, user_id: int) -> schemas.UserProfileResponse:
    row = await repository.get_user_with_profile(db, user_id)
    if row is None:
        raise AppError("User not found", status.HTTP_404_NOT_FOUND)
    return _to_profile_response(row)


async def update_profile(db: Database, user_id: int, payload: schemas.ProfileUpdateRequest) -> dict[str, bool]:
    await repository.update_profile(db, user_id, payload)
    return {"success": True}


async def payments(db: Database, user_id: int) -> list[dict]:
    return await repository.list_payments(db, user_id)
