"""
Target profile endpoints.

A target and its saved analyses are only visible to the user who created it;
any other id is reported as "Target not found".
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth.dependencies import current_user_id
from core.db import Database, get_db

from . import schemas, service

router = APIRouter(prefix="/api/targets")


@router.get("")
async def list_targets(
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> list[dict]:
    targets = await service.list_targets(db, user_id)
    return [target.model_dump(by_alias=True) for target in targets]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_target(
    payload: schemas.TargetCreateRequest,
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    target = await service.create_target(db, user_id, payload)
    return target.model_dump(by_alias=True)


@router.get("/{target_id}")
async def get_target(
    target_id: str,
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    target = await service.get_target(db, user_id, target_id)
    return target.model_dump(by_alias=True)


@router.put("/{target_id}")
async def update_target(
    target_id: str,
    payload: schemas.TargetUpdateRequest,
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    target = await service.update_target(db, user_id, target_id, payload)
    return target.model_dump(by_alias=True)


@router.delete("/{target_id}")
async def delete_target(
    target_id: str,
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    return await service.delete_target(db, user_id, target_id)


@router.post("/{target_id}/personality")
async def save_personality_report(
    target_id: str,
    report: schemas.SavedPersonalityReport,
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    return await service.save_personality_report(db, user_id, target_id, report)


@router.post("/{target_id}/social-analysis")
async def save_social_analysis(
    target_id: str,
    analysis: schemas.SavedSocialAnalysis,
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    return await service.save_social_analysis(db, user_id, target_id, analysis)


@router.post("/{target_id}/post-analysis")
async def save_post_analysis(
    target_id: str,
    analysis: schemas.SavedPostAnalysis,
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    return await service.save_post_analysis(db, user_id, target_id, analysis)


@router.post("/{target_id}/relationship-report")
async def save_relationship_report(
    target_id: str,
    report: schemas.SavedRelationshipReport,
    user_id: int = Depends(current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    return await service.save_relationship_report(db, user_id, target_id, report)
