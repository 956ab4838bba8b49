"""
Target profile business logic.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import status
from pydantic import BaseModel

from core.db import Database
from core.errors import AppError

from . import repository, schemas


def _not_found() -> AppError:
    return AppError("Target not found", status.HTTP_404_NOT_FOUND)


def _target_id(raw: str) -> int:
    # Target ids are SERIAL keys; anything else can't name a row.
    if not raw.isdigit():
        raise _not_found()
    return int(raw)


def _decode_json(value: Any) -> Any:
    # asyncpg hands JSONB back as text unless a codec is registered.
    return json.loads(value) if isinstance(value, str) else value


def _saved(model: type[BaseModel], row: dict, *json_columns: str) -> Any:
    data = {**row, "id": str(row["id"])}
    for column in json_columns:
        data[column] = _decode_json(data.get(column))
    return model.model_validate(data)


async def _require_target(db: Database, user_id: int, raw_id: str) -> int:
    target_id = _target_id(raw_id)
    if not await repository.target_exists(db, target_id=target_id, user_id=user_id):
        raise _not_found()
    return target_id


async def list_targets(db: Database, user_id: int) -> list[schemas.Target]:
    rows = await repository.list_targets(db, user_id)
    return [schemas.Target.model_validate(row) for row in rows]


async def get_target(db: Database, user_id: int, raw_id: str) -> schemas.TargetDetail:
    target_id = _target_id(raw_id)
    row = await repository.get_target(db, target_id=target_id, user_id=user_id)
    if row is None:
        raise _not_found()

    report = await repository.latest_personality_report(db, target_id)
    social = await repository.list_social_analyses(db, target_id)
    posts = await repository.list_post_analyses(db, target_id)
    consultations = await repository.list_relationship_reports(db, target_id)

    return schemas.TargetDetail.model_validate(
        {
            **row,
            "personality_report": (
                _saved(schemas.SavedPersonalityReport, report, "big_five") if report is not None else None
            ),
            "social_analysis_history": [_saved(schemas.SavedSocialAnalysis, r) for r in social],
            "post_analysis_history": [_saved(schemas.SavedPostAnalysis, r) for r in posts],
            "consultation_history": [
                _saved(schemas.SavedRelationshipReport, r, "date_ideas") for r in consultations
            ],
        }
    )


async def create_target(db: Database, user_id: int, payload: schemas.TargetCreateRequest) -> schemas.Target:
    row = await repository.create_target(db, user_id=user_id, payload=payload)
    return schemas.Target.model_validate(row)


async def update_target(
    db: Database,
    user_id: int,
    raw_id: str,
    payload: schemas.TargetUpdateRequest,
) -> schemas.Target:
    row = await repository.update_target(db, target_id=_target_id(raw_id), user_id=user_id, payload=payload)
    if row is None:
        raise _not_found()
    return schemas.Target.model_validate(row)


async def delete_target(db: Database, user_id: int, raw_id: str) -> dict[str, bool]:
    if not await repository.delete_target(db, target_id=_target_id(raw_id), user_id=user_id):
        raise _not_found()
    return {"success": True}


async def save_personality_report(
    db: Database,
    user_id: int,
    raw_id: str,
    report: schemas.SavedPersonalityReport,
) -> dict[str, bool]:
    target_id = await _require_target(db, user_id, raw_id)
    await repository.insert_personality_report(db, target_id, report)
    return {"success": True}


async def save_social_analysis(
    db: Database,
    user_id: int,
    raw_id: str,
    analysis: schemas.SavedSocialAnalysis,
) -> dict[str, bool]:
    target_id = await _require_target(db, user_id, raw_id)
    await repository.insert_social_analysis(db, target_id, analysis)
    return {"success": True}


async def save_post_analysis(
    db: Database,
    user_id: int,
    raw_id: str,
    analysis: schemas.SavedPostAnalysis,
) -> dict[str, bool]:
    target_id = await _require_target(db, user_id, raw_id)
    await repository.insert_post_analysis(db, target_id, analysis)
    return {"success": True}


async def save_relationship_report(
    db: Database,
    user_id: int,
    raw_id: str,
    report: schemas.SavedRelationshipReport,
) -> dict[str, bool]:
    target_id = await _require_target(db, user_id, raw_id)
    await repository.insert_relationship_report(db, user_id=user_id, target_id=target_id, report=report)
    return {"success": True}
