"""
Target profile persistence helpers.

Every target query is scoped by `user_id`; report tables hang off
`target_profiles` and are only reached after an ownership check.
"""

from __future__ import annotations

import json

from core.db import Database

from . import schemas

_TARGET_COLUMNS = """
    id, name, gender, occupation, bio, age, avatar_b64, additional_images,
    social_links, avatar_analysis, general_summary, created_at, updated_at
"""


async def list_targets(db: Database, user_id: int) -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {_TARGET_COLUMNS}
        FROM target_profiles
        WHERE user_id = $1
        ORDER BY created_at DESC
        """,
        user_id,
    )


async def get_target(db: Database, *, target_id: int, user_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_TARGET_COLUMNS}
        FROM target_profiles
        WHERE id = $1 AND user_id = $2
        """,
        target_id,
        user_id,
    )


async def target_exists(db: Database, *, target_id: int, user_id: int) -> bool:
    row = await db.fetch_one(
        "SELECT id FROM target_profiles WHERE id = $1 AND user_id = $2",
        target_id,
        user_id,
    )
    return row is not None


async def create_target(db: Database, *, user_id: int, payload: schemas.TargetCreateRequest) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO target_profiles
            (user_id, name, gender, occupation, bio, age, avatar_b64,
             additional_images, social_links, avatar_analysis, general_summary)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
        RETURNING {_TARGET_COLUMNS}
        """,
        user_id,
        payload.name.strip(),
        payload.gender,
        payload.occupation,
        payload.bio,
        payload.age,
        payload.avatar_b64,
        payload.additional_images,
        payload.social_links,
        payload.avatar_analysis,
        payload.general_summary,
    )
    if row is None:
        raise RuntimeError("Failed to create target.")
    return row


async def update_target(
    db: Database,
    *,
    target_id: int,
    user_id: int,
    payload: schemas.TargetUpdateRequest,
) -> dict | None:
    return await db.fetch_one(
        f"""
        UPDATE target_profiles SET
            name = COALESCE($1, name),
            gender = COALESCE($2, gender),
            occupation = COALESCE($3, occupation),
            bio = COALESCE($4, bio),
            age = COALESCE($5, age),
            avatar_b64 = COALESCE($6, avatar_b64),
            additional_images = COALESCE($7, additional_images),
            social_links = COALESCE($8, social_links),
            avatar_analysis = COALESCE($9, avatar_analysis),
            general_summary = COALESCE($10, general_summary),
            updated_at = now()
        WHERE id = $11 AND user_id = $12
        RETURNING {_TARGET_COLUMNS}
        """,
        payload.name,
        payload.gender,
        payload.occupation,
        payload.bio,
        payload.age,
        payload.avatar_b64,
        payload.additional_images,
        payload.social_links,
        payload.avatar_analysis,
        payload.general_summary,
        target_id,
        user_id,
    )


async def delete_target(db: Database, *, target_id: int, user_id: int) -> bool:
    # Saved reports go with it (ON DELETE CASCADE).
    row = await db.fetch_one(
        "DELETE FROM target_profiles WHERE id = $1 AND user_id = $2 RETURNING id",
        target_id,
        user_id,
    )
    return row is not None


# --- Saved analyses ----------------------------------------------------------


async def latest_personality_report(db: Database, target_id: int) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, big_five, mbti, emotional_stability, core_interests,
               communication_style, summary, dating_advice, avatar_analysis,
               data_sufficiency, tags, generated_at
        FROM personality_reports
        WHERE target_id = $1
        ORDER BY created_at DESC, id DESC
        LIMIT 1
        """,
        target_id,
    )


async def list_social_analyses(db: Database, target_id: int) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, url, platform, handle, timeframe, report_tags, surface_subtext,
               target_audience, persona_impression, performance_purpose,
               suggested_replies, report, timestamp
        FROM social_analysis_results
        WHERE target_id = $1
        ORDER BY created_at DESC, id DESC
        """,
        target_id,
    )


async def list_post_analyses(db: Database, target_id: int) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, content, images, analysis, suggested_replies, tags, timestamp
        FROM social_post_analysis
        WHERE target_id = $1
        ORDER BY created_at DESC, id DESC
        """,
        target_id,
    )


async def list_relationship_reports(db: Database, target_id: int) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, compatibility_score, status_assessment, partner_personality_analysis,
               green_flags, red_flags, communication_dos, communication_donts,
               magic_topics, strategy, date_ideas, ice_breakers, tags,
               goal_context, generated_at
        FROM relationship_reports
        WHERE target_id = $1
        ORDER BY created_at DESC, id DESC
        """,
        target_id,
    )


async def insert_personality_report(db: Database, target_id: int, report: schemas.SavedPersonalityReport) -> None:
    await db.execute(
        """
        INSERT INTO personality_reports
            (target_id, big_five, mbti, emotional_stability, core_interests,
             communication_style, summary, dating_advice, avatar_analysis,
             data_sufficiency, tags, generated_at)
        VALUES ($1, $2::jsonb, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
        """,
        target_id,
        json.dumps(report.big_five.model_dump()),
        report.mbti,
        report.emotional_stability,
        report.core_interests,
        report.communication_style,
        report.summary,
        report.dating_advice,
        report.avatar_analysis,
        report.data_sufficiency,
        report.tags,
        report.generated_at,
    )


async def insert_social_analysis(db: Database, target_id: int, analysis: schemas.SavedSocialAnalysis) -> None:
    await db.execute(
        """
        INSERT INTO social_analysis_results
            (target_id, url, platform, handle, timeframe, report_tags, surface_subtext,
             target_audience, persona_impression, performance_purpose,
             suggested_replies, report, timestamp)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13)
        """,
        target_id,
        analysis.url,
        analysis.platform,
        analysis.handle,
        analysis.timeframe,
        analysis.report_tags,
        analysis.surface_subtext,
        analysis.target_audience,
        analysis.persona_impression,
        analysis.performance_purpose,
        analysis.suggested_replies,
        analysis.report,
        analysis.timestamp,
    )


async def insert_post_analysis(db: Database, target_id: int, analysis: schemas.SavedPostAnalysis) -> None:
    await db.execute(
        """
        INSERT INTO social_post_analysis
            (target_id, content, images, analysis, suggested_replies, tags, timestamp)
        VALUES ($1, $2, $3, $4, $5, $6, $7)
        """,
        target_id,
        analysis.content,
        analysis.images,
        analysis.analysis,
        analysis.suggested_replies,
        analysis.tags,
        analysis.timestamp,
    )


async def insert_relationship_report(
    db: Database,
    *,
    user_id: int,
    target_id: int,
    report: schemas.SavedRelationshipReport,
) -> None:
    await db.execute(
        """
        INSERT INTO relationship_reports
            (user_id, target_id, compatibility_score, status_assessment,
             partner_personality_analysis, green_flags, red_flags, communication_dos,
             communication_donts, magic_topics, strategy, date_ideas, ice_breakers,
             tags, goal_context, generated_at)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12::jsonb, $13, $14, $15, $16)
        """,
        user_id,
        target_id,
        report.compatibility_score,
        report.status_assessment,
        report.partner_personality_analysis,
        report.green_flags,
        report.red_flags,
        report.communication_dos,
        report.communication_donts,
        report.magic_topics,
        report.strategy,
        json.dumps([idea.model_dump() for idea in report.date_ideas], ensure_ascii=False),
        report.ice_breakers,
        report.tags,
        report.goal_context,
        report.generated_at,
    )
