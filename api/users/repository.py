"""
User profile persistence helpers.
"""

from __future__ import annotations

from core.db import Database

from . import schemas


async def get_user_with_profile(db: Database, user_id: int) -> dict | None:
    return await db.fetch_one(
        """
        SELECT u.id, u.username, u.email, u.is_guest,
               p.name, p.occupation, p.bio, p.age, p.avatar_b64,
               p.additional_images, p.social_links,
               p.ai_model_preference, p.analysis_model_preference, p.api_endpoint
        FROM users u
        LEFT JOIN user_profiles p ON u.id = p.user_id
        WHERE u.id = $1
        """,
        user_id,
    )


async def update_profile(db: Database, user_id: int, payload: schemas.ProfileUpdateRequest) -> None:
    await db.execute(
        """
        UPDATE user_profiles SET
            name = COALESCE($1, name),
            occupation = COALESCE($2, occupation),
            bio = COALESCE($3, bio),
            age = COALESCE($4, age),
            avatar_b64 = COALESCE($5, avatar_b64),
            additional_images = COALESCE($6, additional_images),
            social_links = COALESCE($7, social_links),
            ai_model_preference = COALESCE($8, ai_model_preference),
            analysis_model_preference = COALESCE($9, analysis_model_preference),
            api_endpoint = COALESCE($10, api_endpoint),
            updated_at = now()
        WHERE user_id = $11
        """,
        payload.name,
        payload.occupation,
        payload.bio,
        payload.age,
        payload.avatar_b64,
        payload.additional_images,
        payload.social_links,
        payload.ai_model_preference,
        payload.analysis_model_preference,
        payload.api_endpoint,
        user_id,
    )


async def list_payments(db: Database, user_id: int) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, user_id, amount, currency, description, status, timestamp
        FROM payment_transactions
        WHERE user_id = $1
        ORDER BY timestamp DESC
        """,
        user_id,
    )
